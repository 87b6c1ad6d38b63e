from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from opsctl.config.defaults import DEFAULT_PROFILES
from opsctl.config.registry import ProfileRegistry
from opsctl.config.schema import OpsctlConfig
from opsctl.errors import OpsctlError

log = structlog.get_logger()

DEFAULT_CONFIG_PATH = Path("./opsctl.yaml")


class ConfigError(OpsctlError):
    """Raised when config loading or validation fails."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class ConfigLoader:
    """Reads opsctl.yaml, validates it, and builds the per-run profile registry."""

    def __init__(self, path: Path = DEFAULT_CONFIG_PATH) -> None:
        self.path = path

    def load(self) -> OpsctlConfig:
        """Load the config file. Returns defaults if it does not exist."""
        if not self.path.exists():
            log.debug("config file not found, using defaults", path=str(self.path))
            return OpsctlConfig()
        if not self.path.is_file():
            raise ConfigError(self.path, "Config path is not a file")

        try:
            raw = yaml.safe_load(self.path.read_text())
        except yaml.YAMLError as e:
            raise ConfigError(self.path, f"Invalid YAML: {e}") from e

        if raw is None:
            return OpsctlConfig()
        if not isinstance(raw, dict):
            raise ConfigError(self.path, "Expected a YAML mapping at top level")

        try:
            return OpsctlConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(self.path, f"Validation error: {e}") from e

    def load_profiles(self, config: OpsctlConfig | None = None) -> ProfileRegistry:
        """Merge configured profiles over the built-in defaults."""
        if config is None:
            config = self.load()
        profiles = dict(DEFAULT_PROFILES)
        for record_type, profile_config in config.profiles.items():
            profiles[record_type] = profile_config.merge_into(profiles[record_type])
        return ProfileRegistry(profiles)
