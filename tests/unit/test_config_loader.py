from pathlib import Path

import pytest

from opsctl.config.loader import ConfigError, ConfigLoader
from opsctl.models.records import RecordType


class TestConfigLoader:
    def test_load_valid(self, fixtures_dir: Path) -> None:
        config = ConfigLoader(fixtures_dir / "valid_config.yaml").load()
        assert config.services.cmdb_url == "http://cmdb.example.test"
        assert config.services.timeout == 10
        assert config.poll.interval == 2
        assert config.poll.timeout == 60
        assert set(config.profiles) == {RecordType.SYSTEM, RecordType.HOST}

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        config = ConfigLoader(tmp_path / "nope.yaml").load()
        assert config.poll.interval == 5
        assert config.profiles == {}

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "opsctl.yaml"
        path.write_text("")
        assert ConfigLoader(path).load().services.timeout == 30.0

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not a file"):
            ConfigLoader(tmp_path).load()

    def test_invalid_yaml(self, fixtures_dir: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ConfigLoader(fixtures_dir / "invalid_yaml.yaml").load()

    def test_not_a_mapping(self, fixtures_dir: Path) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader(fixtures_dir / "not_a_mapping.yaml").load()

    def test_unknown_profile_type(self, fixtures_dir: Path) -> None:
        with pytest.raises(ConfigError, match="Validation error"):
            ConfigLoader(fixtures_dir / "invalid_profile_type.yaml").load()

    def test_non_positive_width(self, fixtures_dir: Path) -> None:
        with pytest.raises(ConfigError, match="positive"):
            ConfigLoader(fixtures_dir / "invalid_width.yaml").load()

    def test_error_carries_path(self, fixtures_dir: Path) -> None:
        path = fixtures_dir / "invalid_yaml.yaml"
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader(path).load()
        assert exc_info.value.path == path
        assert exc_info.value.exit_code == 1


class TestLoadProfiles:
    def test_defaults_without_config(self, tmp_path: Path, default_profiles) -> None:
        registry = ConfigLoader(tmp_path / "nope.yaml").load_profiles()
        assert len(registry) == len(RecordType)
        assert registry.get(RecordType.INSTANCE) == default_profiles[RecordType.INSTANCE]

    def test_config_merges_over_defaults(self, fixtures_dir: Path) -> None:
        registry = ConfigLoader(fixtures_dir / "valid_config.yaml").load_profiles()
        system = registry.get("system")
        assert system.fields == ("name", "status")
        assert system.width("name") == 40
        assert system.width("status") == 10

    def test_lengths_only_keeps_default_fields(self, fixtures_dir: Path, default_profiles) -> None:
        registry = ConfigLoader(fixtures_dir / "valid_config.yaml").load_profiles()
        host = registry.get(RecordType.HOST)
        assert host.fields == default_profiles[RecordType.HOST].fields
        assert host.width("address") == 39
