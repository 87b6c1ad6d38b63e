from __future__ import annotations

from pydantic import BaseModel, field_validator

from opsctl.models.records import RecordType, TypeProfile


class ServicesConfig(BaseModel):
    """Base URLs of the backing HTTP services."""

    cmdb_url: str = "http://localhost:8000"
    instance_url: str = "http://localhost:8001"
    monitor_url: str = "http://localhost:8002"
    timeout: float = 30.0


class PollConfig(BaseModel):
    """Defaults for the waitfor command."""

    interval: int = 5
    timeout: int = 300

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v < 0:
            raise ValueError("'interval' must not be negative")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("'timeout' must be a positive integer")
        return v


class ProfileConfig(BaseModel):
    """Pydantic model for one record type's field list and widths."""

    fields: list[str] | None = None
    lengths: dict[str, int] = {}

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[str] | None) -> list[str] | None:
        if v is not None and not v:
            raise ValueError("'fields' must not be empty")
        return v

    @field_validator("lengths")
    @classmethod
    def validate_lengths(cls, v: dict[str, int]) -> dict[str, int]:
        for name, width in v.items():
            if width <= 0:
                raise ValueError(f"width of '{name}' must be a positive integer")
        return v

    def merge_into(self, base: TypeProfile) -> TypeProfile:
        fields = tuple(self.fields) if self.fields else base.fields
        return TypeProfile(
            record_type=base.record_type,
            fields=fields,
            lengths={**base.lengths, **self.lengths},
        )


class OpsctlConfig(BaseModel):
    """Top-level configuration loaded from opsctl.yaml."""

    services: ServicesConfig = ServicesConfig()
    poll: PollConfig = PollConfig()
    profiles: dict[RecordType, ProfileConfig] = {}
