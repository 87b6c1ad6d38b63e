from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

Record = dict[str, Any]


class Service(StrEnum):
    CMDB = "cmdb"
    INSTANCE = "instance"
    MONITOR = "monitor"


class RecordType(StrEnum):
    SYSTEM = "system"
    ENVIRONMENT = "environment"
    INSTANCE = "instance"
    SERVICE = "service"
    HOST = "host"

    @property
    def service(self) -> Service:
        return RECORD_SERVICES[self]


RECORD_SERVICES: dict[RecordType, Service] = {
    RecordType.SYSTEM: Service.CMDB,
    RecordType.ENVIRONMENT: Service.CMDB,
    RecordType.INSTANCE: Service.INSTANCE,
    RecordType.SERVICE: Service.MONITOR,
    RecordType.HOST: Service.MONITOR,
}


@dataclass(frozen=True)
class TypeProfile:
    """Default field list and column widths for one record type."""

    record_type: RecordType
    fields: tuple[str, ...]
    lengths: dict[str, int] = field(default_factory=dict)

    def width(self, name: str) -> int:
        """Display width for a field, falling back to the length of its name."""
        configured = self.lengths.get(name, 0)
        return configured if configured > 0 else len(name)

    def with_lengths(self, overrides: dict[str, int]) -> "TypeProfile":
        """Return a copy with the given widths applied on top of the current ones."""
        if not overrides:
            return self
        return replace(self, lengths={**self.lengths, **overrides})
