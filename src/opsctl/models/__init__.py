from opsctl.models.records import (
    RECORD_SERVICES,
    Record,
    RecordType,
    Service,
    TypeProfile,
)

__all__ = [
    "RECORD_SERVICES",
    "Record",
    "RecordType",
    "Service",
    "TypeProfile",
]
