"""Built-in type profiles, used unless opsctl.yaml overrides them."""

from opsctl.models.records import RecordType, TypeProfile

DEFAULT_PROFILES: dict[RecordType, TypeProfile] = {
    RecordType.SYSTEM: TypeProfile(
        record_type=RecordType.SYSTEM,
        fields=("name", "environment", "status", "owner"),
        lengths={"name": 30, "environment": 12, "status": 10, "owner": 16},
    ),
    RecordType.ENVIRONMENT: TypeProfile(
        record_type=RecordType.ENVIRONMENT,
        fields=("name", "parent", "description"),
        lengths={"name": 20, "parent": 20, "description": 40},
    ),
    RecordType.INSTANCE: TypeProfile(
        record_type=RecordType.INSTANCE,
        fields=("id", "name", "state", "flavor", "ip"),
        lengths={"id": 36, "name": 24, "state": 10, "flavor": 12, "ip": 15},
    ),
    RecordType.SERVICE: TypeProfile(
        record_type=RecordType.SERVICE,
        fields=("host", "service", "state", "output"),
        lengths={"host": 24, "service": 24, "state": 8, "output": 50},
    ),
    RecordType.HOST: TypeProfile(
        record_type=RecordType.HOST,
        fields=("name", "address", "state"),
        lengths={"name": 30, "address": 15, "state": 8},
    ),
}
