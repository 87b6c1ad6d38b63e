from __future__ import annotations

from collections.abc import Iterator

from opsctl.models.records import RecordType, TypeProfile
from opsctl.output.fields import FieldSelection, FieldSpec, resolve_fields


class ProfileRegistry:
    """Type-indexed collection of TypeProfiles for one CLI run.

    Width overrides picked up while resolving a field list replace the
    stored profile, so later lookups in the same run see them.
    """

    def __init__(self, profiles: dict[RecordType, TypeProfile]) -> None:
        missing = set(RecordType) - set(profiles)
        if missing:
            names = ", ".join(sorted(missing))
            raise ValueError(f"No profile configured for: {names}")
        self._profiles = dict(profiles)

    def get(self, record_type: RecordType | str) -> TypeProfile:
        try:
            return self._profiles[RecordType(record_type)]
        except ValueError:
            raise KeyError(f"Unknown record type '{record_type}'") from None

    def resolve(self, record_type: RecordType | str, spec: FieldSpec) -> FieldSelection:
        selection = resolve_fields(self.get(record_type), spec)
        self._profiles[selection.profile.record_type] = selection.profile
        return selection

    def __iter__(self) -> Iterator[TypeProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._profiles
