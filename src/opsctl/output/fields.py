"""Field list parsing and per-type width resolution.

A field list is a comma-separated string (or an already split sequence)
of field names. A token written as ``name=20`` selects ``name`` and sets
its display width for the rest of the run.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from opsctl.errors import FieldSpecError
from opsctl.models.records import TypeProfile

FieldSpec = str | Sequence[str] | None

# Returned when a non-empty field list parses to no usable names.
NO_FIELDS: tuple[str, ...] = ()

_WIDTH_TOKEN = re.compile(r"^(?P<name>[^=\s]+)=(?P<width>\d+)$")


@dataclass(frozen=True)
class FieldSelection:
    fields: tuple[str, ...]
    profile: TypeProfile

    @property
    def is_empty(self) -> bool:
        return not self.fields


def split_field_spec(spec: str | Sequence[str]) -> list[str]:
    """Split a field list into stripped, non-empty tokens."""
    if isinstance(spec, str):
        raw = spec.split(",")
    else:
        raw = [part for item in spec for part in item.split(",")]
    return [token.strip() for token in raw if token.strip()]


def parse_field_spec(spec: str | Sequence[str]) -> tuple[tuple[str, ...], dict[str, int]]:
    """Parse a field list into ordered names and width overrides."""
    names: list[str] = []
    overrides: dict[str, int] = {}
    for token in split_field_spec(spec):
        match = _WIDTH_TOKEN.match(token)
        if match is None:
            if "=" in token:
                raise FieldSpecError(f"Invalid field width in '{token}' (expected name=N)")
            names.append(token)
            continue
        width = int(match.group("width"))
        if width <= 0:
            raise FieldSpecError(f"Field width for '{match.group('name')}' must be positive")
        names.append(match.group("name"))
        overrides[match.group("name")] = width
    return tuple(names), overrides


def resolve_fields(profile: TypeProfile, spec: FieldSpec) -> FieldSelection:
    """Resolve the fields to display and the profile to size them with.

    An empty spec selects the profile's default fields. Width overrides are
    applied to the returned profile; the input profile is left untouched.
    """
    if spec is None or (isinstance(spec, str) and not spec.strip()) or (
        not isinstance(spec, str) and len(spec) == 0
    ):
        return FieldSelection(fields=profile.fields, profile=profile)

    names, overrides = parse_field_spec(spec)
    if not names:
        return FieldSelection(fields=NO_FIELDS, profile=profile)
    return FieldSelection(fields=names, profile=profile.with_lengths(overrides))
