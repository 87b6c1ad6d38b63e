"""Render records as aligned text, CSV or JSON.

Renderers return the formatted text and never write to the terminal.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from opsctl.models.records import Record, TypeProfile

if TYPE_CHECKING:
    from opsctl.hierarchy.tree import TreeNode


class OutputFormat(StrEnum):
    TEXT = "text"
    CSV = "csv"
    JSON = "json"


@dataclass(frozen=True)
class RenderFlags:
    header: bool = True
    label: bool = True
    feedback: bool = True

    @classmethod
    def for_format(
        cls,
        fmt: OutputFormat | str,
        header: bool = True,
        label: bool = True,
        feedback: bool = True,
    ) -> "RenderFlags":
        """Flags adjusted for a format: csv and json drop the footer, json drops the header."""
        fmt = OutputFormat(fmt)
        if fmt is not OutputFormat.TEXT:
            feedback = False
        if fmt is OutputFormat.JSON:
            header = False
        return cls(header=header, label=label, feedback=feedback)


def _display(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _text_row(values: Iterable[Any], fields: Sequence[str], profile: TypeProfile) -> str:
    cells = [_text_value(v).ljust(profile.width(f)) for v, f in zip(values, fields)]
    return " ".join(cells).rstrip()


def _text_value(value: Any) -> str:
    # One line per value in text output.
    return _display(value).replace("\r", "\\r").replace("\n", "\\n")


def _csv_line(values: Iterable[Any]) -> str:
    buf = io.StringIO()
    csv.writer(buf).writerow([_display(v) for v in values])
    return buf.getvalue().removesuffix("\r\n")


def _json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def _project(record: Mapping[str, Any], fields: Sequence[str]) -> dict[str, Any]:
    # Missing keys are omitted; explicit None stays null.
    return {f: record[f] for f in fields if f in record}


def render_records(
    records: Sequence[Record],
    profile: TypeProfile,
    fields: Sequence[str] | None = None,
    fmt: OutputFormat | str = OutputFormat.TEXT,
    flags: RenderFlags | None = None,
) -> str:
    """Render a sequence of records, one row per record."""
    fmt = OutputFormat(fmt)
    flags = flags or RenderFlags.for_format(fmt)
    fields = tuple(fields) if fields else profile.fields

    if fmt is OutputFormat.JSON:
        return _json([_project(r, fields) for r in records])

    lines: list[str] = []
    if fmt is OutputFormat.CSV:
        if flags.header:
            lines.append(_csv_line(fields))
        lines.extend(_csv_line(r.get(f) for f in fields) for r in records)
    else:
        if flags.header:
            lines.append(_text_row(fields, fields, profile))
        lines.extend(_text_row((r.get(f) for f in fields), fields, profile) for r in records)
        if flags.feedback:
            lines.append(f"{len(records)} objects")
    return "\n".join(lines)


def record_fields(record: Mapping[str, Any], fields: Sequence[str]) -> tuple[str, ...]:
    """Requested fields present on the record, then every other field it carries."""
    requested = [f for f in dict.fromkeys(fields) if f in record]
    extras = [k for k in record if k not in requested]
    return tuple(requested + extras)


def render_record(
    record: Record,
    profile: TypeProfile,
    fields: Sequence[str] | None = None,
    fmt: OutputFormat | str = OutputFormat.TEXT,
    flags: RenderFlags | None = None,
) -> str:
    """Render one record with every field it carries.

    ``fields`` sets the leading order; ``None`` uses the profile defaults and
    an empty sequence keeps the record's own order.
    """
    fmt = OutputFormat(fmt)
    flags = flags or RenderFlags.for_format(fmt)
    names = record_fields(record, profile.fields if fields is None else fields)

    if fmt is OutputFormat.JSON:
        return _json({name: record[name] for name in names})

    if fmt is OutputFormat.CSV:
        lines = [_csv_line(names)] if flags.header else []
        lines.append(_csv_line(record[name] for name in names))
        return "\n".join(lines)

    if flags.label:
        return "\n".join(f"{name}: {_text_value(record[name])}" for name in names)
    return "\n".join(_text_value(record[name]) for name in names)


def render_tree(
    roots: Mapping[str, TreeNode],
    fmt: OutputFormat | str = OutputFormat.TEXT,
    flags: RenderFlags | None = None,
) -> str:
    """Render a hierarchy: indented names, name/parent/depth CSV rows, or nested JSON."""
    from opsctl.hierarchy.tree import tree_to_dict, walk

    fmt = OutputFormat(fmt)
    flags = flags or RenderFlags.for_format(fmt)

    if fmt is OutputFormat.JSON:
        return _json(tree_to_dict(roots))

    if fmt is OutputFormat.CSV:
        lines = [_csv_line(("name", "parent", "depth"))] if flags.header else []
        lines.extend(_csv_line((node.name, parent, depth)) for node, parent, depth in walk(roots))
        return "\n".join(lines)

    lines = [f"{'  ' * depth}{node.name}" for node, _, depth in walk(roots)]
    if flags.feedback:
        lines.append(f"{len(lines)} objects")
    return "\n".join(lines)
