"""Rebuild a parent/child hierarchy from flat records with parent references."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from opsctl.errors import DanglingParentReference, HierarchyError
from opsctl.models.records import Record

log = structlog.get_logger()


@dataclass
class TreeNode:
    name: str
    record: Record = field(default_factory=dict, repr=False)
    children: dict[str, TreeNode] = field(default_factory=dict)


def _parent_of(record: Mapping[str, Any], name: str, parent_field: str) -> str | None:
    parent = record.get(parent_field)
    if parent is None or parent == "" or str(parent) == name:
        return None
    return str(parent)


def _index_records(records: Iterable[Record], name_field: str) -> dict[str, Record]:
    pending: dict[str, Record] = {}
    for record in records:
        name = record.get(name_field)
        if name is None or name == "":
            raise HierarchyError(f"Record has no '{name_field}': {record!r}")
        name = str(name)
        if name in pending:
            raise HierarchyError(f"Duplicate record name '{name}'")
        pending[name] = record
    return pending


def _sort_children(node: TreeNode) -> None:
    node.children = dict(sorted(node.children.items()))
    for child in node.children.values():
        _sort_children(child)


def build_tree(
    records: Iterable[Record],
    name_field: str = "name",
    parent_field: str = "parent",
) -> dict[str, TreeNode]:
    """Group records under their parents and return the root nodes by name.

    Records are placed in passes: a record is placed once its parent is in
    the tree, so parents may appear after their children in the input. When
    a pass places nothing, whatever remains references a parent that is
    missing (or part of a cycle) and DanglingParentReference is raised.
    """
    pending = _index_records(records, name_field)
    roots: dict[str, TreeNode] = {}
    index: dict[str, TreeNode] = {}

    passes = 0
    while pending:
        passes += 1
        placed: list[str] = []
        for name in sorted(pending):
            record = pending[name]
            parent = _parent_of(record, name, parent_field)
            if parent is None:
                node = TreeNode(name=name, record=record)
                roots[name] = node
            elif parent in index:
                node = TreeNode(name=name, record=record)
                index[parent].children[name] = node
            else:
                continue
            index[name] = node
            placed.append(name)

        if not placed:
            break
        for name in placed:
            del pending[name]
        log.debug("tree pass complete", passes=passes, placed=len(placed), remaining=len(pending))

    if pending:
        raise DanglingParentReference(
            {name: str(record.get(parent_field)) for name, record in pending.items()}
        )

    for root in roots.values():
        _sort_children(root)
    return roots


def walk(roots: Mapping[str, TreeNode]) -> Iterator[tuple[TreeNode, str, int]]:
    """Depth-first walk yielding (node, parent name, depth). Roots have parent ''."""
    stack: list[tuple[TreeNode, str, int]] = [(node, "", 0) for node in reversed(roots.values())]
    while stack:
        node, parent, depth = stack.pop()
        yield node, parent, depth
        stack.extend((child, node.name, depth + 1) for child in reversed(node.children.values()))


def tree_to_dict(roots: Mapping[str, TreeNode]) -> list[dict[str, Any]]:
    return [
        {"name": node.name, "children": tree_to_dict(node.children)}
        for node in roots.values()
    ]
