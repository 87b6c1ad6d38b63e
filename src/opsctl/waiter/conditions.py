"""Count conditions for waitfor: ``0``, ``N`` or ``>N``."""

from __future__ import annotations

import re
from collections.abc import Sized
from dataclasses import dataclass
from enum import StrEnum

from opsctl.errors import InvalidCondition

_CONDITION = re.compile(r"^(?P<op>>?)(?P<count>\d+)$")


class ConditionKind(StrEnum):
    ZERO = "zero"
    EXACT = "exact"
    GREATER_THAN = "greater_than"


@dataclass(frozen=True)
class CountCondition:
    kind: ConditionKind
    count: int = 0

    def matches(self, result: Sized | None) -> bool:
        if self.kind is ConditionKind.ZERO:
            return result is None or len(result) == 0
        if result is None:
            return False
        if self.kind is ConditionKind.GREATER_THAN:
            return len(result) > self.count
        return len(result) == self.count

    __call__ = matches

    def __str__(self) -> str:
        if self.kind is ConditionKind.GREATER_THAN:
            return f">{self.count}"
        return str(self.count)


ZERO = CountCondition(ConditionKind.ZERO)


def parse_condition(literal: str | int) -> CountCondition:
    """Parse a count expression into a condition on a result's length."""
    if isinstance(literal, bool):
        raise InvalidCondition(literal)
    if isinstance(literal, int):
        if literal < 0:
            raise InvalidCondition(literal)
        return ZERO if literal == 0 else CountCondition(ConditionKind.EXACT, literal)
    if not isinstance(literal, str):
        raise InvalidCondition(literal)

    match = _CONDITION.match(literal.strip())
    if match is None:
        raise InvalidCondition(literal)
    count = int(match.group("count"))
    if match.group("op"):
        return CountCondition(ConditionKind.GREATER_THAN, count)
    if count == 0:
        return ZERO
    return CountCondition(ConditionKind.EXACT, count)
