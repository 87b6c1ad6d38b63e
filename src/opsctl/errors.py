"""Error taxonomy shared by the core and the CLI.

Every error carries the process exit code the CLI terminates with.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_UNKNOWN_COMMAND = 2
EXIT_UNKNOWN_INSTANCE_COMMAND = 3
EXIT_TIMEOUT = 4


class OpsctlError(Exception):
    """Base class for errors reported to the terminal."""

    exit_code = EXIT_USAGE


class UsageError(OpsctlError):
    """Bad arguments for an otherwise valid command."""


class FieldSpecError(UsageError):
    """A field list token could not be parsed."""


class InvalidCondition(UsageError):
    """A waitfor count expression is malformed."""

    def __init__(self, literal: object) -> None:
        self.literal = literal
        super().__init__(f"Invalid count condition: {literal!r} (expected N, >N or 0)")


class UnsupportedWaitOperation(OpsctlError):
    """waitfor was asked to poll something other than a CMDB query."""

    exit_code = EXIT_UNKNOWN_COMMAND

    def __init__(self, service: str, operation: str) -> None:
        self.service = service
        self.operation = operation
        super().__init__(f"waitfor does not support '{service} {operation}'")


class WaitTimeout(OpsctlError):
    """A polled query did not reach its count before the deadline."""

    exit_code = EXIT_TIMEOUT


class HierarchyError(OpsctlError):
    """Input records cannot form a tree."""


class DanglingParentReference(HierarchyError):
    """Some records reference parents that never appear in the input."""

    def __init__(self, unplaced: dict[str, str]) -> None:
        self.unplaced = unplaced
        detail = ", ".join(f"{name} -> {parent}" for name, parent in sorted(unplaced.items()))
        super().__init__(f"Cannot place {len(unplaced)} record(s) under a missing parent: {detail}")


class UpstreamFailure(OpsctlError):
    """A backing service call failed."""

    def __init__(self, service: str, message: str) -> None:
        self.service = service
        super().__init__(f"{service}: {message}")
