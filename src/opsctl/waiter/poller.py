"""Poll a query until its result satisfies a count condition or time runs out."""

from __future__ import annotations

import time
from collections.abc import Callable, Sized
from dataclasses import dataclass
from enum import StrEnum

import structlog

from opsctl.errors import EXIT_OK, EXIT_TIMEOUT, UnsupportedWaitOperation, UsageError
from opsctl.models.records import Service
from opsctl.waiter.conditions import CountCondition

log = structlog.get_logger()

SUPPORTED_WAIT_OPERATIONS = {(Service.CMDB.value, "query")}


class WaitOutcome(StrEnum):
    SATISFIED = "satisfied"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class WaitResult:
    outcome: WaitOutcome
    attempts: int
    elapsed: float
    last_count: int | None = None

    @property
    def satisfied(self) -> bool:
        return self.outcome is WaitOutcome.SATISFIED

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.satisfied else EXIT_TIMEOUT


def check_wait_operation(service: str, operation: str) -> None:
    """Only CMDB queries can be polled; anything else fails before the first attempt."""
    if (service, operation) not in SUPPORTED_WAIT_OPERATIONS:
        raise UnsupportedWaitOperation(service, operation)


def wait_for(
    condition: CountCondition,
    query: Callable[[], Sized | None],
    interval: float,
    timeout: float,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitResult:
    """Call ``query`` every ``interval`` seconds until ``condition`` holds.

    The condition is checked after every call, so a query that is already
    satisfied returns after one attempt. Gives up once more than ``timeout``
    seconds have passed since the first call started.
    """
    if interval < 0:
        raise UsageError("Poll interval must not be negative")
    if timeout <= 0:
        raise UsageError("Poll timeout must be positive")

    start = clock()
    attempts = 0
    while True:
        result = query()
        attempts += 1
        count = None if result is None else len(result)
        elapsed = clock() - start
        log.debug("poll attempt", attempt=attempts, count=count, condition=str(condition))

        if condition.matches(result):
            log.info("wait condition satisfied", attempts=attempts, elapsed=round(elapsed, 3))
            return WaitResult(WaitOutcome.SATISFIED, attempts, elapsed, count)
        if elapsed > timeout:
            log.warning("wait timed out", attempts=attempts, timeout=timeout)
            return WaitResult(WaitOutcome.TIMED_OUT, attempts, elapsed, count)
        sleep(interval)
