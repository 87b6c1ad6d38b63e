"""Tests for the waitfor polling loop."""

import pytest

from opsctl.errors import EXIT_TIMEOUT, UnsupportedWaitOperation, UsageError
from opsctl.waiter.conditions import parse_condition
from opsctl.waiter.poller import WaitOutcome, check_wait_operation, wait_for


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _sequence(*results):
    calls = []

    def query():
        calls.append(1)
        return results[min(len(calls), len(results)) - 1]

    return query, calls


class TestWaitFor:
    def test_satisfied_after_second_call(self) -> None:
        query, calls = _sequence(["r1"], ["r1", "r2"])
        result = wait_for(parse_condition("2"), query, interval=0, timeout=10)
        assert result.outcome is WaitOutcome.SATISFIED
        assert result.attempts == 2
        assert len(calls) == 2
        assert result.exit_code == 0
        assert result.last_count == 2

    def test_satisfied_immediately(self) -> None:
        clock = FakeClock()
        query, calls = _sequence([])
        result = wait_for(parse_condition("0"), query, 5, 10, clock=clock, sleep=clock.sleep)
        assert result.satisfied
        assert len(calls) == 1
        assert clock.sleeps == []

    def test_none_result_satisfies_zero(self) -> None:
        result = wait_for(parse_condition(0), lambda: None, interval=0, timeout=1)
        assert result.satisfied
        assert result.last_count is None

    def test_times_out(self) -> None:
        clock = FakeClock()
        query, calls = _sequence(["r"])
        result = wait_for(parse_condition(">1"), query, 3, 10, clock=clock, sleep=clock.sleep)
        assert result.outcome is WaitOutcome.TIMED_OUT
        assert result.exit_code == EXIT_TIMEOUT
        # Calls at t=0, 3, 6, 9, 12; the last one is past the deadline.
        assert len(calls) == 5
        assert clock.sleeps == [3, 3, 3, 3]
        assert result.elapsed == 12

    def test_no_sleep_after_timeout(self) -> None:
        clock = FakeClock()
        clock.now = 100.0

        def slow_query():
            clock.now += 11
            return []

        result = wait_for(parse_condition("1"), slow_query, 5, 10, clock=clock, sleep=clock.sleep)
        assert result.outcome is WaitOutcome.TIMED_OUT
        assert result.attempts == 1
        assert clock.sleeps == []

    def test_query_errors_propagate(self) -> None:
        def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            wait_for(parse_condition("1"), broken, 0, 10)

    def test_invalid_interval(self) -> None:
        with pytest.raises(UsageError, match="interval"):
            wait_for(parse_condition("1"), list, -1, 10)

    def test_invalid_timeout(self) -> None:
        with pytest.raises(UsageError, match="timeout"):
            wait_for(parse_condition("1"), list, 1, 0)


class TestCheckWaitOperation:
    def test_cmdb_query_supported(self) -> None:
        check_wait_operation("cmdb", "query")

    @pytest.mark.parametrize(
        "service,operation",
        [("cmdb", "show"), ("instance", "query"), ("monitor", "services"), ("bogus", "query")],
    )
    def test_other_operations_fatal(self, service: str, operation: str) -> None:
        with pytest.raises(UnsupportedWaitOperation) as exc_info:
            check_wait_operation(service, operation)
        assert exc_info.value.exit_code == 2
