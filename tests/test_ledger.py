"""Tests for per-location assertion bookkeeping."""

import pytest

from assay.ledger import (
    AssertionLedger,
    Decision,
    Outcome,
    RunCounters,
    caller_location,
)


@pytest.fixture
def ledger():
    return AssertionLedger()


def test_first_pass_counts_total_only(ledger):
    decision = ledger.record("L1", True)
    assert decision == Decision(should_count=True, is_new_failure=False, first_seen=True)
    assert ledger.outcome("L1") is Outcome.SUCCESS


def test_first_failure_counts_both(ledger):
    decision = ledger.record("L1", False)
    assert decision == Decision(should_count=True, is_new_failure=True, first_seen=True)
    assert ledger.outcome("L1") is Outcome.FAILURE


def test_repeat_pass_is_not_counted(ledger):
    ledger.record("L1", True)
    decision = ledger.record("L1", True)
    assert decision.should_count is False
    assert ledger.outcome("L1") is Outcome.SUCCESS


def test_pass_then_fail_is_a_new_failure(ledger):
    ledger.record("L1", True)
    decision = ledger.record("L1", False)
    assert decision == Decision(should_count=True, is_new_failure=True, first_seen=False)
    assert ledger.outcome("L1") is Outcome.FAILURE


@pytest.mark.parametrize("condition", [True, False])
def test_after_failure_everything_is_suppressed(ledger, condition):
    ledger.record("L1", False)
    decision = ledger.record("L1", condition)
    assert decision.should_count is False
    assert ledger.outcome("L1") is Outcome.FAILURE


def test_locations_are_independent(ledger):
    ledger.record("L1", False)
    assert ledger.record("L2", True).should_count is True
    assert len(ledger) == 2
    assert "L1" in ledger and "L2" in ledger


def test_clear_forgets_history(ledger):
    ledger.record("L1", False)
    ledger.clear()
    assert len(ledger) == 0
    assert ledger.outcome("L1") is None
    assert ledger.record("L1", True).first_seen is True


def test_locations_may_be_any_hashable(ledger):
    ledger.record(("file.py", 10), True)
    assert ledger.outcome(("file.py", 10)) is Outcome.SUCCESS


def test_counters_follow_decisions(ledger):
    counters = RunCounters()
    sequence = [
        ("L1", True),
        ("L1", True),
        ("L2", False),
        ("L2", True),
        ("L3", True),
        ("L3", False),
        ("L3", False),
    ]
    for location, condition in sequence:
        counters.apply(ledger.record(location, condition))
        assert counters.failed <= counters.total

    # one per distinct location, flips only add to failed
    assert counters.total == 3
    assert counters.failed == 2
    assert counters.passed == 1


def test_counters_ignore_skipped_decisions(ledger):
    counters = RunCounters()
    counters.apply(ledger.record("L1", True))
    counters.apply(ledger.record("L1", True))
    assert (counters.total, counters.failed) == (1, 0)


def test_caller_location_points_at_the_caller():
    def helper():
        return caller_location()

    location = helper()
    filename, _, line = location.rpartition(":")
    assert filename.endswith("test_ledger.py")
    assert int(line) > 0
