"""Per-location assertion bookkeeping.

Each assertion call site is identified by a location (conventionally
``file:line``). The ledger remembers the last outcome seen at every location
during the current test so that an assertion hit repeatedly, for example
inside a loop, is tallied once. A location that passed earlier and now fails
is reported again so the regression is never hidden.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Hashable, NamedTuple


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class Decision(NamedTuple):
    """What the caller should do with an assertion that was just recorded.

    Attributes:
        should_count: The assertion is reported and tallied.
        is_new_failure: ``failed`` must be incremented.
        first_seen: First evaluation at this location in the current test,
            so ``total`` must be incremented.
    """

    should_count: bool
    is_new_failure: bool
    first_seen: bool


_SKIP = Decision(should_count=False, is_new_failure=False, first_seen=False)


class AssertionLedger:
    """Mapping of location to the last recorded outcome for the current test."""

    def __init__(self) -> None:
        self._records: dict[Hashable, Outcome] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, location: Hashable) -> bool:
        return location in self._records

    def outcome(self, location: Hashable) -> Outcome | None:
        return self._records.get(location)

    def record(self, location: Hashable, condition: bool) -> Decision:
        prior = self._records.get(location)
        if prior is None:
            self._records[location] = Outcome.SUCCESS if condition else Outcome.FAILURE
            return Decision(
                should_count=True, is_new_failure=not condition, first_seen=True
            )
        if prior is Outcome.SUCCESS and not condition:
            self._records[location] = Outcome.FAILURE
            return Decision(should_count=True, is_new_failure=True, first_seen=False)
        return _SKIP

    def clear(self) -> None:
        self._records.clear()


@dataclass
class RunCounters:
    """Cumulative assertion counts for the whole run. Never reset mid-run."""

    total: int = 0
    failed: int = 0

    @property
    def passed(self) -> int:
        return self.total - self.failed

    def apply(self, decision: Decision) -> None:
        if decision.first_seen:
            self.total += 1
        if decision.is_new_failure:
            self.failed += 1


def caller_location(depth: int = 1) -> str:
    """Return ``"<file>:<line>"`` for the frame ``depth`` levels above the caller."""
    frame = sys._getframe(depth + 1)
    return f"{frame.f_code.co_filename}:{frame.f_lineno}"
