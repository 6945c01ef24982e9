"""State of the suite and test currently executing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

Fixture = Callable[[], object]


@dataclass
class ExecutionContext:
    """One active suite and, within it, at most one active test.

    ``setup`` and ``teardown`` are scoped to the suite and cleared when it
    concludes.
    """

    suite: str | None = None
    test: str | None = None
    setup: Fixture | None = None
    teardown: Fixture | None = None

    def enter_suite(self, title: str) -> None:
        self.suite = title
        self.test = None
        self.setup = None
        self.teardown = None

    def leave_suite(self) -> None:
        self.suite = None
        self.test = None
        self.setup = None
        self.teardown = None
