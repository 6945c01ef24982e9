"""Top-level entry point: run every registered suite and report the tally."""

from __future__ import annotations

import logging

from assay.api import activate
from assay.registry import SuiteRegistry
from assay.runner import Runner

logger = logging.getLogger("assay.driver")


class Driver:
    """Runs a suite registry on a runner and returns a process exit status.

    The exit status is the cumulative number of failed assertions, so zero
    means every assertion passed.
    """

    def __init__(
        self,
        registry: SuiteRegistry,
        runner: Runner | None = None,
        capture_logger: str = "",
    ):
        self.registry = registry
        self.runner = runner or Runner()
        self.capture_logger = capture_logger

    def run(self) -> int:
        runner = self.runner
        logger.debug("Starting run of %d suite(s)", len(self.registry))

        runner.ledger.clear()
        with activate(runner), runner.reporter.capture_logging(self.capture_logger):
            try:
                self.registry.run(runner)
            finally:
                runner.ledger.clear()

        counters = runner.counters
        runner.reporter.summary(counters.passed, counters.total)
        logger.debug(
            "Run complete: %d/%d assertions passed", counters.passed, counters.total
        )
        return counters.failed
