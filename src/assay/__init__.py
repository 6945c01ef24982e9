"""Unit-test engine with assertion de-duplication and live console progress."""

from assay.api import (
    check,
    check_format,
    check_op,
    current_runner,
    run_test,
    set_setup,
    set_teardown,
)
from assay.driver import Driver
from assay.registry import SuiteRegistry
from assay.runner import Runner, Verdict

__all__ = [
    "Driver",
    "Runner",
    "SuiteRegistry",
    "Verdict",
    "check",
    "check_format",
    "check_op",
    "current_runner",
    "run_test",
    "set_setup",
    "set_teardown",
]
