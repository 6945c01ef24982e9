"""Module-level helpers for suite and test bodies.

Suite and test functions take no arguments. While a :class:`~assay.driver.Driver`
runs, the active :class:`~assay.runner.Runner` is published here and these
helpers delegate to it, so a test module only needs::

    from assay import check, check_op, run_test

    def test_addition():
        check_op("==", 1 + 1, 2, left_expr="1 + 1")

    def arithmetic():
        run_test("addition", test_addition)

A test function may return a :class:`~assay.runner.Verdict`. Returning ``None``
or a bool (for example ``lambda: check(...)``) counts as ``Verdict.DONE``, and
the test then passes or fails on its assertions alone.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Hashable, Iterator

from assay.context import Fixture
from assay.ledger import caller_location

if TYPE_CHECKING:
    from assay.runner import CaseResult, Runner, TestFunction

_active: ContextVar["Runner | None"] = ContextVar("assay_runner", default=None)


def current_runner() -> Runner:
    runner = _active.get()
    if runner is None:
        raise RuntimeError("no active runner; call this from inside a running suite")
    return runner


@contextmanager
def activate(runner: Runner) -> Iterator[Runner]:
    """Make ``runner`` the target of the module-level helpers for the block."""
    token = _active.set(runner)
    try:
        yield runner
    finally:
        _active.reset(token)


def check(
    condition: object, description: str, location: Hashable | None = None
) -> bool:
    if location is None:
        location = caller_location()
    return current_runner().check(condition, description, location)


def check_format(
    condition: object, location: Hashable | None, fmt: str, *args: Any
) -> bool:
    if location is None:
        location = caller_location()
    return current_runner().check_format(condition, location, fmt, *args)


def check_op(
    op: str,
    left: Any,
    right: Any,
    *,
    left_expr: str | None = None,
    right_expr: str | None = None,
    location: Hashable | None = None,
) -> bool:
    if location is None:
        location = caller_location()
    return current_runner().check_op(
        op, left, right, left_expr=left_expr, right_expr=right_expr, location=location
    )


def run_test(title: str, test: TestFunction) -> CaseResult:
    return current_runner().run_test(title, test)


def set_setup(func: Fixture | None) -> None:
    current_runner().set_setup(func)


def set_teardown(func: Fixture | None) -> None:
    current_runner().set_teardown(func)
