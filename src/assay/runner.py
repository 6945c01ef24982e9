"""Suite and test orchestration.

A :class:`Runner` owns every piece of per-run state: the assertion ledger,
the cumulative counters, the execution context, the ambient error indicator
and the reporter. Suites and tests execute strictly one at a time.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Hashable

from assay.context import ExecutionContext, Fixture
from assay.errors import FatalError
from assay.ledger import AssertionLedger, RunCounters, caller_location
from assay.reporter import Mode, Reporter, Sink
from assay.status_line import DEFAULT_CAPACITY

logger = logging.getLogger("assay.runner")

SuiteFunction = Callable[[], object]
TestFunction = Callable[[], "Verdict | None"]


class Verdict(str, Enum):
    DONE = "done"
    FAIL = "fail"
    ERROR = "error"

    @classmethod
    def coerce(cls, value: object) -> "Verdict":
        """Map a test function's return value to a verdict.

        ``None`` and plain booleans (such as the result of a trailing
        ``check``) mean done; assertions alone decide pass or fail then.
        """
        if value is None or isinstance(value, bool):
            return cls.DONE
        if isinstance(value, cls):
            return value
        logger.warning(
            "test returned %r instead of a verdict; treating as error", value
        )
        return cls.ERROR


@dataclass
class ErrorIndicator:
    """Ambient error slot that code under test may leave set.

    The runner inspects it around setup, the test body and teardown, logs any
    leftover value and clears it so it never leaks into the next test.
    """

    code: int = 0
    detail: str = ""

    def __bool__(self) -> bool:
        return self.code != 0

    def set(self, code: int, detail: str = "") -> None:
        self.code = code
        self.detail = detail

    def clear(self) -> None:
        self.code = 0
        self.detail = ""


@dataclass
class FailureRecord:
    description: str
    location: str


@dataclass
class CaseResult:
    title: str
    verdict: Verdict = Verdict.ERROR
    passed: bool = False
    failures: list[FailureRecord] = field(default_factory=list)


@dataclass
class SuiteResult:
    title: str
    passed: bool = False
    errored: bool = False
    cases: list[CaseResult] = field(default_factory=list)
    # assertions evaluated in the suite body outside any test
    failures: list[FailureRecord] = field(default_factory=list)


_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "is": operator.is_,
    "is not": operator.is_not,
    "in": lambda left, right: left in right,
    "not in": lambda left, right: left not in right,
}


def describe_comparison(
    op: str,
    left: Any,
    right: Any,
    left_expr: str | None = None,
    right_expr: str | None = None,
) -> str:
    """Build ``"<left> <op> <right> (<left!r> <op> <right!r>)"``."""
    left_expr = repr(left) if left_expr is None else left_expr
    right_expr = repr(right) if right_expr is None else right_expr
    return f"{left_expr} {op} {right_expr} ({left!r} {op} {right!r})"


class Runner:
    """Runs suites and tests, tallies assertions and drives the reporter."""

    def __init__(
        self,
        *,
        verbose: bool = False,
        quiet: bool = False,
        color: bool = True,
        sink: Sink | None = None,
        status_line_capacity: int = DEFAULT_CAPACITY,
    ):
        self.context = ExecutionContext()
        self.reporter = Reporter(
            self.context,
            Mode.from_flags(verbose=verbose, quiet=quiet),
            sink=sink,
            color=color,
            capacity=status_line_capacity,
        )
        self.ledger = AssertionLedger()
        self.counters = RunCounters()
        self.errors = ErrorIndicator()
        self.results: list[SuiteResult] = []
        self._suite_result: SuiteResult | None = None
        self._case_result: CaseResult | None = None

    # -- suites ------------------------------------------------------------

    def run_suite(self, title: str, suite: SuiteFunction) -> SuiteResult:
        if self.context.suite is not None:
            raise RuntimeError(
                f"cannot start suite '{title}' while '{self.context.suite}' is running"
            )
        prev_failures = self.counters.failed
        result = SuiteResult(title)
        self._suite_result = result

        self.ledger.clear()
        self.context.enter_suite(title)
        self.reporter.begin_suite()
        try:
            suite()
        except FatalError:
            raise
        except Exception:
            logger.exception("suite `%s' raised", title)
            result.errored = True
        finally:
            self.context.leave_suite()
            self._suite_result = None

        result.passed = not result.errored and self.counters.failed == prev_failures
        self.reporter.report_suite_outcome(result.passed)
        self.results.append(result)
        return result

    def set_setup(self, func: Fixture | None) -> None:
        self._require_suite("set_setup")
        self.context.setup = func

    def set_teardown(self, func: Fixture | None) -> None:
        self._require_suite("set_teardown")
        self.context.teardown = func

    def _require_suite(self, operation: str) -> None:
        if self.context.suite is None:
            raise RuntimeError(f"{operation}() called outside of a suite")

    # -- tests -------------------------------------------------------------

    def run_test(self, title: str, test: TestFunction) -> CaseResult:
        self._require_suite("run_test")
        if self.context.test is not None:
            raise RuntimeError(
                f"cannot start test '{title}' while '{self.context.test}' is running"
            )
        prev_failures = self.counters.failed
        case = CaseResult(title)

        self.ledger.clear()
        if self.context.setup is not None:
            self._invoke_fixture(self.context.setup, "setup", title)
        self._clear_error(f"before test `{title}'")

        self.context.test = title
        self._case_result = case
        self.reporter.begin_test()
        try:
            case.verdict = self._invoke_test(test, title)
            case.passed = (
                case.verdict is Verdict.DONE and self.counters.failed == prev_failures
            )
            self.reporter.report_test_outcome(case.passed)
        finally:
            self.context.test = None
            self.ledger.clear()
            self._case_result = None
            self.reporter.end_test()
            self._clear_error(f"left by test `{title}'")
            if self.context.teardown is not None:
                self._invoke_fixture(self.context.teardown, "teardown", title)
            self._clear_error(f"after test cleanup for `{title}'")

        if self._suite_result is not None:
            self._suite_result.cases.append(case)
        return case

    def _invoke_test(self, test: TestFunction, title: str) -> Verdict:
        try:
            value = test()
        except FatalError:
            raise
        except Exception:
            logger.exception("test `%s' raised", title)
            return Verdict.ERROR
        return Verdict.coerce(value)

    def _invoke_fixture(self, fixture: Fixture, phase: str, title: str) -> None:
        try:
            fixture()
        except FatalError:
            raise
        except Exception as e:
            logger.warning(
                "%s for `%s' raised %s: %s", phase, title, type(e).__name__, e
            )

    def _clear_error(self, when: str) -> None:
        if not self.errors:
            return
        logger.debug(
            "clearing error indicator %s (%d: %s)",
            when,
            self.errors.code,
            self.errors.detail,
        )
        self.errors.clear()

    # -- assertions --------------------------------------------------------

    def check(
        self, condition: object, description: str, location: Hashable | None = None
    ) -> bool:
        if location is None:
            location = caller_location()
        return self._record(bool(condition), description, location)

    def check_format(
        self, condition: object, location: Hashable | None, fmt: str, *args: Any
    ) -> bool:
        if location is None:
            location = caller_location()
        description = fmt % args if args else fmt
        return self._record(bool(condition), description, location)

    def check_op(
        self,
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
        compare = _OPERATORS.get(op)
        if compare is None:
            raise ValueError(
                f"Unknown comparison operator: {op!r}. "
                f"Available: {', '.join(_OPERATORS)}"
            )
        condition = bool(compare(left, right))
        description = describe_comparison(op, left, right, left_expr, right_expr)
        return self._record(condition, description, location)

    def _record(self, condition: bool, description: str, location: Hashable) -> bool:
        decision = self.ledger.record(location, condition)
        if not decision.should_count:
            return condition

        self.counters.apply(decision)
        self.reporter.report_assertion(condition, description, location)
        if not condition:
            failure = FailureRecord(description=description, location=str(location))
            if self._case_result is not None:
                self._case_result.failures.append(failure)
            elif self._suite_result is not None:
                self._suite_result.failures.append(failure)
        return condition
