from __future__ import annotations

from pathlib import Path
from typing import Iterable

from junitparser import Error, Failure, JUnitXml, TestCase, TestSuite

from assay.runner import CaseResult, SuiteResult, Verdict


def _failure_message(case: CaseResult) -> str:
    if case.failures:
        return "; ".join(f"{f.description} at {f.location}" for f in case.failures)
    return f"test returned {case.verdict.value}"


def build_junit(results: Iterable[SuiteResult]) -> JUnitXml:
    """Build a JUnit document: one testsuite per suite, one testcase per test."""
    xml = JUnitXml()

    for suite_result in results:
        suite = TestSuite(suite_result.title)
        suite.add_property("passed", str(suite_result.passed).lower())
        if suite_result.errored:
            suite.add_property("errored", "true")
        for failure in suite_result.failures:
            suite.add_property(
                "suite_assertion_failure",
                f"{failure.description} at {failure.location}",
            )

        for case_result in suite_result.cases:
            case = TestCase(case_result.title)
            case.classname = suite_result.title
            if case_result.verdict is Verdict.ERROR:
                case.result = [Error(_failure_message(case_result))]
            elif not case_result.passed:
                case.result = [Failure(_failure_message(case_result))]
            suite.add_testcase(case)

        # Use append (not +=) to preserve properties
        xml.append(suite)

    return xml


def write_junit(path: Path, results: Iterable[SuiteResult]) -> Path:
    """Write junit XML for ``results`` to ``path`` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    xml = build_junit(results)
    xml.write(str(path), pretty=True)
    return path
