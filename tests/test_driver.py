"""Tests for the top-level driver."""

import logging

from assay.api import current_runner
from assay.driver import Driver
from assay.registry import SuiteRegistry
from assay.runner import Verdict


def test_all_passing_run_returns_zero(make_runner, console):
    runner = make_runner()
    registry = SuiteRegistry()

    def adds():
        runner.check(1 + 1 == 2, "adds", "L1")

    @registry.suite("math")
    def math():
        runner.run_test("adds", adds)

    exit_code = Driver(registry, runner).run()

    assert exit_code == 0
    assert console.chunks == [
        f"\r[    ] {'math':>30} ",
        ".",
        " PASS\r[PASS]\n",
        "Assertions passed: 1/1\n",
    ]


def test_exit_code_is_failed_assertion_count(make_runner, console):
    runner = make_runner()
    registry = SuiteRegistry()

    def failing():
        runner.check(False, "first", "L1")
        runner.check(False, "second", "L2")
        runner.check(True, "third", "L3")

    registry.add("s", lambda: runner.run_test("t", failing))

    assert Driver(registry, runner).run() == 2
    assert console.chunks[-1] == "Assertions passed: 1/3\n"


def test_suites_run_in_registration_order(make_runner):
    runner = make_runner()
    registry = SuiteRegistry()
    order = []
    for title in ("b", "a", "c"):
        registry.add(title, lambda title=title: order.append(title))

    Driver(registry, runner).run()
    assert order == ["b", "a", "c"]


def test_runner_is_active_during_run(make_runner):
    runner = make_runner()
    registry = SuiteRegistry()
    seen = []
    registry.add("s", lambda: seen.append(current_runner()))

    Driver(registry, runner).run()
    assert seen == [runner]


def test_ledger_is_empty_after_run(make_runner):
    runner = make_runner()
    registry = SuiteRegistry()
    registry.add("s", lambda: runner.check(True, "suite level", "L1"))

    Driver(registry, runner).run()
    assert len(runner.ledger) == 0
    assert runner.counters.total == 1


def test_quiet_run_prints_nothing_and_swallows_logs(make_runner, console):
    runner = make_runner(quiet=True)
    registry = SuiteRegistry()
    subject = logging.getLogger("assay.subject")

    def body():
        subject.error("noisy code under test")
        runner.check(False, "bad", "L1")
        return Verdict.DONE

    registry.add("s", lambda: runner.run_test("t", body))

    exit_code = Driver(registry, runner, capture_logger="assay.subject").run()

    assert exit_code == 1
    assert console.chunks == []


def test_logs_from_code_under_test_are_interleaved(make_runner, console):
    runner = make_runner()
    registry = SuiteRegistry()
    subject = logging.getLogger("assay.subject")

    registry.add("s", lambda: runner.run_test("t", lambda: subject.warning("careful")))

    Driver(registry, runner, capture_logger="assay.subject").run()
    assert "assay.subject WARNING: careful\n" in console.chunks


def test_quiet_run_swallows_engine_logs_with_named_capture_logger(
    make_runner, console, caplog
):
    runner = make_runner(quiet=True)
    registry = SuiteRegistry()

    def body():
        raise KeyError("boom")

    registry.add("s", lambda: runner.run_test("t", body))

    exit_code = Driver(registry, runner, capture_logger="myapp").run()

    assert exit_code == 0
    assert runner.results[0].cases[0].verdict is Verdict.ERROR
    assert console.chunks == []
    # nothing reached the root logger's handlers
    assert [r for r in caplog.records if r.name.startswith("assay.runner")] == []


def test_engine_logs_redraw_header_with_named_capture_logger(make_runner, console):
    runner = make_runner()
    registry = SuiteRegistry()

    def body():
        raise KeyError("boom")

    registry.add("s", lambda: runner.run_test("t", body))

    Driver(registry, runner, capture_logger="myapp").run()

    failure = next(c for c in console.chunks if "test `t' raised" in c)
    index = console.chunks.index(failure)
    assert console.chunks[index - 1] == "\r[----] "
    assert console.chunks[index + 1] == f"\r[    ] {'s':>30} "


def test_named_capture_logger_restores_engine_logger(make_runner):
    runner = make_runner(quiet=True)
    registry = SuiteRegistry()
    registry.add("s", lambda: None)
    engine = logging.getLogger("assay")
    handlers_before = engine.handlers[:]

    Driver(registry, runner, capture_logger="myapp").run()

    assert engine.handlers == handlers_before
    assert engine.propagate is True
    assert logging.getLogger("myapp").propagate is True
