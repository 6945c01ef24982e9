"""Console rendering of suite/test headers, progress glyphs and failures.

Compact mode keeps one line per suite and redraws it in place with a carriage
return as glyphs accumulate. Verbose mode prints a banner per suite, one line
per test and a glyph per assertion. Quiet mode prints nothing and swallows
log records emitted while a run is active.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator

import typer

from assay.context import ExecutionContext
from assay.status_line import DEFAULT_CAPACITY, StatusLine

Sink = Callable[[str], None]

ENGINE_LOGGER = "assay"


class Mode(str, Enum):
    COMPACT = "compact"
    VERBOSE = "verbose"
    QUIET = "quiet"

    @classmethod
    def from_flags(cls, verbose: bool = False, quiet: bool = False) -> "Mode":
        if quiet:
            return cls.QUIET
        if verbose:
            return cls.VERBOSE
        return cls.COMPACT


def echo_sink(text: str) -> None:
    typer.echo(text, nl=False)


class Reporter:
    """Renders engine events for the suite and test held in ``context``."""

    def __init__(
        self,
        context: ExecutionContext,
        mode: Mode = Mode.COMPACT,
        *,
        sink: Sink | None = None,
        color: bool = True,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        self.context = context
        self.mode = mode
        self.color = color
        self.status = StatusLine(capacity)
        self._sink = sink or echo_sink

    @property
    def verbose(self) -> bool:
        return self.mode is Mode.VERBOSE

    @property
    def quiet(self) -> bool:
        return self.mode is Mode.QUIET

    def write(self, text: str) -> None:
        if self.quiet:
            return
        self._sink(text)

    def _style(self, text: str, **styles) -> str:
        if not self.color:
            return text
        return typer.style(text, **styles)

    # -- headers -----------------------------------------------------------

    def suite_header(self) -> None:
        if self.verbose:
            banner = f"====== {self.context.suite} ======"
            self.write("\r" + self._style(banner, bold=True))
        else:
            self.write(f"\r[{'':4}] {self.context.suite:>30} {self.status}")

    def test_header(self) -> None:
        self.write(f"\r - ({'':4}) {self.context.test:>40} {self.status}")

    def redraw(self) -> None:
        """Re-anchor the in-progress line after something else was printed."""
        if self.context.suite is None:
            return
        if self.verbose:
            if self.context.test is not None:
                self.test_header()
        else:
            self.suite_header()

    def _append(self, glyph: str, echo: bool = True) -> None:
        if self.status.full:
            self.write("\n")
            self.status.reset()
            self.redraw()
        self.status.append(glyph)
        if echo:
            self.write(glyph)

    # -- lifecycle ---------------------------------------------------------

    def begin_suite(self) -> None:
        self.status.reset()
        self.suite_header()
        if self.verbose:
            self.write("\n")

    def begin_test(self) -> None:
        if self.verbose:
            self.test_header()

    def end_test(self) -> None:
        if self.verbose:
            self.status.reset()

    def report_assertion(
        self, condition: bool, description: str, location: object
    ) -> None:
        if condition:
            if self.verbose:
                self._append(".")
            return

        self.write(f"\rAssertion failed: {description}   \n")
        self.write(f'\tin suite "{self.context.suite}", test {self.context.test}\n')
        self.write(f"\tat {location}\n")
        if self.verbose:
            self._append("F", echo=False)
        self.redraw()

    def _tag(self, passed: bool) -> str:
        if passed:
            return self._style("PASS", fg=typer.colors.GREEN, bold=True)
        return self._style("FAIL", fg=typer.colors.RED, bold=True)

    def report_test_outcome(self, passed: bool) -> None:
        if self.verbose:
            word = "PASS" if passed else "FAIL"
            self.write(f" {word}\r - ({self._tag(passed)})\n")
        else:
            self._append("." if passed else "E")

    def report_suite_outcome(self, passed: bool) -> None:
        if self.verbose:
            return
        word = "PASS" if passed else "FAIL"
        self.write(f" {word}\r[{self._tag(passed)}]\n")

    def summary(self, passed: int, total: int) -> None:
        self.write(f"Assertions passed: {passed}/{total}\n")

    # -- log interleaving --------------------------------------------------

    def show_log(self, message: str) -> None:
        if self.context.suite is not None:
            marker = self._style("----", fg=typer.colors.YELLOW, bold=True)
            if self.verbose and self.context.test is not None:
                self.write(f"\r - ({marker}) ")
            elif not self.verbose:
                self.write(f"\r[{marker}] ")
        self.write(self._style(message, fg=typer.colors.YELLOW) + "\n")
        self.redraw()

    @contextmanager
    def capture_logging(
        self, logger_name: str = ""
    ) -> Iterator["ReporterLogHandler"]:
        """Route records of ``logger_name`` (root when empty) through this reporter.

        The engine's own ``assay`` records are routed too when ``logger_name``
        does not already cover them. Handlers, levels and propagation are
        restored on exit.
        """
        target = logging.getLogger(logger_name or None)
        saved_handlers = target.handlers[:]
        saved_level = target.level
        saved_propagate = target.propagate
        handler = ReporterLogHandler(self)
        target.handlers = [handler]
        target.setLevel(logging.DEBUG)
        target.propagate = False

        engine = logging.getLogger(ENGINE_LOGGER)
        engine_covered = (
            not logger_name
            or logger_name == ENGINE_LOGGER
            or ENGINE_LOGGER.startswith(logger_name + ".")
        )
        saved_engine = (engine.propagate, engine.level)
        if not engine_covered:
            # kept handlers (e.g. a debug file) still receive engine records
            engine.addHandler(handler)
            engine.propagate = False
            if engine.level == logging.NOTSET:
                engine.setLevel(logging.DEBUG)
        try:
            yield handler
        finally:
            target.handlers = saved_handlers
            target.setLevel(saved_level)
            target.propagate = saved_propagate
            if not engine_covered:
                engine.removeHandler(handler)
                engine.propagate, level = saved_engine
                engine.setLevel(level)


class ReporterLogHandler(logging.Handler):
    """Prints log records without corrupting the status line.

    Quiet mode drops everything; compact mode drops records below WARNING.
    """

    def __init__(self, reporter: Reporter) -> None:
        super().__init__(logging.DEBUG)
        self.reporter = reporter
        self.setFormatter(logging.Formatter("%(name)s %(levelname)s: %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        if self.reporter.quiet:
            return
        if not self.reporter.verbose and record.levelno < logging.WARNING:
            return
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        self.reporter.show_log(message)
