"""Reusable setup/teardown pairs."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from assay.errors import FatalError

if TYPE_CHECKING:
    from assay.runner import Runner

logger = logging.getLogger("assay.fixtures")


class TempFileFixture:
    """Provides each test with a fresh, open temporary file.

    ``setup`` creates the file and checks that it can seek. ``teardown``
    closes and unlinks it whatever the test's outcome.
    """

    def __init__(self, suffix: str | None = None, dir: Path | str | None = None):
        self.suffix = suffix
        self.dir = dir
        self.fd: int = -1
        self.path: Path | None = None

    def setup(self) -> None:
        try:
            self.fd, name = tempfile.mkstemp(suffix=self.suffix, dir=self.dir)
        except OSError as e:
            logger.error("can't create test file: %s", e)
            raise FatalError(f"can't create test file: {e}") from e
        self.path = Path(name)

        try:
            position = os.lseek(self.fd, 0, os.SEEK_SET)
        except OSError as e:
            position = None
            reason = e.strerror
        else:
            reason = f"seek returned {position}"
        if position != 0:
            logger.error("can't seek in test file: %s", reason)
            self.teardown()
            raise FatalError(f"can't seek in test file: {reason}")

    def teardown(self) -> None:
        if self.fd < 0 or self.path is None:
            raise RuntimeError("teardown() called without a successful setup()")
        try:
            os.close(self.fd)
        finally:
            self.fd = -1
            path, self.path = self.path, None
            path.unlink(missing_ok=True)


def use_temp_file(
    runner: Runner, suffix: str | None = None, dir: Path | str | None = None
) -> TempFileFixture:
    """Register a :class:`TempFileFixture` as the current suite's setup/teardown."""
    fixture = TempFileFixture(suffix=suffix, dir=dir)
    runner.set_setup(fixture.setup)
    runner.set_teardown(fixture.teardown)
    return fixture
