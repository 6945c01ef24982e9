"""Pytest configuration and fixtures."""

import logging

import pytest

from assay.runner import Runner


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Reset assay loggers after each test to prevent handler leaks.

    Module-level loggers are kept registered so later tests see the same objects.
    """
    yield

    names = [
        name
        for name in list(logging.Logger.manager.loggerDict.keys())
        if name.startswith("assay")
    ]

    for name in names:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.disabled = False


class Console:
    """Collects everything the reporter writes."""

    def __init__(self):
        self.chunks: list[str] = []

    def __call__(self, text: str) -> None:
        self.chunks.append(text)

    @property
    def text(self) -> str:
        return "".join(self.chunks)


@pytest.fixture
def console():
    return Console()


@pytest.fixture
def make_runner(console):
    """Build a Runner that writes uncolored output to ``console``."""

    def _make(**kwargs) -> Runner:
        kwargs.setdefault("color", False)
        kwargs.setdefault("sink", console)
        return Runner(**kwargs)

    return _make
