"""Ordered mapping of suite titles to suite functions."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from assay.errors import RegistryError

if TYPE_CHECKING:
    from assay.config import SuiteRef
    from assay.runner import Runner, SuiteFunction


class SuiteRegistry:
    """Suites to run, in registration order.

    Suites are added with :meth:`add` or the :meth:`suite` decorator::

        registry = SuiteRegistry()

        @registry.suite("strings")
        def strings():
            run_test("upper", test_upper)
    """

    def __init__(self) -> None:
        self._suites: dict[str, SuiteFunction] = {}

    def __len__(self) -> int:
        return len(self._suites)

    def __iter__(self) -> Iterator[tuple[str, SuiteFunction]]:
        return iter(self._suites.items())

    def __contains__(self, title: str) -> bool:
        return title in self._suites

    def titles(self) -> list[str]:
        return list(self._suites)

    def add(self, title: str, func: SuiteFunction) -> None:
        if title in self._suites:
            raise RegistryError(f"Suite '{title}' is already registered")
        self._suites[title] = func

    def suite(self, title: str) -> Callable[[SuiteFunction], SuiteFunction]:
        def decorator(func: SuiteFunction) -> SuiteFunction:
            self.add(title, func)
            return func

        return decorator

    def filtered(self, titles: Iterable[str]) -> SuiteRegistry:
        """Return a registry holding only ``titles``, in registration order."""
        wanted = set(titles)
        unknown = wanted - set(self._suites)
        if unknown:
            raise RegistryError(
                f"Unknown suite(s): {', '.join(sorted(unknown))}. "
                f"Available: {', '.join(self._suites)}"
            )
        subset = SuiteRegistry()
        for title, func in self._suites.items():
            if title in wanted:
                subset.add(title, func)
        return subset

    def run(self, runner: Runner) -> None:
        for title, func in self._suites.items():
            runner.run_suite(title, func)


def resolve_target(target: str) -> SuiteFunction:
    """Import ``"package.module:function"`` and return the callable."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise RegistryError(
            f"Invalid suite target {target!r}; expected 'package.module:function'"
        )
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise RegistryError(f"Cannot import module '{module_name}': {e}") from e
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise RegistryError(
                f"Module '{module_name}' has no attribute '{attr_path}'"
            ) from e
    if not callable(obj):
        raise RegistryError(f"Suite target {target!r} is not callable")
    return obj


def load_registry(suites: Iterable[SuiteRef]) -> SuiteRegistry:
    """Build a registry from configured ``title``/``target`` pairs."""
    registry = SuiteRegistry()
    for ref in suites:
        registry.add(ref.title, resolve_target(ref.target))
    return registry
