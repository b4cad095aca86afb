"""Pytest configuration and fixtures for clustertopo testing.

Every test starts from a clean process-wide configuration: ``CLUSTERTOPO_*``
and pytest-xdist worker variables are removed and the cached settings and
randomness source are dropped, so tests see the same defaults whether they
run alone or under xdist.
"""

import os
from collections.abc import Callable, Iterable, Iterator

import pytest
from hypothesis import HealthCheck, settings
from loguru import logger

from clustertopo.core.config import reset_topology_settings
from clustertopo.core.random_source import LockedRandom

settings.register_profile(
    "clustertopo",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("clustertopo")


class ScriptedRandom:
    """Randomness source that replays a fixed list of draws."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        value = self._values.pop(0)
        assert a <= value <= b, f"scripted draw {value} outside [{a}, {b}]"
        return value


@pytest.fixture(autouse=True)
def clean_topology_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate each test from the caller's CLUSTERTOPO_* and xdist variables."""
    for name in list(os.environ):
        if name.startswith("CLUSTERTOPO_") or name.startswith("PYTEST_XDIST_WORKER"):
            monkeypatch.delenv(name)
    reset_topology_settings()
    yield
    reset_topology_settings()
    # sinks installed by configure_logging point at per-test capture streams
    logger.remove()


@pytest.fixture
def seeded_rng() -> LockedRandom:
    """Reproducible randomness source."""
    return LockedRandom(seed=1234)


@pytest.fixture
def scripted_rng() -> Callable[..., ScriptedRandom]:
    """Factory for randomness sources that return the given draws in order."""

    def _make(*values: int) -> ScriptedRandom:
        return ScriptedRandom(values)

    return _make
