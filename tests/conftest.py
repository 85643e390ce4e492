"""
tests/conftest.py
Shared fixtures for the test suite.
"""

from collections.abc import Callable, Iterator

import pytest

from core.config import get_settings
from core.lmsr import LMSR
from domain.models import AgentProfile


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Every test starts and ends with an uncached Settings instance."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def override_settings(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Set environment overrides and drop the cached Settings."""
    def _override(**values) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, str(value))
        get_settings.cache_clear()
    return _override


@pytest.fixture
def lmsr() -> LMSR:
    """Market maker with the default liquidity (b=100)."""
    return LMSR(100)


@pytest.fixture
def agents() -> dict[int, AgentProfile]:
    """Three agents with distinct reputations, plus one with zero reputation."""
    profiles = [
        AgentProfile(agent_id=1, name="oracle", reputation=0.8),
        AgentProfile(agent_id=2, name="skeptic", reputation=0.5),
        AgentProfile(agent_id=3, name="rookie", reputation=0.2),
        AgentProfile(agent_id=4, name="muted", reputation=0.0),
    ]
    return {p.agent_id: p for p in profiles}
