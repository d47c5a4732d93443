"""
Pytest fixtures for Parlor tests.
"""

import pytest

from ..config import Settings
from ..engine_core.random_source import RandomSource
from ..engine_core.ruleset import MoveContext
from ..engine_core.timing import ManualClock
from ..session import SessionManager, InMemoryStore, RecordingSink


@pytest.fixture
def rng() -> RandomSource:
    """Seeded randomness so every shuffle and word pick is repeatable."""
    return RandomSource(seed=1234)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def ctx(clock, rng) -> MoveContext:
    return MoveContext(now_ms=clock.now_ms(), rng=rng)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def manager(store, rng, clock, sink, settings) -> SessionManager:
    """SessionManager wired to in-memory collaborators."""
    return SessionManager(store=store, rng=rng, clock=clock, sink=sink, settings=settings)


@pytest.fixture
def started_tictactoe(manager):
    """Tic-tac-toe between alice (X) and bob (O), alice to move."""
    session = manager.create_game("alice", "tictactoe")
    return manager.join_game("bob", session.session_id)


@pytest.fixture
def started_connect_four(manager):
    session = manager.create_game("alice", "connect_four")
    return manager.join_game("bob", session.session_id)


@pytest.fixture
def started_checkers(manager):
    session = manager.create_game("alice", "checkers")
    return manager.join_game("bob", session.session_id)


@pytest.fixture
def drawing_room(manager):
    """Quick draw room with alice (host), bob and carol, started."""
    session = manager.create_game("alice", "quick_draw", {"total_rounds": 2, "round_duration": 60})
    manager.join_game("bob", session.session_id)
    manager.join_game("carol", session.session_id)
    return manager.start_game("alice", session.session_id)
