from datetime import datetime, timedelta, timezone

import pytest

from cadence.domain.models import CardState, LearningItem, MemoryState
from cadence.infrastructure.adapters.memory_repository import InMemoryCardRepository

FIXED_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_item(
    item_id: str = "card-1",
    *,
    deck: str = "Default",
    state: CardState = CardState.NEW,
    due: datetime | None = None,
    created: datetime | None = None,
    updated: datetime | None = None,
    needs_filling: bool = False,
    **memory_fields,
) -> LearningItem:
    """Build an item with sensible defaults; memory fields go to MemoryState."""
    memory = MemoryState(state=state, due=due or FIXED_NOW, **memory_fields)
    return LearningItem(
        id=item_id,
        front=f"Front {item_id}",
        back="" if needs_filling else f"Back {item_id}",
        deck=deck,
        memory=memory,
        created=created or FIXED_NOW,
        updated=updated or FIXED_NOW,
        needs_filling=needs_filling,
    )


def make_due_item(item_id: str, days_overdue: float, **kwargs) -> LearningItem:
    return make_item(
        item_id,
        state=kwargs.pop("state", CardState.REVIEW),
        due=FIXED_NOW - timedelta(days=days_overdue),
        **kwargs,
    )


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def repo(clock):
    return InMemoryCardRepository(clock=clock)


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    return home
