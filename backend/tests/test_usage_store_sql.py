from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from db import Base
from repositories.usage import SqlUsageStore
from services.usage_tracker import UsageTracker


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'usage.db'}", connect_args={"check_same_thread": False})
    from repositories import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def test_increment_creates_then_updates_row(session_factory):
    store = SqlUsageStore(session_factory)
    day = date(2025, 3, 1)

    first = store.increment(day, "google", 0.032)
    second = store.increment(day, "google", 0.032)

    assert first.call_count == 1
    assert second.call_count == 2
    assert store.counts(day)["google"].cost_estimate == pytest.approx(0.064)


def test_reset_drops_previous_days_only(session_factory):
    store = SqlUsageStore(session_factory)
    store.increment(date(2025, 3, 1), "azure", 0.0045)
    store.increment(date(2025, 3, 2), "azure", 0.0045)

    store.reset(date(2025, 3, 2))

    assert store.counts(date(2025, 3, 1)) == {}
    assert store.counts(date(2025, 3, 2))["azure"].call_count == 1


def test_two_trackers_share_budget_through_the_database(session_factory):
    day = date(2025, 3, 1)
    kwargs = dict(budget={"google": 2}, cost_rates={"google": 0.032}, today=lambda: day)
    a = UsageTracker(store=SqlUsageStore(session_factory), **kwargs)
    b = UsageTracker(store=SqlUsageStore(session_factory), **kwargs)

    a.record_call("google")
    b.record_call("google")

    assert a.is_under_budget("google") is False
    assert b.get_stats()["google"]["count"] == 2
