"""
Storage for daily per-provider usage counters.

The in-memory store is the default and keeps a single day of counters. The
SQL store keeps one row per (day, provider) and increments in the database,
so instances sharing a database also share budgets.
"""
import threading
from datetime import date
from typing import Callable, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.models import ProviderUsage
from repositories.models import ProviderUsageORM


class UsageStore:
    """Interface for usage counter storage keyed by calendar day."""

    def counts(self, day: date) -> Dict[str, ProviderUsage]:
        raise NotImplementedError

    def increment(self, day: date, provider: str, cost: float) -> ProviderUsage:
        raise NotImplementedError

    def reset(self, day: date) -> None:
        raise NotImplementedError


class InMemoryUsageStore(UsageStore):
    def __init__(self) -> None:
        self._day: date | None = None
        self._counters: Dict[str, ProviderUsage] = {}
        self._lock = threading.Lock()

    def counts(self, day: date) -> Dict[str, ProviderUsage]:
        with self._lock:
            if day != self._day:
                return {}
            return {
                name: ProviderUsage(name, u.call_count, u.cost_estimate)
                for name, u in self._counters.items()
            }

    def increment(self, day: date, provider: str, cost: float) -> ProviderUsage:
        with self._lock:
            if day != self._day:
                self._day = day
                self._counters = {}
            usage = self._counters.setdefault(provider, ProviderUsage(provider=provider))
            usage.call_count += 1
            usage.cost_estimate += cost
            return ProviderUsage(provider, usage.call_count, usage.cost_estimate)

    def reset(self, day: date) -> None:
        with self._lock:
            self._day = day
            self._counters = {}


class SqlUsageStore(UsageStore):
    """Usage counters in a SQL database via SQLAlchemy."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def counts(self, day: date) -> Dict[str, ProviderUsage]:
        with self.session_factory() as session:
            rows = session.query(ProviderUsageORM).filter(ProviderUsageORM.day == day).all()
            return {
                row.provider: ProviderUsage(row.provider, row.call_count, row.cost_estimate)
                for row in rows
            }

    def _bump(self, session: Session, day: date, provider: str, cost: float) -> int:
        return (
            session.query(ProviderUsageORM)
            .filter(ProviderUsageORM.day == day, ProviderUsageORM.provider == provider)
            .update(
                {
                    ProviderUsageORM.call_count: ProviderUsageORM.call_count + 1,
                    ProviderUsageORM.cost_estimate: ProviderUsageORM.cost_estimate + cost,
                },
                synchronize_session=False,
            )
        )

    def increment(self, day: date, provider: str, cost: float) -> ProviderUsage:
        with self.session_factory() as session:
            updated = self._bump(session, day, provider, cost)
            if not updated:
                session.add(
                    ProviderUsageORM(day=day, provider=provider, call_count=1, cost_estimate=cost)
                )
                try:
                    session.commit()
                except IntegrityError:
                    # Another instance inserted the row first.
                    session.rollback()
                    self._bump(session, day, provider, cost)
                    session.commit()
            else:
                session.commit()
            row = session.get(ProviderUsageORM, (day, provider))
            return ProviderUsage(provider, row.call_count, row.cost_estimate)

    def reset(self, day: date) -> None:
        """Drop counters from days before `day`; today's rows start from zero."""
        with self.session_factory() as session:
            session.query(ProviderUsageORM).filter(ProviderUsageORM.day < day).delete(
                synchronize_session=False
            )
            session.commit()
