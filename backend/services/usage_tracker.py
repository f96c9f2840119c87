"""
Daily per-provider call counters, cost estimates and budgets.

Every public method starts with the day-rollover check: the first access on
a new calendar day (process-local clock) zeroes the counters before doing
anything else. There is no scheduler.
"""
from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, Dict, Mapping, Optional

from repositories.usage import InMemoryUsageStore, UsageStore

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


class UsageTracker:
    def __init__(
        self,
        budget: Mapping[str, int],
        cost_rates: Mapping[str, float],
        soft_limit_usd: Optional[float] = None,
        store: Optional[UsageStore] = None,
        today: Callable[[], date] = date.today,
    ):
        self.budget: Dict[str, int] = dict(budget)
        self.cost_rates: Dict[str, float] = dict(cost_rates)
        self.soft_limit_usd = soft_limit_usd
        self.store = store or InMemoryUsageStore()
        self._today = today
        self._lock = threading.Lock()
        self._day: Optional[date] = None
        self._warned: set[str] = set()

    @property
    def providers(self) -> list[str]:
        return list(self.budget)

    def _roll_over(self) -> date:
        today = self._today()
        with self._lock:
            if self._day != today:
                if self._day is not None:
                    logger.info("usage counters reset for new day %s", today.isoformat())
                self.store.reset(today)
                self._day = today
                self._warned.clear()
        return today

    def record_call(self, provider: str) -> None:
        day = self._roll_over()
        cost = self.cost_rates.get(provider, 0.0)
        usage = self.store.increment(day, provider, cost)
        if (
            self.soft_limit_usd is not None
            and usage.cost_estimate >= self.soft_limit_usd
            and provider not in self._warned
        ):
            self._warned.add(provider)
            logger.warning(
                "%s estimated cost $%.2f reached soft limit $%.2f for %s",
                provider,
                usage.cost_estimate,
                self.soft_limit_usd,
                day.isoformat(),
            )

    def is_under_budget(self, provider: str) -> bool:
        day = self._roll_over()
        usage = self.store.counts(day).get(provider)
        count = usage.call_count if usage else 0
        return count < self.budget.get(provider, 0)

    def get_stats(self) -> Dict[str, Dict[str, float]]:
        day = self._roll_over()
        counts = self.store.counts(day)
        stats: Dict[str, Dict[str, float]] = {}
        for name in self._known_providers(counts):
            usage = counts.get(name)
            stats[name] = {
                "count": usage.call_count if usage else 0,
                "cost_estimate": round(usage.cost_estimate, 4) if usage else 0.0,
            }
        return stats

    def daily_usage(self) -> dict:
        """Per-provider call counts for today plus the ISO date they belong to."""
        stats = self.get_stats()
        daily: dict = {name: int(s["count"]) for name, s in stats.items()}
        daily["date"] = self._day.isoformat() if self._day else self._today().isoformat()
        return daily

    def usage_percent(self) -> Dict[str, float]:
        stats = self.get_stats()
        percent: Dict[str, float] = {}
        for name, limit in self.budget.items():
            count = stats.get(name, {}).get("count", 0)
            percent[name] = round(count / limit * 100, 1) if limit else 100.0
        return percent

    def estimated_monthly_cost(self) -> Dict[str, float]:
        stats = self.get_stats()
        return {
            name: round(s["cost_estimate"] * DAYS_PER_MONTH, 2)
            for name, s in stats.items()
        }

    def _known_providers(self, counts: Mapping[str, object]) -> list[str]:
        names = list(self.budget)
        names.extend(n for n in counts if n not in self.budget)
        return names
