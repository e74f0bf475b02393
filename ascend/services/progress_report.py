"""
Completion report: how many goals were finished per day and per month.

Windows are computed in local time and are closed on both ends, so a goal
completed at exactly 00:00:00.000 lands in that day's bucket and one
completed at 23:59:59.999 is the last one counted for the day.
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

logger = logging.getLogger("ascend.progress")

WEEK_DAYS = 7
MONTH_DAYS = 30
LAST_MILLISECOND = time(23, 59, 59, 999000)


def to_epoch_ms(moment: datetime) -> int:
    """Local naive datetime -> epoch milliseconds."""
    return round(moment.timestamp() * 1000)


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def completed_goals(goals: Iterable[Any]) -> List[Any]:
    """
    Goals that count towards the report: completed and carrying a completion time.
    Completion times that are not integer milliseconds are logged and dropped.
    """
    kept = []
    for goal in goals:
        if not goal.is_completed or goal.completed_at is None:
            continue
        if not _is_timestamp(goal.completed_at):
            logger.warning(
                "progress_report_bad_completed_at",
                extra={"goal_id": goal.id, "completed_at": repr(goal.completed_at)},
            )
            continue
        kept.append(goal)
    return kept


def _bucket(goals: Sequence[Any], start_ms: int, end_ms: int) -> List[str]:
    return [g.id for g in goals if start_ms <= g.completed_at <= end_ms]


def daily_buckets(goals: Sequence[Any], today: date, days: int) -> List[Dict[str, Any]]:
    """One bucket per day for the ``days`` days ending with ``today``, oldest first."""
    buckets = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        goal_ids = _bucket(
            goals,
            to_epoch_ms(datetime.combine(day, time.min)),
            to_epoch_ms(datetime.combine(day, LAST_MILLISECOND)),
        )
        buckets.append({"day": day.day, "progress": len(goal_ids), "goal_ids": goal_ids})
    return buckets


def monthly_buckets(goals: Sequence[Any], year: int) -> List[Dict[str, Any]]:
    """One bucket per calendar month of ``year``. Completions in other years never count."""
    buckets = []
    for month in range(1, 13):
        last_day = calendar.monthrange(year, month)[1]
        goal_ids = _bucket(
            goals,
            to_epoch_ms(datetime(year, month, 1)),
            to_epoch_ms(datetime.combine(date(year, month, last_day), LAST_MILLISECOND)),
        )
        buckets.append({"month": month, "progress": len(goal_ids), "goal_ids": goal_ids})
    return buckets


def compute_progress_report(goals: Iterable[Any], now: Optional[datetime] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Build the weekly (7 days), monthly (30 days) and yearly (12 months)
    completion counts. ``now`` is a local naive datetime; defaults to the
    current local time.
    """
    today = (now or datetime.now()).date()
    done = completed_goals(goals)
    return {
        "weekly": daily_buckets(done, today, WEEK_DAYS),
        "monthly": daily_buckets(done, today, MONTH_DAYS),
        "yearly": monthly_buckets(done, today.year),
    }
