"""
Demo goals for a fresh database.
Only runs against an empty goals table, so restarting never duplicates them.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from ascend.models import Goal
from ascend.services.goal_service import GoalStore
from ascend.services.progress_report import to_epoch_ms

logger = logging.getLogger("ascend.seed")


def _js_weekday(moment: datetime) -> int:
    """0=Sunday .. 6=Saturday, the convention scheduled_days uses."""
    return (moment.weekday() + 1) % 7


async def seed_demo_goals(store: GoalStore, now: Optional[datetime] = None) -> List[Goal]:
    """Create the demo goal set if no goals exist yet. Returns what was created."""
    existing = await store.list_goals()
    if existing:
        logger.info("seed_skipped", extra={"existing_goals": len(existing)})
        return []

    now = now or datetime.now()
    today = _js_weekday(now)
    yesterday = 6 if today == 0 else today - 1

    def days_ago(n: int) -> int:
        return to_epoch_ms(now - timedelta(days=n))

    created = []
    for fields in (
        {
            "title": "Finish Q4 Report",
            "is_completed": True,
            "progress": 100,
            "created_at": days_ago(5),
            "completed_at": days_ago(2),
            "scheduled_days": [yesterday],
        },
        {
            "title": "Plan Team Offsite",
            "is_completed": True,
            "progress": 100,
            "created_at": days_ago(10),
            "completed_at": days_ago(1),
            "scheduled_days": [today],
        },
    ):
        created.append(await store.create_goal(fields))

    feature = await store.create_goal(
        {"title": "Develop New Feature", "progress": 50, "created_at": days_ago(2), "scheduled_days": [today]}
    )
    created.append(feature)

    for fields in (
        {
            "title": "Gather requirements",
            "is_completed": True,
            "progress": 100,
            "parent_id": feature.id,
            "created_at": days_ago(2),
            "completed_at": days_ago(0),
            "scheduled_days": [today],
        },
        {"title": "Daily Standup", "created_at": days_ago(1), "scheduled_days": []},
        {"title": "Review Code", "created_at": days_ago(3), "scheduled_days": [1, 3, 5]},
        {"title": "Weekly Sync with Manager", "created_at": days_ago(7), "scheduled_days": [today]},
    ):
        created.append(await store.create_goal(fields))

    logger.info("seed_created", extra={"goals": len(created)})
    return created
