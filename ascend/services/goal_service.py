import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ascend.errors import GoalNotFoundError, GoalStoreError, GoalValidationError, StorageError
from ascend.metrics import AppMetrics
from ascend.models import MUTABLE_GOAL_FIELDS, Goal, ProgressSnapshot, now_ms

logger = logging.getLogger("ascend.goals")

SNAPSHOT_HISTORY_LIMIT = 100


class GoalStore:
    """
    Data access for goals and progress snapshots, bound to one session.

    Every public method is one unit of work: it either commits or rolls back
    before returning, and database failures come out as ``GoalStoreError``
    subclasses.
    """

    def __init__(self, db: AsyncSession, metrics: Optional[AppMetrics] = None):
        self.db = db
        self.metrics = metrics

    @asynccontextmanager
    async def _operation(self, name: str):
        started = time.perf_counter()
        status = "success"
        try:
            yield
        except GoalStoreError:
            status = "failure"
            await self.db.rollback()
            raise
        except IntegrityError as e:
            status = "failure"
            await self.db.rollback()
            logger.warning("goal_constraint_violation", extra={"operation": name, "error": str(e.orig)})
            raise GoalValidationError(f"Constraint violation during {name}: {e.orig}") from e
        except SQLAlchemyError as e:
            status = "failure"
            await self.db.rollback()
            logger.error("goal_storage_failure", extra={"operation": name, "error": str(e)})
            raise StorageError(f"Storage failure during {name}") from e
        finally:
            if self.metrics is not None:
                self.metrics.observe_operation(name, status, time.perf_counter() - started)

    # ==========================================
    # GOALS
    # ==========================================

    async def list_goals(self) -> List[Goal]:
        """Every goal, oldest first."""
        async with self._operation("list"):
            result = await self.db.scalars(
                select(Goal).order_by(Goal.created_at).execution_options(populate_existing=True)
            )
            return list(result.all())

    async def get_goal(self, goal_id: str) -> Goal:
        async with self._operation("get"):
            goal = await self.db.get(Goal, goal_id, populate_existing=True)
            if goal is None:
                raise GoalNotFoundError(goal_id)
            return goal

    async def create_goal(self, fields: Dict[str, Any]) -> Goal:
        """
        Insert a new goal under a freshly generated id.
        Missing created_at/progress/flags fall back to the column defaults.
        """
        data = {k: v for k, v in fields.items() if k != "id"}
        for name in ("created_at", "progress", "is_completed", "expanded"):
            if data.get(name) is None:
                data.pop(name, None)

        async with self._operation("create"):
            goal = Goal(**data)
            self.db.add(goal)
            await self.db.commit()
            await self.db.refresh(goal)

        logger.info("goal_created", extra={"goal_id": goal.id, "parent_id": goal.parent_id})
        return goal

    async def update_goal(self, goal_id: str, updates: Dict[str, Any]) -> Goal:
        """Merge ``updates`` onto the stored goal and rewrite the whole record."""
        async with self._operation("update"):
            goal = await self._merge_and_write(goal_id, updates)
            await self.db.commit()
            await self.db.refresh(goal)
        return goal

    async def delete_goal(self, goal_id: str) -> None:
        """Delete a goal; the foreign key cascade removes its descendants."""
        async with self._operation("delete"):
            result = await self.db.execute(delete(Goal).where(Goal.id == goal_id))
            if result.rowcount == 0:
                raise GoalNotFoundError(goal_id)
            await self.db.commit()

        logger.info("goal_deleted", extra={"goal_id": goal_id})

    async def reorder_goals(self, goals: Sequence[Dict[str, Any]]) -> None:
        """
        Apply a full update for every goal, in order, in one transaction.
        There is no order column; a failure on any item rolls back all of them.
        """
        async with self._operation("reorder"):
            for item in goals:
                await self._merge_and_write(item["id"], item)
            await self.db.commit()

        logger.info("goals_reordered", extra={"count": len(goals)})

    async def _merge_and_write(self, goal_id: str, updates: Dict[str, Any]) -> Goal:
        goal = await self.db.get(Goal, goal_id, populate_existing=True)
        if goal is None:
            raise GoalNotFoundError(goal_id)

        merged = {name: getattr(goal, name) for name in MUTABLE_GOAL_FIELDS}
        merged.update({k: v for k, v in updates.items() if k in MUTABLE_GOAL_FIELDS})

        await self.db.execute(
            update(Goal).where(Goal.id == goal_id).values(**merged).execution_options(synchronize_session=False)
        )
        return goal

    # ==========================================
    # PROGRESS SNAPSHOTS
    # ==========================================

    async def save_progress_snapshot(
        self,
        progress: float,
        total_goals: int,
        completed_goals: int,
        timestamp: Optional[int] = None,
    ) -> ProgressSnapshot:
        snapshot = ProgressSnapshot(
            timestamp=timestamp if timestamp is not None else now_ms(),
            progress=progress,
            total_goals=total_goals,
            completed_goals=completed_goals,
        )
        async with self._operation("snapshot"):
            self.db.add(snapshot)
            await self.db.commit()
            await self.db.refresh(snapshot)
        return snapshot

    async def list_progress_snapshots(self, limit: int = SNAPSHOT_HISTORY_LIMIT) -> List[ProgressSnapshot]:
        """Most recent snapshots first."""
        async with self._operation("snapshot_history"):
            result = await self.db.scalars(
                select(ProgressSnapshot).order_by(ProgressSnapshot.timestamp.desc()).limit(limit)
            )
            return list(result.all())
