import time
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import JSON, BigInteger, CheckConstraint, Column, ForeignKey, String
from sqlmodel import Field, SQLModel


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def new_goal_id() -> str:
    return str(uuid4())


class Goal(SQLModel, table=True):
    __tablename__ = "goals"
    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_goals_progress_range"),
    )

    id: str = Field(default_factory=new_goal_id, sa_column=Column(String(36), primary_key=True))
    title: str = Field(sa_column=Column(String(255), nullable=False))
    description: Optional[str] = None
    # deleting a parent removes its whole subtree
    parent_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), index=True),
    )
    progress: int = 0  # manual progress for leaf goals, 0-100
    is_completed: bool = Field(default=False, index=True)
    created_at: int = Field(default_factory=now_ms, sa_column=Column(BigInteger, nullable=False, index=True))
    completed_at: Optional[int] = Field(default=None, sa_column=Column(BigInteger, index=True))
    scheduled_days: Optional[List[int]] = Field(default=None, sa_column=Column(JSON))  # 0=Sun .. 6=Sat
    one_time_task: Optional[int] = Field(default=None, sa_column=Column(BigInteger))
    expanded: bool = False  # tree view UI state
    reminder: Optional[int] = Field(default=None, sa_column=Column(BigInteger))


# Analytics only; rows are appended and never updated
class ProgressSnapshot(SQLModel, table=True):
    __tablename__ = "progress_snapshots"
    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_snapshots_progress_range"),
        CheckConstraint("total_goals >= 0", name="ck_snapshots_total_goals"),
        CheckConstraint("completed_goals >= 0", name="ck_snapshots_completed_goals"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    timestamp: int = Field(default_factory=now_ms, sa_column=Column(BigInteger, nullable=False, index=True))
    progress: float
    total_goals: int
    completed_goals: int


# Columns an update may rewrite; id and created_at stay as inserted
MUTABLE_GOAL_FIELDS = (
    "title",
    "description",
    "parent_id",
    "progress",
    "is_completed",
    "completed_at",
    "scheduled_days",
    "one_time_task",
    "expanded",
    "reminder",
)
