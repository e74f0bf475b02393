"""
Request schemas for the goals API.
Bodies are camelCase JSON; snake_case names are accepted too.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoalCreate(CamelModel):
    """A goal minus its id; the server generates one (a client-sent id is ignored)."""
    title: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    progress: Optional[int] = None
    is_completed: Optional[bool] = None
    created_at: Optional[int] = None
    completed_at: Optional[int] = None
    scheduled_days: Optional[List[int]] = None
    one_time_task: Optional[int] = None
    expanded: Optional[bool] = None
    reminder: Optional[int] = None


class GoalUpdate(CamelModel):
    """Partial goal. Only fields present in the body are merged."""
    title: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    progress: Optional[int] = None
    is_completed: Optional[bool] = None
    completed_at: Optional[int] = None
    scheduled_days: Optional[List[int]] = None
    one_time_task: Optional[int] = None
    expanded: Optional[bool] = None
    reminder: Optional[int] = None


class GoalReorderItem(GoalUpdate):
    id: str
    created_at: Optional[int] = None


class ProgressSnapshotCreate(CamelModel):
    timestamp: Optional[int] = None
    progress: float
    total_goals: int
    completed_goals: int
