"""
Response schemas for the goals API.
"""

from typing import List, Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from ascend.schema.request import CamelModel


class ReadModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class GoalRead(ReadModel):
    id: str
    title: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    progress: int
    is_completed: bool
    created_at: int
    completed_at: Optional[int] = None
    scheduled_days: Optional[List[int]] = None
    one_time_task: Optional[int] = None
    expanded: bool = False
    reminder: Optional[int] = None


# ==========================================
# PROGRESS REPORT
# ==========================================

class DayBucket(ReadModel):
    day: int  # day of month; position in the list disambiguates
    progress: int
    goal_ids: List[str]


class MonthBucket(ReadModel):
    month: int  # 1 = January
    progress: int
    goal_ids: List[str]


class ProgressReportRead(ReadModel):
    weekly: List[DayBucket]
    monthly: List[DayBucket]
    yearly: List[MonthBucket]


class ProgressSnapshotRead(ReadModel):
    id: int
    timestamp: int
    progress: float
    total_goals: int
    completed_goals: int


class HealthRead(ReadModel):
    status: str = "OK"
    service: str = "goals-api"
