"""
Ascend Schemas Package
Request and response models for the goals API.
"""

from ascend.schema.request import (
    GoalCreate,
    GoalUpdate,
    GoalReorderItem,
    ProgressSnapshotCreate,
)
from ascend.schema.response import (
    GoalRead,
    DayBucket,
    MonthBucket,
    ProgressReportRead,
    ProgressSnapshotRead,
    HealthRead,
)

__all__ = [
    # Requests
    "GoalCreate",
    "GoalUpdate",
    "GoalReorderItem",
    "ProgressSnapshotCreate",
    # Responses
    "GoalRead",
    "DayBucket",
    "MonthBucket",
    "ProgressReportRead",
    "ProgressSnapshotRead",
    "HealthRead",
]
