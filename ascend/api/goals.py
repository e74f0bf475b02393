"""
Goals API: goal tree CRUD, batch reorder and completion reports.
Store errors are mapped to status codes by the app-level handlers in ascend.main.
"""

from typing import Any, AsyncGenerator, Dict, List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ascend.context import AppContext
from ascend.schema.request import GoalCreate, GoalReorderItem, GoalUpdate, ProgressSnapshotCreate
from ascend.schema.response import GoalRead, HealthRead, ProgressReportRead, ProgressSnapshotRead
from ascend.services.goal_service import GoalStore
from ascend.services.progress_report import compute_progress_report


router = APIRouter(prefix="/goals", tags=["goals"])


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_db(context: AppContext = Depends(get_context)) -> AsyncGenerator[AsyncSession, None]:
    async with context.database.session() as session:
        yield session


async def get_store(
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> GoalStore:
    return GoalStore(db, context.metrics)


@router.get("/health", response_model=HealthRead)
async def health():
    """Liveness probe; never touches the database."""
    return HealthRead()


@router.get("/progress", response_model=ProgressReportRead)
async def progress_report(store: GoalStore = Depends(get_store)):
    """Completions per day for the last 7 and 30 days, and per month of the current year."""
    goals = await store.list_goals()
    return ProgressReportRead.model_validate(compute_progress_report(goals))


@router.get("/snapshots", response_model=List[ProgressSnapshotRead])
async def list_snapshots(store: GoalStore = Depends(get_store)):
    return await store.list_progress_snapshots()


@router.post("/snapshots", response_model=ProgressSnapshotRead, status_code=status.HTTP_201_CREATED)
async def record_snapshot(body: ProgressSnapshotCreate, store: GoalStore = Depends(get_store)):
    return await store.save_progress_snapshot(
        progress=body.progress,
        total_goals=body.total_goals,
        completed_goals=body.completed_goals,
        timestamp=body.timestamp,
    )


@router.post("/reorder")
async def reorder_goals(
    body: List[GoalReorderItem],
    request: Request,
    store: GoalStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """
    Rewrite every goal in the payload, all or nothing.
    Responds with the payload exactly as received, unknown keys included.
    """
    await store.reorder_goals([item.model_dump(exclude_unset=True) for item in body])
    return await request.json()


@router.get("", response_model=List[GoalRead])
async def list_goals(store: GoalStore = Depends(get_store)):
    return await store.list_goals()


@router.post("", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal(body: GoalCreate, store: GoalStore = Depends(get_store)):
    return await store.create_goal(body.model_dump(exclude_unset=True))


@router.get("/{goal_id}", response_model=GoalRead)
async def get_goal(goal_id: str, store: GoalStore = Depends(get_store)):
    return await store.get_goal(goal_id)


@router.put("/{goal_id}", response_model=GoalRead)
async def update_goal(goal_id: str, body: GoalUpdate, store: GoalStore = Depends(get_store)):
    return await store.update_goal(goal_id, body.model_dump(exclude_unset=True))


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: str, store: GoalStore = Depends(get_store)):
    await store.delete_goal(goal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
