from contextlib import contextmanager
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlmodel import Session

from ..database import get_db
from ..errors import TaskStoreError
from ..schemas.account import normalize_address
from ..schemas.task import (
    TaskCount,
    TaskCreate,
    TaskEvent as TaskEventSchema,
    TaskResponse,
    TaskStats as TaskStatsSchema,
    TaskUpdate,
)
from ..store import TaskStore
from .auth import get_current_owner

router = APIRouter()


def get_store(db: Session = Depends(get_db)) -> TaskStore:
    """Dependency to get a task store bound to the request's session."""
    return TaskStore(db)


@contextmanager
def _store_errors():
    try:
        yield
    except TaskStoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.get("/tasks", response_model=List[TaskResponse])
def get_tasks(
    status: str = "all",
    include_deleted: bool = True,
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    """List the caller's tasks in id order.

    ``status=all`` returns the raw sequence, deleted slots included unless
    ``include_deleted=false``. ``completed`` and ``pending`` never contain
    deleted tasks.
    """
    if status == "completed":
        return store.get_completed_tasks(owner)
    if status == "pending":
        return store.get_pending_tasks(owner)
    if status != "all":
        raise HTTPException(status_code=422, detail="Invalid status filter")

    tasks = store.get_all_tasks(owner)
    if not include_deleted:
        tasks = [task for task in tasks if not task.is_deleted]
    return tasks


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    """Append a new task to the caller's sequence."""
    with _store_errors():
        return store.create_task(owner, task.content)


@router.get("/tasks/count", response_model=TaskCount)
def get_active_task_count(
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    return TaskCount(owner=owner, count=store.get_active_task_count(owner))


@router.get("/tasks/stats", response_model=TaskStatsSchema)
def get_task_stats(
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    return store.get_task_stats(owner)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int = Path(..., ge=0),
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    """Get a task slot by id. Deleted slots are returned with empty content."""
    with _store_errors():
        return store.get_task(owner, task_id)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_update: TaskUpdate,
    task_id: int = Path(..., ge=0),
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    """Replace a task's content."""
    with _store_errors():
        return store.update_task(owner, task_id, task_update.content)


@router.patch("/tasks/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(
    task_id: int = Path(..., ge=0),
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    """Flip a task between completed and pending."""
    with _store_errors():
        return store.toggle_task(owner, task_id)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int = Path(..., ge=0),
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    """Soft-delete a task. Its id is never reused."""
    with _store_errors():
        store.delete_task(owner, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/{address}/task-count", response_model=TaskCount)
def get_task_count_for_user(
    address: str,
    store: TaskStore = Depends(get_store),
):
    """Live task count of any address. Needs no authentication."""
    try:
        address = normalize_address(address)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return TaskCount(owner=address, count=store.get_task_count_for_user(address))


@router.get("/events", response_model=List[TaskEventSchema])
def get_events(
    after: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    owner: str = Depends(get_current_owner),
    store: TaskStore = Depends(get_store),
):
    """The caller's event log, oldest first, for refresh and audit."""
    return store.get_events(owner, after=after, limit=limit)
