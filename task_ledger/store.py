import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlmodel import Session, select

from .errors import (
    MAX_CONTENT_BYTES,
    AlreadyDeleted,
    ContentTooLong,
    EmptyContent,
    InvalidContent,
    TaskNotFound,
)
from .events import EventBus, TaskEvent, TaskEventType, event_bus
from .models import Task, TaskEventRecord, TaskLedger

logger = logging.getLogger(__name__)

# Mutations run one at a time across the process, each in its own transaction.
_mutation_lock = threading.Lock()


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int


def validate_content(content: str) -> str:
    """Check that content is 1 to MAX_CONTENT_BYTES bytes of UTF-8."""
    try:
        size = len(content.encode("utf-8"))
    except UnicodeEncodeError as exc:
        raise InvalidContent("Content must be valid UTF-8") from exc
    if size == 0:
        raise EmptyContent()
    if size > MAX_CONTENT_BYTES:
        raise ContentTooLong()
    return content


class TaskStore:
    """Per-owner task ledger over a database session.

    Each owner has an append-only sequence of tasks addressed by index and a
    cached count of live (non-deleted) tasks. Every method takes the owner
    explicitly; nothing here can reach another owner's sequence except
    ``get_task_count_for_user``.

    Toggling or updating a deleted slot raises ``AlreadyDeleted`` so a
    deleted task can never come back.
    """

    def __init__(
        self,
        db: Session,
        bus: EventBus = event_bus,
        clock: Callable[[], float] = time.time,
    ):
        self.db = db
        self.bus = bus
        self.clock = clock

    # ---- helpers ----

    def _now(self) -> int:
        return int(self.clock())

    def _ledger(self, owner: str) -> Optional[TaskLedger]:
        return self.db.exec(select(TaskLedger).where(TaskLedger.owner == owner)).first()

    def _slot(self, owner: str, task_id: int) -> Task:
        ledger = self._ledger(owner)
        length = ledger.length if ledger else 0
        if task_id < 0 or task_id >= length:
            raise TaskNotFound()
        task = self.db.exec(select(Task).where(Task.owner == owner, Task.id == task_id)).first()
        if task is None:
            raise TaskNotFound()
        return task

    def _live_slot(self, owner: str, task_id: int) -> Task:
        task = self._slot(owner, task_id)
        if task.is_deleted:
            raise AlreadyDeleted()
        return task

    def _commit(self, events: List[TaskEvent], *instances) -> None:
        for event in events:
            self.db.add(TaskEventRecord(
                event_type=event.event_type.value,
                owner=event.owner,
                task_id=event.task_id,
                content=event.content,
                timestamp=event.timestamp,
            ))
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for instance in instances:
            self.db.refresh(instance)

    def _publish(self, events: List[TaskEvent]) -> None:
        # Called with _mutation_lock released so subscribers may call back in.
        for event in events:
            self.bus.publish(event)

    # ---- mutations ----

    def create_task(self, owner: str, content: str) -> Task:
        validate_content(content)
        with _mutation_lock:
            ledger = self._ledger(owner)
            if ledger is None:
                ledger = TaskLedger(owner=owner)
                self.db.add(ledger)
                logger.info("Opened task ledger for owner=%s", owner)

            now = self._now()
            task = Task(
                owner=owner,
                id=ledger.length,
                content=content,
                completed=False,
                created_at=now,
                completed_at=0,
            )
            ledger.length += 1
            ledger.active_count += 1
            self.db.add(task)

            events = [TaskEvent(TaskEventType.CREATED, owner, task.id, now, content)]
            self._commit(events, task)

        self._publish(events)
        logger.debug("Task created owner=%s id=%s", owner, task.id)
        return task

    def toggle_task(self, owner: str, task_id: int) -> Task:
        with _mutation_lock:
            task = self._live_slot(owner, task_id)
            now = self._now()
            task.completed = not task.completed
            if task.completed:
                task.completed_at = now
                event_type = TaskEventType.COMPLETED
            else:
                task.completed_at = 0
                event_type = TaskEventType.UNCOMPLETED

            events = [TaskEvent(event_type, owner, task_id, now)]
            self._commit(events, task)

        self._publish(events)
        logger.debug("Task toggled owner=%s id=%s completed=%s", owner, task_id, task.completed)
        return task

    def update_task(self, owner: str, task_id: int, content: str) -> Task:
        with _mutation_lock:
            task = self._live_slot(owner, task_id)
            validate_content(content)
            now = self._now()
            task.content = content

            events = [TaskEvent(TaskEventType.UPDATED, owner, task_id, now, content)]
            self._commit(events, task)

        self._publish(events)
        logger.debug("Task updated owner=%s id=%s", owner, task_id)
        return task

    def delete_task(self, owner: str, task_id: int) -> Task:
        with _mutation_lock:
            task = self._live_slot(owner, task_id)
            ledger = self._ledger(owner)
            now = self._now()

            # completed_at is left as it was.
            task.content = ""
            task.completed = True
            ledger.active_count -= 1

            events = [TaskEvent(TaskEventType.DELETED, owner, task_id, now)]
            self._commit(events, task)

        self._publish(events)
        logger.info("Task deleted owner=%s id=%s", owner, task_id)
        return task

    # ---- queries ----

    def get_task(self, owner: str, task_id: int) -> Task:
        """Return the raw slot, deleted or not."""
        return self._slot(owner, task_id)

    def get_all_tasks(self, owner: str) -> List[Task]:
        """Return the whole sequence in id order, deleted slots included."""
        query = select(Task).where(Task.owner == owner).order_by(Task.id.asc())
        return list(self.db.exec(query).all())

    def get_completed_tasks(self, owner: str) -> List[Task]:
        return [t for t in self.get_all_tasks(owner) if t.completed and not t.is_deleted]

    def get_pending_tasks(self, owner: str) -> List[Task]:
        return [t for t in self.get_all_tasks(owner) if not t.completed and not t.is_deleted]

    def get_active_task_count(self, owner: str) -> int:
        ledger = self._ledger(owner)
        return ledger.active_count if ledger else 0

    def get_task_count_for_user(self, address: str) -> int:
        return self.get_active_task_count(address)

    def get_task_stats(self, owner: str) -> TaskStats:
        completed = len(self.get_completed_tasks(owner))
        total = self.get_active_task_count(owner)
        return TaskStats(total=total, completed=completed, pending=total - completed)

    def get_events(self, owner: str, after: int = 0, limit: int = 100) -> List[TaskEventRecord]:
        """Return the owner's recorded events with ``id > after``, oldest first."""
        query = (
            select(TaskEventRecord)
            .where(TaskEventRecord.owner == owner, TaskEventRecord.id > after)
            .order_by(TaskEventRecord.id.asc())
            .limit(limit)
        )
        return list(self.db.exec(query).all())
