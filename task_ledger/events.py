import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class TaskEventType(str, enum.Enum):
    CREATED = "TaskCreated"
    COMPLETED = "TaskCompleted"
    UNCOMPLETED = "TaskUncompleted"
    UPDATED = "TaskUpdated"
    DELETED = "TaskDeleted"


@dataclass(frozen=True, slots=True)
class TaskEvent:
    event_type: TaskEventType
    owner: str
    task_id: int
    timestamp: int
    # Only set for TaskCreated / TaskUpdated.
    content: Optional[str] = None


Subscriber = Callable[[TaskEvent], None]


class EventBus:
    """
    In-process observable for task events.

    The store publishes after a mutation has been committed. Subscribers are
    notification sinks (UI refresh, audit): a subscriber that raises is
    logged and skipped, it never undoes or fails the mutation.
    """

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: TaskEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)

        logger.debug(
            "Publishing %s owner=%s task_id=%s to %d subscriber(s)",
            event.event_type.value,
            event.owner,
            event.task_id,
            len(subscribers),
        )
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber %r failed on %s", callback, event.event_type.value)


# Default bus shared by the API and scripts.
event_bus = EventBus()
