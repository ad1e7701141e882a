#!/usr/bin/env python
"""Walk through every task ledger operation for one address and print the result."""
import logging
import sys
from datetime import datetime

from task_ledger.config import LOG_FILE, LOG_LEVEL
from task_ledger.database import create_tables, get_session
from task_ledger.events import event_bus
from task_ledger.logging_setup import setup_logging
from task_ledger.schemas.account import normalize_address
from task_ledger.store import TaskStore

logger = logging.getLogger(__name__)

DEMO_ADDRESS = "0x" + "0" * 39 + "1"

DEMO_TASKS = [
    "Learn the task ledger basics",
    "Build a todo client",
    "Deploy the API",
    "Test all operations",
    "Share with the community",
]


def _fmt(ts: int) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def _print_stats(store: TaskStore, owner: str) -> None:
    stats = store.get_task_stats(owner)
    print(f"   Active tasks: {stats.total}")
    print(f"   Completed: {stats.completed}")
    print(f"   Pending: {stats.pending}")


def main(address: str = DEMO_ADDRESS) -> None:
    owner = normalize_address(address)
    create_tables()
    unsubscribe = event_bus.subscribe(
        lambda event: logger.info("event %s task_id=%s", event.event_type.value, event.task_id)
    )

    try:
        with get_session() as session:
            store = TaskStore(session)
            print(f"Owner: {owner}")

            print("\nCreating tasks...")
            created = [store.create_task(owner, content) for content in DEMO_TASKS]
            for task in created:
                print(f"   Created #{task.id}: {task.content!r}")

            print("\nCompleting tasks...")
            for task in created[:2]:
                store.toggle_task(owner, task.id)
                print(f"   Completed #{task.id}")

            print("\nUpdating task...")
            store.update_task(owner, created[2].id, "Deploy the API behind HTTPS")
            print(f"   Updated #{created[2].id}")

            print("\nTask statistics:")
            _print_stats(store, owner)

            print("\nAll tasks:")
            for task in store.get_all_tasks(owner):
                if task.is_deleted:
                    continue
                mark = "x" if task.completed else " "
                print(f"   [{mark}] #{task.id} {task.content}")
                print(f"      Created: {_fmt(task.created_at)}")
                if task.completed and task.completed_at > 0:
                    print(f"      Completed: {_fmt(task.completed_at)}")

            print(f"\nDeleting task #{created[4].id}...")
            store.delete_task(owner, created[4].id)

            print("\nFinal statistics:")
            _print_stats(store, owner)
    finally:
        unsubscribe()


if __name__ == "__main__":
    setup_logging(level=LOG_LEVEL, log_file=LOG_FILE)
    main(*sys.argv[1:2])
