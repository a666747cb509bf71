"""
Task rules shared by the local store and the database services.

Repeating tasks:
  completing an open repeating task keeps the instance (now completed) and
  spawns a fresh open instance due one day later. Re-opening a completed
  instance never spawns and never removes an already spawned successor.

Hierarchy:
  tasks reference their parent by id only; a task may not become its own
  ancestor.
"""
from datetime import date, timedelta
from typing import Callable, Optional

REPEAT_INTERVAL = timedelta(days=1)


def next_due_date(due: Optional[date], today: date) -> date:
    """Due date of the next instance of a repeating task."""
    return (due or today) + REPEAT_INTERVAL


def should_spawn_next(repeat: bool, currently_completed: bool) -> bool:
    """A new instance is spawned only on the open -> completed transition."""
    return repeat and not currently_completed


def creates_cycle(
    task_id: str,
    new_parent_id: Optional[str],
    parent_of: Callable[[str], Optional[str]],
) -> bool:
    """
    True when attaching task_id under new_parent_id would make task_id its own ancestor.

    parent_of(id) returns the parent id of a task (None for roots/unknown ids).
    """
    seen: set[str] = set()
    current = new_parent_id
    while current is not None:
        if current == task_id:
            return True
        if current in seen:
            # pre-existing loop that doesn't involve task_id
            return False
        seen.add(current)
        current = parent_of(current)
    return False
