"""
Task backend selection.

Callers work against TaskBackend and receive TaskView objects whichever
store sits behind it:
  local  - the session-only LocalDataStore
  remote - TaskService over the database
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Protocol

from sqlalchemy.orm import Session

from lifesync.application.local_store import LocalDataStore
from lifesync.application.tasks import TaskService
from lifesync.config import Settings
from lifesync.domain.enums import Priority, TaskStatus, parse_enum
from lifesync.domain.errors import NotFoundError, ValidationError
from lifesync.domain.local_models import LocalTask
from lifesync.infrastructure.db.models import TaskModel

logger = logging.getLogger(__name__)


@dataclass
class TaskView:
    id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    repeat: bool = False

    @classmethod
    def from_local(cls, task: LocalTask) -> "TaskView":
        return cls(
            id=task.id, title=task.title, description=task.description, category=task.category,
            due_date=task.due_date, priority=task.priority, completed=task.completed, repeat=task.repeat,
        )

    @classmethod
    def from_model(cls, task: TaskModel) -> "TaskView":
        return cls(
            id=task.id, title=task.title, description=task.description, category=task.category,
            due_date=task.due_date, priority=Priority(task.priority),
            completed=task.status == TaskStatus.COMPLETED.value, repeat=task.is_recurring,
        )


class TaskBackend(Protocol):
    def list_tasks(self) -> List[TaskView]: ...

    def get_task(self, task_id: str) -> Optional[TaskView]: ...

    def add_task(self, title: str, **fields) -> TaskView: ...

    def update_task(self, task_id: str, **changes) -> TaskView: ...

    def delete_task(self, task_id: str) -> None: ...

    def toggle_task(self, task_id: str) -> TaskView: ...


_VIEW_FIELDS = ("title", "description", "category", "due_date", "priority", "completed", "repeat")


def _check_fields(fields) -> None:
    unknown = sorted(set(fields) - set(_VIEW_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown task fields: {', '.join(unknown)}")


class LocalTaskBackend:
    def __init__(self, store: LocalDataStore):
        self.store = store

    def _require(self, task_id: str) -> LocalTask:
        for task in self.store.tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f"task {task_id} not found")

    def list_tasks(self) -> List[TaskView]:
        return [TaskView.from_local(t) for t in self.store.tasks]

    def get_task(self, task_id: str) -> Optional[TaskView]:
        try:
            return TaskView.from_local(self._require(task_id))
        except NotFoundError:
            return None

    def add_task(self, title: str, **fields) -> TaskView:
        _check_fields(fields)
        return TaskView.from_local(self.store.add_task(title, **fields))

    def update_task(self, task_id: str, **changes) -> TaskView:
        _check_fields(changes)
        self._require(task_id)
        return TaskView.from_local(self.store.update_task(task_id, **changes))

    def delete_task(self, task_id: str) -> None:
        self.store.delete_task(task_id)

    def toggle_task(self, task_id: str) -> TaskView:
        self._require(task_id)
        return TaskView.from_local(self.store.toggle_task(task_id))


class RemoteTaskBackend:
    """TaskService of one owner, seen through TaskView"""

    def __init__(self, db: Session, owner_id: str):
        self.service = TaskService(db)
        self.owner_id = owner_id

    @staticmethod
    def _to_columns(fields) -> dict:
        _check_fields(fields)
        columns = dict(fields)
        if "completed" in columns:
            completed = columns.pop("completed")
            columns["status"] = TaskStatus.COMPLETED if completed else TaskStatus.TODO
        if "repeat" in columns:
            columns["is_recurring"] = bool(columns.pop("repeat"))
        if "priority" in columns:
            columns["priority"] = parse_enum(Priority, columns["priority"], "priority")
        return columns

    def _owned(self, task_id: str) -> TaskModel:
        task = self.service.get_by_id(task_id)
        if task is None or task.owner_id != self.owner_id:
            raise NotFoundError(f"task {task_id} not found")
        return task

    def list_tasks(self) -> List[TaskView]:
        return [TaskView.from_model(t) for t in self.service.list(owner_id=self.owner_id)]

    def get_task(self, task_id: str) -> Optional[TaskView]:
        task = self.service.get_by_id(task_id)
        if task is None or task.owner_id != self.owner_id:
            return None
        return TaskView.from_model(task)

    def add_task(self, title: str, **fields) -> TaskView:
        task = self.service.create(owner_id=self.owner_id, title=title, **self._to_columns(fields))
        return TaskView.from_model(task)

    def update_task(self, task_id: str, **changes) -> TaskView:
        self._owned(task_id)
        return TaskView.from_model(self.service.update(task_id, **self._to_columns(changes)))

    def delete_task(self, task_id: str) -> None:
        task = self.service.get_by_id(task_id)
        if task is not None and task.owner_id == self.owner_id:
            self.service.soft_delete(task_id)

    def toggle_task(self, task_id: str) -> TaskView:
        self._owned(task_id)
        task, _spawned = self.service.toggle(task_id)
        return TaskView.from_model(task)


def build_task_backend(
    settings: Settings,
    store: Optional[LocalDataStore] = None,
    db: Optional[Session] = None,
    owner_id: Optional[str] = None,
) -> TaskBackend:
    """Pick the task backend named by settings.DATA_BACKEND."""
    if settings.DATA_BACKEND == "local":
        if store is None:
            raise ValueError("local task backend needs a LocalDataStore")
        return LocalTaskBackend(store)
    if settings.DATA_BACKEND == "remote":
        if db is None or owner_id is None:
            raise ValueError("remote task backend needs a session and an owner_id")
        return RemoteTaskBackend(db, owner_id)
    raise ValueError(f"Unknown data backend: {settings.DATA_BACKEND}")
