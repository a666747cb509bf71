"""
Task service.

Besides plain CRUD:
  - subtasks hang off parent_task_id; writes reject a missing parent and
    any ancestry cycle
  - completing a task stamps completed_at, reopening clears it
  - toggle() completes/reopens and rolls repeating tasks over to the next day
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from lifesync.application.base import SoftDeleteService
from lifesync.domain.enums import Priority, TaskStatus
from lifesync.domain.errors import ValidationError
from lifesync.domain.tasks import creates_cycle, next_due_date, should_spawn_next
from lifesync.infrastructure.db.models import TaskModel
from lifesync.utils.clock import utcnow

logger = logging.getLogger(__name__)

# copied onto the next instance of a repeating task
_CARRY_OVER_FIELDS = (
    "owner_id", "project_id", "parent_task_id", "title", "description", "category",
    "priority", "is_recurring", "estimated_hours", "assignee_id", "tags",
)


class TaskValidationError(ValidationError):
    pass


class TaskService(SoftDeleteService[TaskModel]):
    model = TaskModel
    validation_error = TaskValidationError
    required_fields = ("owner_id", "title")
    enum_fields = {"status": TaskStatus, "priority": Priority}
    immutable_fields = frozenset({"id", "created_at", "updated_at", "deleted_at", "completed_at"})
    order_by = (TaskModel.due_date.asc().nulls_last(), TaskModel.created_at.desc())

    def list_by_project(self, project_id: str) -> List[TaskModel]:
        return self.list(project_id=project_id)

    def list_by_assignee(self, user_id: str) -> List[TaskModel]:
        return self.list(assignee_id=user_id)

    def list_subtasks(self, parent_task_id: str) -> List[TaskModel]:
        return self.list(parent_task_id=parent_task_id)

    def toggle(self, task_id: str, today: Optional[date] = None) -> Tuple[TaskModel, Optional[TaskModel]]:
        """
        Flip a task between completed and todo.

        Completing an open repeating task also inserts its next instance (todo,
        due one day after the current due date, or after today when unset).
        Both rows are written in one commit.

        Returns:
            (toggled task, spawned next instance or None)
        """
        if today is None:
            today = date.today()
        task = self._get_or_raise(task_id)
        completed = task.status == TaskStatus.COMPLETED.value

        spawned = None
        if completed:
            task.status = TaskStatus.TODO.value
            task.completed_at = None
        else:
            task.status = TaskStatus.COMPLETED.value
            task.completed_at = utcnow()
            if should_spawn_next(task.is_recurring, completed):
                spawned = TaskModel(
                    **{name: getattr(task, name) for name in _CARRY_OVER_FIELDS},
                    status=TaskStatus.TODO.value,
                    due_date=next_due_date(task.due_date, today),
                )
                if spawned.tags is not None:
                    spawned.tags = list(spawned.tags)
                self.db.add(spawned)
        task.updated_at = utcnow()

        with self._store_errors("toggle"):
            self.db.commit()
        if spawned is not None:
            logger.info("Task %s completed, next instance %s due %s", task_id, spawned.id, spawned.due_date)
        return task, spawned

    def _validate(self, data, row):
        if data.get("tags") is not None:
            data["tags"] = [str(t).strip() for t in data["tags"] if str(t).strip()]
        for name in ("estimated_hours", "actual_hours"):
            if data.get(name) is not None and data[name] < 0:
                raise TaskValidationError(f"{name} cannot be negative")

        parent_id = data.get("parent_task_id")
        if parent_id is None:
            return
        if row is not None and parent_id == row.id:
            raise TaskValidationError("A task cannot be its own parent")
        if self.get_by_id(parent_id) is None:
            raise TaskValidationError(f"Parent task {parent_id} not found")
        if row is not None and creates_cycle(row.id, parent_id, self._parent_of):
            raise TaskValidationError(f"Task {row.id} cannot be moved under its own subtask {parent_id}")

    def _before_write(self, data, row):
        if "status" not in data:
            return
        was_completed = row is not None and row.status == TaskStatus.COMPLETED.value
        if data["status"] == TaskStatus.COMPLETED.value:
            if not was_completed:
                data["completed_at"] = utcnow()
        else:
            data["completed_at"] = None

    def _parent_of(self, task_id: str) -> Optional[str]:
        with self._store_errors("get"):
            parent = self.db.query(TaskModel.parent_task_id).filter(TaskModel.id == task_id).scalar()
        return parent
