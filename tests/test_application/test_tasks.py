"""
Tests for TaskService: CRUD, soft delete, hierarchy, toggle rollover
"""
from datetime import date, timedelta

import pytest

from lifesync.application.tasks import TaskService, TaskValidationError
from lifesync.domain.errors import NotFoundError
from lifesync.infrastructure.db.models import TaskModel


@pytest.fixture
def service(db_session):
    return TaskService(db_session)


@pytest.fixture
def task(service, sample_user_id):
    return service.create(owner_id=sample_user_id, title="Steuererklärung", due_date=date(2026, 3, 31))


class TestCreate:
    def test_defaults(self, task):
        assert task.id
        assert task.status == "todo"
        assert task.priority == "medium"
        assert task.is_recurring is False
        assert task.completed_at is None
        assert task.created_at is not None

    def test_title_required(self, service, sample_user_id):
        with pytest.raises(TaskValidationError, match="title"):
            service.create(owner_id=sample_user_id)

    def test_blank_title_rejected(self, service, sample_user_id):
        with pytest.raises(TaskValidationError):
            service.create(owner_id=sample_user_id, title="   ")

    def test_unknown_priority_rejected(self, service, sample_user_id):
        with pytest.raises(TaskValidationError, match="priority"):
            service.create(owner_id=sample_user_id, title="x", priority="critical")

    def test_unknown_field_rejected(self, service, sample_user_id):
        with pytest.raises(TaskValidationError):
            service.create(owner_id=sample_user_id, title="x", colour="red")

    def test_id_cannot_be_supplied(self, service, sample_user_id):
        with pytest.raises(TaskValidationError):
            service.create(id="fixed", owner_id=sample_user_id, title="x")

    def test_negative_hours_rejected(self, service, sample_user_id):
        with pytest.raises(TaskValidationError):
            service.create(owner_id=sample_user_id, title="x", estimated_hours=-1)


class TestListAndOrder:
    def test_due_date_ascending_nulls_last(self, service, sample_user_id):
        service.create(owner_id=sample_user_id, title="no date")
        service.create(owner_id=sample_user_id, title="later", due_date=date(2026, 5, 1))
        service.create(owner_id=sample_user_id, title="sooner", due_date=date(2026, 4, 1))

        titles = [t.title for t in service.list(owner_id=sample_user_id)]
        assert titles == ["sooner", "later", "no date"]

    def test_filters(self, service, sample_user_id):
        service.create(owner_id=sample_user_id, title="a", project_id="p1")
        service.create(owner_id=sample_user_id, title="b", project_id="p2", assignee_id="u9")

        assert [t.title for t in service.list_by_project("p1")] == ["a"]
        assert [t.title for t in service.list_by_assignee("u9")] == ["b"]

    def test_unknown_filter_rejected(self, service):
        with pytest.raises(TaskValidationError):
            service.list(colour="red")


class TestSoftDelete:
    def test_deleted_task_is_invisible(self, service, task, sample_user_id):
        service.soft_delete(task.id)

        assert service.get_by_id(task.id) is None
        assert service.list(owner_id=sample_user_id) == []

    def test_row_is_kept(self, service, task, db_session):
        service.soft_delete(task.id)
        row = db_session.query(TaskModel).filter(TaskModel.id == task.id).one()
        assert row.deleted_at is not None

    def test_delete_is_idempotent(self, service, task, db_session):
        service.soft_delete(task.id)
        first = db_session.query(TaskModel.deleted_at).filter(TaskModel.id == task.id).scalar()
        service.soft_delete(task.id)
        second = db_session.query(TaskModel.deleted_at).filter(TaskModel.id == task.id).scalar()
        assert first == second

    def test_delete_unknown_id_is_noop(self, service):
        service.soft_delete("does-not-exist")

    def test_update_after_delete_raises(self, service, task):
        service.soft_delete(task.id)
        with pytest.raises(NotFoundError):
            service.update(task.id, title="zombie")


class TestUpdate:
    def test_merges_and_stamps_updated_at(self, service, task):
        before = task.updated_at
        updated = service.update(task.id, title="Steuererklärung 2025")
        assert updated.title == "Steuererklärung 2025"
        assert updated.due_date == date(2026, 3, 31)
        assert updated.updated_at >= before

    def test_completing_stamps_completed_at(self, service, task):
        updated = service.update(task.id, status="completed")
        assert updated.completed_at is not None

        reopened = service.update(task.id, status="in_progress")
        assert reopened.completed_at is None

    def test_completed_at_not_writable(self, service, task):
        with pytest.raises(TaskValidationError):
            service.update(task.id, completed_at=None)

    def test_unknown_id(self, service):
        with pytest.raises(NotFoundError):
            service.update("missing", title="x")


class TestHierarchy:
    def test_subtasks(self, service, task, sample_user_id):
        child = service.create(owner_id=sample_user_id, title="Belege sammeln", parent_task_id=task.id)
        assert [t.id for t in service.list_subtasks(task.id)] == [child.id]

    def test_missing_parent_rejected(self, service, sample_user_id):
        with pytest.raises(TaskValidationError, match="Parent"):
            service.create(owner_id=sample_user_id, title="x", parent_task_id="missing")

    def test_own_parent_rejected(self, service, task):
        with pytest.raises(TaskValidationError):
            service.update(task.id, parent_task_id=task.id)

    def test_cycle_rejected(self, service, task, sample_user_id):
        child = service.create(owner_id=sample_user_id, title="child", parent_task_id=task.id)
        grandchild = service.create(owner_id=sample_user_id, title="grandchild", parent_task_id=child.id)

        with pytest.raises(TaskValidationError):
            service.update(task.id, parent_task_id=grandchild.id)


class TestToggle:
    def test_plain_task_flips(self, service, task):
        toggled, spawned = service.toggle(task.id)
        assert toggled.status == "completed"
        assert toggled.completed_at is not None
        assert spawned is None

        toggled, spawned = service.toggle(task.id)
        assert toggled.status == "todo"
        assert toggled.completed_at is None
        assert spawned is None

    def test_repeating_task_rolls_over(self, service, sample_user_id):
        task = service.create(
            owner_id=sample_user_id, title="Blumen gießen", is_recurring=True,
            due_date=date(2026, 3, 10), tags=["haus"],
        )

        toggled, spawned = service.toggle(task.id)

        assert toggled.status == "completed"
        assert spawned is not None
        assert spawned.id != task.id
        assert spawned.status == "todo"
        assert spawned.title == "Blumen gießen"
        assert spawned.is_recurring is True
        assert spawned.due_date == date(2026, 3, 11)
        assert spawned.tags == ["haus"]
        assert len(service.list(owner_id=sample_user_id)) == 2

    def test_repeating_without_due_date_uses_today(self, service, sample_user_id):
        task = service.create(owner_id=sample_user_id, title="Sport", is_recurring=True)
        today = date(2026, 6, 1)

        _, spawned = service.toggle(task.id, today=today)

        assert spawned.due_date == today + timedelta(days=1)

    def test_reopening_does_not_spawn_or_remove(self, service, sample_user_id):
        task = service.create(owner_id=sample_user_id, title="Sport", is_recurring=True)
        service.toggle(task.id)

        _, spawned = service.toggle(task.id)

        assert spawned is None
        assert len(service.list(owner_id=sample_user_id)) == 2

    def test_unknown_task(self, service):
        with pytest.raises(NotFoundError):
            service.toggle("missing")
