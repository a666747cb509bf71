"""
Task API endpoints (served by the configured task backend)
"""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from lifesync.api.deps import get_task_backend
from lifesync.application.backends import TaskBackend, TaskView
from lifesync.domain.enums import Priority


router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


# === Request / response models ===

class CreateTaskRequest(BaseModel):
    title: str
    description: str | None = None
    category: str | None = None
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    repeat: bool = False


class UpdateTaskRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    due_date: date | None = None
    priority: Priority | None = None
    completed: bool | None = None
    repeat: bool | None = None


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    category: str | None = None
    due_date: date | None = None
    priority: Priority
    completed: bool
    repeat: bool


def _response(task: TaskView) -> TaskResponse:
    return TaskResponse(**task.__dict__)


# === Endpoints ===

@router.get("", response_model=List[TaskResponse])
def list_tasks(backend: TaskBackend = Depends(get_task_backend)):
    return [_response(t) for t in backend.list_tasks()]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(req: CreateTaskRequest, backend: TaskBackend = Depends(get_task_backend)):
    fields = req.model_dump(exclude={"title"})
    return _response(backend.add_task(req.title, **fields))


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, backend: TaskBackend = Depends(get_task_backend)):
    task = backend.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return _response(task)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, req: UpdateTaskRequest, backend: TaskBackend = Depends(get_task_backend)):
    return _response(backend.update_task(task_id, **req.model_dump(exclude_unset=True)))


@router.post("/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(task_id: str, backend: TaskBackend = Depends(get_task_backend)):
    """Complete/reopen; completing a repeating task schedules its next instance"""
    return _response(backend.toggle_task(task_id))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, backend: TaskBackend = Depends(get_task_backend)):
    backend.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
