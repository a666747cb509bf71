"""
Habit API endpoints
"""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from lifesync.api.deps import get_current_user_id, get_db
from lifesync.application.habits import HabitService
from lifesync.domain.enums import HabitFrequency


router = APIRouter(prefix="/api/v1/habits", tags=["habits"])


class CreateHabitRequest(BaseModel):
    name: str
    category: str
    start_date: date
    description: str | None = None
    frequency: HabitFrequency = HabitFrequency.DAILY
    goal_value: float | None = None
    goal_unit: str | None = None
    end_date: date | None = None


class HabitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    frequency: str
    start_date: date
    end_date: date | None = None
    goal_value: float | None = None
    goal_unit: str | None = None
    is_active: bool


class LogHabitRequest(BaseModel):
    log_date: date
    value: float = 1
    notes: str | None = None


class HabitLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    habit_id: str
    log_date: date
    value: float
    notes: str | None = None


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
def create_habit(
    req: CreateHabitRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return HabitService(db).create(owner_id=user_id, **req.model_dump(exclude_none=True))


@router.put("/{habit_id}/logs", response_model=HabitLogResponse)
def log_habit(habit_id: str, req: LogHabitRequest, db: Session = Depends(get_db)):
    """Record the value for one day (replaces an existing entry for that day)"""
    return HabitService(db).log(habit_id, req.log_date, value=req.value, notes=req.notes)


@router.get("/{habit_id}/logs", response_model=List[HabitLogResponse])
def list_logs(
    habit_id: str,
    start: date | None = None,
    end: date | None = None,
    db: Session = Depends(get_db),
):
    return HabitService(db).list_logs(habit_id, start=start, end=end)
