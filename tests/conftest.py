from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401  (registers tables)
from core.categories import TaskCategory
from models.task import Task
from models.user_settings import UserSettings


DAY = date(2024, 3, 4)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def make_task(
    category: TaskCategory = TaskCategory.SHALLOW_WORK,
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    title: str = "Task",
    task_id: str | None = None,
    minutes: int = 30,
) -> Task:
    fields = dict(
        title=title,
        category=category,
        scheduled_start=start,
        scheduled_end=end,
        estimated_minutes=minutes,
    )
    if task_id is not None:
        fields["id"] = task_id
    return Task(**fields)


@pytest.fixture()
def settings() -> UserSettings:
    return UserSettings()


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    def factory():
        return Session(engine)

    return factory
