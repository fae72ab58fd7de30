# models/kv_record.py
from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel

from datetime_utils import local_now
from models.columns import naive_datetime_column


class KVRecord(SQLModel, table=True):
    """JSON value stored under a fixed key (settings, launch flags, history)."""

    key: str = Field(primary_key=True)
    value_json: str
    updated_at: datetime = Field(
        default_factory=local_now, sa_column=naive_datetime_column(nullable=False)
    )


__all__ = ["KVRecord"]
