# models/columns.py
from __future__ import annotations

from sqlalchemy import Column, DateTime


def naive_datetime_column(*, nullable: bool = True, index: bool = False) -> Column:
    """Column for local wall-clock datetimes, stored without a zone."""
    return Column(DateTime(timezone=False), nullable=nullable, index=index)


__all__ = ["naive_datetime_column"]
