"""Value objects returned by the scheduling services."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from core.categories import TaskCategory
from models.task import Task


class WarningKind(str, Enum):
    CLOSE_TO_APEX_HOUR = "close_to_apex_hour"
    OUTSIDE_WORK_HOURS = "outside_work_hours"
    SUBOPTIMAL_TIMING = "suboptimal_timing"


class ConflictKind(str, Enum):
    APEX_HOUR_VIOLATION = "apex_hour_violation"
    TASK_OVERLAP = "task_overlap"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SuggestionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class TimeSlot:
    start: datetime
    end: datetime
    is_optimal: bool = False


@dataclass(frozen=True)
class SchedulingWarning:
    kind: WarningKind
    message: str
    remediation: str


@dataclass(frozen=True)
class SchedulingConflict:
    kind: ConflictKind
    message: str
    severity: Severity
    suggested_action: str

    @property
    def is_blocking(self) -> bool:
        return self.severity is Severity.HIGH


@dataclass(frozen=True)
class SchedulingSuggestion:
    time_slot: TimeSlot
    rationale: str
    priority: SuggestionPriority
    alternative_category: Optional[TaskCategory] = None


@dataclass
class SchedulingValidationResult:
    warnings: List[SchedulingWarning] = field(default_factory=list)
    conflicts: List[SchedulingConflict] = field(default_factory=list)
    suggestions: List[SchedulingSuggestion] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.conflicts

    def conflicts_of(self, kind: ConflictKind) -> List[SchedulingConflict]:
        return [c for c in self.conflicts if c.kind is kind]

    def warnings_of(self, kind: WarningKind) -> List[SchedulingWarning]:
        return [w for w in self.warnings if w.kind is kind]


@dataclass(frozen=True)
class SchedulingResult:
    success: bool
    message: str
    scheduled_task: Optional[Task] = None
    alternate_dates: List[date] = field(default_factory=list)


__all__ = [
    "ConflictKind",
    "SchedulingConflict",
    "SchedulingResult",
    "SchedulingSuggestion",
    "SchedulingValidationResult",
    "SchedulingWarning",
    "Severity",
    "SuggestionPriority",
    "TimeSlot",
    "WarningKind",
]
