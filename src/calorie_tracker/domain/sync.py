"""Domain models for health data reconciliation."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import StrEnum
from types import MappingProxyType
from typing import Generic, TypeVar

from calorie_tracker.domain.entries import WeightSample
from calorie_tracker.domain.health import ExerciseDayRecord
from calorie_tracker.domain.units import day_id

RecordT = TypeVar("RecordT")


@dataclass(frozen=True)
class SyncWindow:
    """Inclusive range of days covered by a sync pass."""

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        """True when the start lies after the end."""
        return self.start > self.end

    def days(self) -> list[date]:
        """Every day in the window, ascending."""
        if self.is_empty:
            return []
        count = (self.end - self.start).days + 1
        return [self.start + timedelta(days=offset) for offset in range(count)]

    def day_ids(self) -> list[str]:
        """Day identifiers of the window, ascending."""
        return [day_id(day) for day in self.days()]


@dataclass(frozen=True)
class ReconciliationResult(Generic[RecordT]):
    """Records to persist plus the merged day-indexed view."""

    writes: dict[str, RecordT]
    merged: dict[str, RecordT]
    skipped: int = 0
    dropped: int = 0

    @property
    def written(self) -> int:
        """Number of records that must be persisted."""
        return len(self.writes)


@dataclass(frozen=True)
class DayCache:
    """Read-only snapshot of synced exercise and weight data by day."""

    exercise: MappingProxyType[str, ExerciseDayRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    weights: MappingProxyType[str, WeightSample] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls,
        exercise: dict[str, ExerciseDayRecord],
        weights: dict[str, WeightSample],
    ) -> "DayCache":
        """Freeze copies of the given mappings."""
        return cls(
            exercise=MappingProxyType(dict(exercise)),
            weights=MappingProxyType(dict(weights)),
        )


class SyncStatus(StrEnum):
    """Outcome of a sync pass."""

    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncReport:
    """Summary of one reconciliation pass."""

    status: SyncStatus
    exercise_window: SyncWindow | None = None
    weight_window: SyncWindow | None = None
    exercise_written: int = 0
    exercise_skipped: int = 0
    exercise_dropped: int = 0
    weights_written: int = 0
    weights_skipped: int = 0
    error: str | None = None

    @property
    def total_written(self) -> int:
        """Exercise and weight records written."""
        return self.exercise_written + self.weights_written
