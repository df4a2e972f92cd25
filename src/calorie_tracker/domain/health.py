"""Domain models for health-platform data."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from calorie_tracker.domain.errors import EntryValidationError
from calorie_tracker.domain.units import day_id, parse_day_id


class EnergyKind(StrEnum):
    """Kind of energy expenditure reported by the health platform."""

    ACTIVE = "active"
    BASAL = "basal"


@dataclass(frozen=True)
class RawExerciseSample:
    """Energy burned sample as returned by the health-data source."""

    kind: EnergyKind
    kcal: float
    recorded_at: datetime

    def __post_init__(self) -> None:
        if self.kcal < 0:
            raise EntryValidationError(f"Energy must be >= 0, got {self.kcal}")

    @property
    def day(self) -> str:
        """Day identifier of the sample."""
        return day_id(self.recorded_at)


@dataclass(frozen=True)
class RawWeightSample:
    """Weight sample as returned by the health-data source."""

    weight_kg: float
    recorded_at: datetime

    def __post_init__(self) -> None:
        if self.weight_kg <= 0:
            raise EntryValidationError(f"Weight must be > 0, got {self.weight_kg}")

    @property
    def day(self) -> str:
        """Day identifier of the sample."""
        return day_id(self.recorded_at)


@dataclass(frozen=True)
class ExerciseDayRecord:
    """Calories burned on one day, one record per user per day."""

    day: str
    active_calories: int
    basal_calories: int
    updated_at: datetime

    def __post_init__(self) -> None:
        parse_day_id(self.day)
        if self.active_calories < 0 or self.basal_calories < 0:
            raise EntryValidationError(
                f"Calories burned must be >= 0 for {self.day}: "
                f"active={self.active_calories} basal={self.basal_calories}"
            )

    @property
    def total_calories(self) -> int:
        """Active plus basal calories."""
        return self.active_calories + self.basal_calories

    @property
    def is_empty(self) -> bool:
        """True when no energy expenditure was measured."""
        return self.active_calories == 0 and self.basal_calories == 0
