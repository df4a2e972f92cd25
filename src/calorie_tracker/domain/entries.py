"""Domain models for logged food and body weight."""

import time
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import uuid4

from calorie_tracker.domain.errors import EntryValidationError
from calorie_tracker.domain.units import day_id


class MealType(StrEnum):
    """Meal category a food entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"

    @classmethod
    def parse(cls, raw: object) -> "MealType":
        """Parse a stored meal type, treating unknown values as snacks."""
        try:
            return cls(str(raw))
        except ValueError:
            return cls.SNACKS


def new_entry_id(now: datetime | None = None) -> str:
    """Return an opaque identifier that sorts by creation time."""
    millis = int(now.timestamp() * 1000) if now else time.time_ns() // 1_000_000
    return f"{millis:013d}-{uuid4().hex[:8]}"


@dataclass(frozen=True)
class FoodEntry:
    """A single logged food item. Immutable; edits are delete and recreate."""

    id: str
    name: str
    calories: int
    logged_at: datetime
    meal_type: MealType
    fat_g: float = 0.0
    carbs_g: float = 0.0
    protein_g: float = 0.0
    sugars_g: float = 0.0

    def __post_init__(self) -> None:
        if isinstance(self.calories, bool) or not isinstance(self.calories, int):
            raise EntryValidationError(
                f"Calories must be an integer, got {self.calories!r}"
            )
        if self.calories < 0:
            raise EntryValidationError(f"Calories must be >= 0, got {self.calories}")
        for label, value in (
            ("fat_g", self.fat_g),
            ("carbs_g", self.carbs_g),
            ("protein_g", self.protein_g),
            ("sugars_g", self.sugars_g),
        ):
            if value < 0:
                raise EntryValidationError(f"{label} must be >= 0, got {value}")
        if not isinstance(self.logged_at, datetime):
            raise EntryValidationError(f"Invalid timestamp: {self.logged_at!r}")
        if not isinstance(self.meal_type, MealType):
            object.__setattr__(self, "meal_type", MealType.parse(self.meal_type))

    @property
    def day(self) -> str:
        """Day identifier of the entry."""
        return day_id(self.logged_at)


@dataclass(frozen=True)
class WeightSample:
    """A body weight measurement in kilograms."""

    id: str
    weight_kg: float
    measured_at: datetime

    def __post_init__(self) -> None:
        if self.weight_kg <= 0:
            raise EntryValidationError(f"Weight must be > 0, got {self.weight_kg}")
        if not isinstance(self.measured_at, datetime):
            raise EntryValidationError(f"Invalid timestamp: {self.measured_at!r}")

    @property
    def day(self) -> str:
        """Day identifier of the measurement."""
        return day_id(self.measured_at)
