"""Derived per-day and per-week aggregates."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum

from calorie_tracker.domain.entries import FoodEntry, MealType, WeightSample
from calorie_tracker.domain.health import ExerciseDayRecord

DAYS_PER_WEEK = 7


class WeekStart(StrEnum):
    """First day of the user's week."""

    MONDAY = "monday"
    SUNDAY = "sunday"

    @property
    def weekday(self) -> int:
        """Python weekday number (Monday is 0)."""
        return 6 if self is WeekStart.SUNDAY else 0

    def start_of_week(self, anchor: date) -> date:
        """Return the first day of the week containing ``anchor``."""
        offset = (anchor.weekday() - self.weekday + DAYS_PER_WEEK) % DAYS_PER_WEEK
        return anchor - timedelta(days=offset)


@dataclass(frozen=True)
class MacroTotals:
    """Summed macronutrients in grams."""

    fat_g: float = 0.0
    carbs_g: float = 0.0
    protein_g: float = 0.0
    sugars_g: float = 0.0

    @property
    def total_g(self) -> float:
        """Fat, carbs and protein combined."""
        return self.fat_g + self.carbs_g + self.protein_g


@dataclass(frozen=True)
class DayLedger:
    """All tracked data for one calendar day. Never persisted."""

    day: str
    entries: tuple[FoodEntry, ...]
    exercise: ExerciseDayRecord | None
    weight: WeightSample | None
    budget: int
    calories: int
    macros: MacroTotals

    @property
    def has_entries(self) -> bool:
        """True when at least one food entry was logged."""
        return bool(self.entries)

    @property
    def is_successful(self) -> bool:
        """Logged something and stayed at or under budget."""
        return self.has_entries and self.calories <= self.budget

    @property
    def active_calories(self) -> int:
        """Active exercise calories, 0 without a record."""
        return self.exercise.active_calories if self.exercise else 0

    def calories_for_meal(self, meal_type: MealType) -> int:
        """Calories logged for one meal category."""
        return sum(
            entry.calories for entry in self.entries if entry.meal_type == meal_type
        )


@dataclass(frozen=True)
class WeekWindow:
    """Seven consecutive day ledgers starting on the user's week start."""

    start: date
    ledgers: tuple[DayLedger, ...]

    @property
    def end(self) -> date:
        """Last day of the window."""
        return self.start + timedelta(days=DAYS_PER_WEEK - 1)
