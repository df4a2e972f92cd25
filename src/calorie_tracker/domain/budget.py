"""Domain models for calorie budgets."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from calorie_tracker.domain.entries import MealType
from calorie_tracker.domain.errors import EntryValidationError

DEFAULT_MEAL_PERCENTAGES: dict[MealType, int] = {
    MealType.BREAKFAST: 25,
    MealType.LUNCH: 30,
    MealType.DINNER: 30,
    MealType.SNACKS: 15,
}


@dataclass(frozen=True)
class BudgetRecord:
    """A calorie budget effective from a date until superseded."""

    effective_date: date
    calorie_budget: int

    def __post_init__(self) -> None:
        if not isinstance(self.effective_date, date):
            raise EntryValidationError(
                f"Invalid effective date: {self.effective_date!r}"
            )
        if self.calorie_budget <= 0:
            raise EntryValidationError(
                f"Calorie budget must be > 0, got {self.calorie_budget}"
            )


@dataclass(frozen=True)
class MealBudget:
    """Per-meal share of the day's budget, as a percentage or absolute calories."""

    value: int
    is_percent: bool = True

    def __post_init__(self) -> None:
        if self.value < 0:
            raise EntryValidationError(f"Meal budget must be >= 0, got {self.value}")
        if self.is_percent and self.value > 100:  # noqa: PLR2004
            raise EntryValidationError(
                f"Meal budget percentage must be <= 100, got {self.value}"
            )


class Sex(StrEnum):
    """Sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Activity level used for TDEE estimation."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


@dataclass(frozen=True)
class BodyProfile:
    """Body metrics used to suggest an initial calorie budget."""

    weight_kg: float
    height_cm: float
    age: int
    sex: Sex
    activity_level: ActivityLevel
    target_weight_kg: float | None = None

    def __post_init__(self) -> None:
        for label, value in (
            ("weight_kg", self.weight_kg),
            ("height_cm", self.height_cm),
            ("age", self.age),
        ):
            if value <= 0:
                raise EntryValidationError(f"{label} must be > 0, got {value}")
        if self.target_weight_kg is not None and self.target_weight_kg <= 0:
            raise EntryValidationError(
                f"target_weight_kg must be > 0, got {self.target_weight_kg}"
            )
