"""Pydantic request and response models for the tracker API."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from calorie_tracker.domain.budget import ActivityLevel, BodyProfile, Sex
from calorie_tracker.domain.entries import FoodEntry, MealType, WeightSample
from calorie_tracker.domain.errors import EntryValidationError
from calorie_tracker.domain.ledger import MacroTotals
from calorie_tracker.domain.sync import SyncReport
from calorie_tracker.domain.units import WeightUnit, feet_to_cm, from_kg, to_kg
from calorie_tracker.services.dashboard import DaySummary, WeekSummary, WeightSummary


def _display(kg: float | None, unit: WeightUnit) -> float | None:
    return None if kg is None else round(from_kg(kg, unit), 1)


class FoodEntryIn(BaseModel):
    """Payload for logging a food entry."""

    name: str
    calories: int
    meal_type: MealType = MealType.SNACKS
    logged_at: datetime
    fat_g: float = 0.0
    carbs_g: float = 0.0
    protein_g: float = 0.0
    sugars_g: float = 0.0


class WeightIn(BaseModel):
    """Payload for recording a body weight."""

    weight_kg: float
    measured_at: datetime


class BudgetIn(BaseModel):
    """Payload for a calorie budget change."""

    calorie_budget: int
    effective_on: date


class BodyProfileIn(BaseModel):
    """Body metrics for a starting budget suggestion."""

    weight: float
    weight_unit: WeightUnit = WeightUnit.KG
    height_cm: float | None = None
    height_ft: float | None = None
    age: int
    sex: Sex
    activity_level: ActivityLevel = ActivityLevel.SEDENTARY
    target_weight: float | None = None

    def to_body(self) -> BodyProfile:
        """Convert to metric body metrics."""
        if self.height_cm is not None:
            height_cm = self.height_cm
        elif self.height_ft is not None:
            height_cm = feet_to_cm(self.height_ft)
        else:
            raise EntryValidationError("Either height_cm or height_ft is required")
        target_kg = None
        if self.target_weight is not None:
            target_kg = to_kg(self.target_weight, self.weight_unit)
        return BodyProfile(
            weight_kg=to_kg(self.weight, self.weight_unit),
            height_cm=height_cm,
            age=self.age,
            sex=self.sex,
            activity_level=self.activity_level,
            target_weight_kg=target_kg,
        )


class BudgetSuggestionOut(BaseModel):
    """Suggested daily calorie budget."""

    calorie_budget: int
    applied: bool


class FoodEntryOut(BaseModel):
    """Serialized food entry."""

    id: str
    name: str
    calories: int
    meal_type: MealType
    logged_at: datetime
    fat_g: float
    carbs_g: float
    protein_g: float
    sugars_g: float

    @classmethod
    def from_entry(cls, entry: FoodEntry) -> "FoodEntryOut":
        """Build from a domain entry."""
        return cls(
            id=entry.id,
            name=entry.name,
            calories=entry.calories,
            meal_type=entry.meal_type,
            logged_at=entry.logged_at,
            fat_g=entry.fat_g,
            carbs_g=entry.carbs_g,
            protein_g=entry.protein_g,
            sugars_g=entry.sugars_g,
        )


class WeightOut(BaseModel):
    """Serialized weight sample."""

    id: str
    weight_kg: float
    measured_at: datetime

    @classmethod
    def from_sample(cls, sample: WeightSample) -> "WeightOut":
        """Build from a domain sample."""
        return cls(
            id=sample.id, weight_kg=sample.weight_kg, measured_at=sample.measured_at
        )


class MacrosOut(BaseModel):
    """Macro totals in grams."""

    fat_g: float
    carbs_g: float
    protein_g: float
    sugars_g: float

    @classmethod
    def from_totals(cls, totals: MacroTotals) -> "MacrosOut":
        """Build from domain totals."""
        return cls(
            fat_g=totals.fat_g,
            carbs_g=totals.carbs_g,
            protein_g=totals.protein_g,
            sugars_g=totals.sugars_g,
        )


class DayOut(BaseModel):
    """Day view response."""

    day: str
    status: str
    budget: int
    calories: int
    remaining_calories: int
    active_calories: int
    basal_calories: int
    weight_kg: float | None
    macros: MacrosOut
    meal_calories: dict[str, int]
    meal_targets: dict[str, int]
    entries: list[FoodEntryOut]

    @classmethod
    def from_summary(cls, summary: DaySummary) -> "DayOut":
        """Build from a dashboard day summary."""
        ledger = summary.ledger
        return cls(
            day=ledger.day,
            status=summary.status.value,
            budget=ledger.budget,
            calories=ledger.calories,
            remaining_calories=summary.remaining_calories,
            active_calories=ledger.active_calories,
            basal_calories=ledger.exercise.basal_calories if ledger.exercise else 0,
            weight_kg=ledger.weight.weight_kg if ledger.weight else None,
            macros=MacrosOut.from_totals(ledger.macros),
            meal_calories={
                meal.value: value for meal, value in summary.meal_calories.items()
            },
            meal_targets={
                meal.value: value for meal, value in summary.meal_targets.items()
            },
            entries=[FoodEntryOut.from_entry(entry) for entry in ledger.entries],
        )


class TrendOut(BaseModel):
    """Weekly weight trend line."""

    direction: str
    slope: float | None = None
    intercept: float | None = None
    start_weight: float | None = None
    end_weight: float | None = None
    points: dict[int, float] = Field(default_factory=dict)


class WeekOut(BaseModel):
    """Week view response."""

    start: date
    end: date
    calories: list[int]
    budgets: list[int]
    exercise: list[int]
    weights: list[float | None]
    weight_unit: WeightUnit
    macros: list[MacrosOut]
    fat_percent: int
    carbs_percent: int
    protein_percent: int
    trend: TrendOut

    @classmethod
    def from_summary(cls, summary: WeekSummary) -> "WeekOut":
        """Build from a dashboard week summary, with weights in its unit."""
        trend = summary.trend
        unit = summary.unit
        scale = from_kg(1.0, unit)
        return cls(
            start=summary.start,
            end=summary.end,
            calories=summary.calories,
            budgets=summary.budgets,
            exercise=summary.exercise,
            weights=[_display(value, unit) for value in summary.weights],
            weight_unit=unit,
            macros=[MacrosOut.from_totals(totals) for totals in summary.macros],
            fat_percent=summary.macro_split.fat_percent,
            carbs_percent=summary.macro_split.carbs_percent,
            protein_percent=summary.macro_split.protein_percent,
            trend=TrendOut(
                direction=trend.direction.value,
                slope=None if trend.slope is None else trend.slope * scale,
                intercept=(
                    None if trend.intercept is None else trend.intercept * scale
                ),
                start_weight=_display(trend.start_weight, unit),
                end_weight=_display(trend.end_weight, unit),
                points={
                    index: value * scale for index, value in trend.points.items()
                },
            ),
        )


class StreaksOut(BaseModel):
    """Streak counters."""

    current_streak: int
    perfect_weeks: int


class WeightSummaryOut(BaseModel):
    """Latest weight and change."""

    latest: WeightOut | None
    change_kg: float | None
    change_days: int
    target_weight_kg: float | None
    weight_unit: WeightUnit
    latest_weight: float | None
    change: float | None
    target_weight: float | None

    @classmethod
    def from_summary(cls, summary: WeightSummary) -> "WeightSummaryOut":
        """Build from a dashboard weight summary.

        The ``*_kg`` fields stay metric; the others are in ``weight_unit``.
        """
        latest = summary.latest
        unit = summary.unit
        return cls(
            latest=WeightOut.from_sample(latest) if latest else None,
            change_kg=summary.change_kg,
            change_days=summary.change_days,
            target_weight_kg=summary.target_weight_kg,
            weight_unit=unit,
            latest_weight=_display(latest.weight_kg if latest else None, unit),
            change=_display(summary.change_kg, unit),
            target_weight=_display(summary.target_weight_kg, unit),
        )


class SyncOut(BaseModel):
    """Sync pass report."""

    status: str
    exercise_written: int
    exercise_skipped: int
    exercise_dropped: int
    weights_written: int
    weights_skipped: int
    error: str | None = None

    @classmethod
    def from_report(cls, report: SyncReport) -> "SyncOut":
        """Build from a sync report."""
        return cls(
            status=report.status.value,
            exercise_written=report.exercise_written,
            exercise_skipped=report.exercise_skipped,
            exercise_dropped=report.exercise_dropped,
            weights_written=report.weights_written,
            weights_skipped=report.weights_skipped,
            error=report.error,
        )
