"""Derived dashboard metrics over the day-indexed dataset."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from types import MappingProxyType

from calorie_tracker.domain.budget import MealBudget
from calorie_tracker.domain.entries import FoodEntry, MealType, WeightSample
from calorie_tracker.domain.health import ExerciseDayRecord
from calorie_tracker.domain.ledger import (
    DAYS_PER_WEEK,
    DayLedger,
    MacroTotals,
    WeekStart,
    WeekWindow,
)
from calorie_tracker.domain.metrics import (
    DayStatus,
    MacroSplit,
    StreakSummary,
    TrendDirection,
    WeightTrend,
)
from calorie_tracker.domain.units import day_id, parse_day_id, round_half_up
from calorie_tracker.services.budget import BudgetTimeline, meal_allocation
from calorie_tracker.services.ledger import (
    build_ledger_with_timeline,
    index_by_day,
    latest_weight_by_day,
)

DEFAULT_WEIGHT_CHANGE_DAYS = 30


@dataclass(frozen=True)
class TrackerSnapshot:
    """Read-only view of one user's source records, bucketed by day."""

    entries_by_day: Mapping[str, tuple[FoodEntry, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    exercise_by_day: Mapping[str, ExerciseDayRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    weights: tuple[WeightSample, ...] = ()
    weights_by_day: Mapping[str, WeightSample] = field(
        default_factory=lambda: MappingProxyType({})
    )
    first_entry_day: date | None = None

    @classmethod
    def build(
        cls,
        food_entries: Iterable[FoodEntry],
        exercise_records: Mapping[str, ExerciseDayRecord],
        weight_samples: Iterable[WeightSample],
    ) -> "TrackerSnapshot":
        """Bucket source records; weights are kept newest first."""
        buckets = index_by_day(food_entries)
        weights = tuple(
            sorted(weight_samples, key=lambda sample: sample.measured_at, reverse=True)
        )
        return cls(
            entries_by_day=MappingProxyType(
                {key: tuple(entries) for key, entries in buckets.items()}
            ),
            exercise_by_day=MappingProxyType(dict(exercise_records)),
            weights=weights,
            weights_by_day=MappingProxyType(latest_weight_by_day(weights)),
            first_entry_day=parse_day_id(min(buckets)) if buckets else None,
        )


def fit_weight_trend(points: Mapping[int, float]) -> WeightTrend:
    """Fit an ordinary least-squares line through (day offset, kg) points."""
    if len(points) < 2:  # noqa: PLR2004
        return WeightTrend(direction=TrendDirection.NONE, points=dict(points))
    n = len(points)
    sum_x = sum(points)
    sum_y = sum(points.values())
    sum_xy = sum(offset * weight for offset, weight in points.items())
    sum_xx = sum(offset * offset for offset in points)
    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    direction = TrendDirection.DOWNWARD if slope <= 0 else TrendDirection.UPWARD
    return WeightTrend(
        direction=direction,
        points=dict(points),
        slope=slope,
        intercept=intercept,
    )


def macro_split(totals: Iterable[MacroTotals]) -> MacroSplit:
    """Percent of fat, carbs and protein in the summed totals."""
    fat_g = carbs_g = protein_g = 0.0
    for item in totals:
        fat_g += item.fat_g
        carbs_g += item.carbs_g
        protein_g += item.protein_g
    total = fat_g + carbs_g + protein_g
    if total <= 0:
        return MacroSplit(fat_percent=0, carbs_percent=0, protein_percent=0)
    return MacroSplit(
        fat_percent=round_half_up(fat_g / total * 100),
        carbs_percent=round_half_up(carbs_g / total * 100),
        protein_percent=round_half_up(protein_g / total * 100),
    )


def weight_change(
    samples: Iterable[WeightSample],
    now: datetime,
    days: int = DEFAULT_WEIGHT_CHANGE_DAYS,
) -> float | None:
    """Latest weight minus the most recent weight older than ``days`` days.

    Returns ``None`` unless both samples exist.
    """
    ordered = sorted(samples, key=lambda sample: sample.measured_at, reverse=True)
    if not ordered:
        return None
    latest = ordered[0]
    cutoff = _comparable(now, latest.measured_at) - timedelta(days=days)
    for sample in ordered[1:]:
        if sample.measured_at < cutoff:
            return latest.weight_kg - sample.weight_kg
    return None


def _comparable(now: datetime, reference: datetime) -> datetime:
    if reference.tzinfo is None and now.tzinfo is not None:
        return now.replace(tzinfo=None)
    if reference.tzinfo is not None and now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


@dataclass
class MetricsAggregator:
    """Computes day, week and streak views from a snapshot."""

    snapshot: TrackerSnapshot
    timeline: BudgetTimeline
    week_start: WeekStart = WeekStart.MONDAY

    def ledger(self, day: date | str) -> DayLedger:
        """Return the ledger of one day."""
        key = day if isinstance(day, str) else day_id(day)
        return build_ledger_with_timeline(
            key,
            self.snapshot.entries_by_day.get(key, ()),
            self.snapshot.exercise_by_day.get(key),
            self.snapshot.weights_by_day.get(key),
            self.timeline,
        )

    def week_window(self, anchor: date) -> WeekWindow:
        """Return the seven ledgers of the week containing ``anchor``."""
        start = self.week_start.start_of_week(anchor)
        return WeekWindow(
            start=start,
            ledgers=tuple(
                self.ledger(start + timedelta(days=offset))
                for offset in range(DAYS_PER_WEEK)
            ),
        )

    def weekly_calories(self, anchor: date) -> list[int]:
        """Food calories per day offset of the week."""
        return [ledger.calories for ledger in self.week_window(anchor).ledgers]

    def weekly_macros(self, anchor: date) -> list[MacroTotals]:
        """Macro totals per day offset of the week."""
        return [ledger.macros for ledger in self.week_window(anchor).ledgers]

    def macro_split(self, anchor: date) -> MacroSplit:
        """Share of each macro in the week's combined macro grams."""
        return macro_split(self.weekly_macros(anchor))

    def weekly_exercise(self, anchor: date) -> list[int]:
        """Active exercise calories per day offset of the week."""
        return [ledger.active_calories for ledger in self.week_window(anchor).ledgers]

    def weekly_weights(self, anchor: date) -> list[float | None]:
        """Latest weight per day offset of the week, ``None`` when unmeasured."""
        return [
            ledger.weight.weight_kg if ledger.weight else None
            for ledger in self.week_window(anchor).ledgers
        ]

    def is_successful(self, day: date | str) -> bool:
        """True when the day has entries and stays within its budget."""
        return self.ledger(day).is_successful

    def day_status(self, day: date | str) -> DayStatus:
        """Classify a day as empty, under or over budget."""
        ledger = self.ledger(day)
        if not ledger.has_entries:
            return DayStatus.EMPTY
        return DayStatus.UNDER if ledger.is_successful else DayStatus.OVER

    def current_streak(self, today: date) -> int:
        """Consecutive successful days ending today."""
        streak = 0
        day = today
        while self.is_successful(day):
            streak += 1
            day -= timedelta(days=1)
        return streak

    def perfect_weeks(self, today: date) -> int:
        """Completed weeks in which every day was successful."""
        first_day = self.snapshot.first_entry_day
        if first_day is None:
            return 0
        count = 0
        start = self.week_start.start_of_week(first_day)
        while start + timedelta(days=DAYS_PER_WEEK - 1) < today:
            if all(
                self.is_successful(start + timedelta(days=offset))
                for offset in range(DAYS_PER_WEEK)
            ):
                count += 1
            start += timedelta(days=DAYS_PER_WEEK)
        return count

    def streaks(self, today: date) -> StreakSummary:
        """Current streak and perfect-week count."""
        return StreakSummary(
            current_streak=self.current_streak(today),
            perfect_weeks=self.perfect_weeks(today),
        )

    def weight_trend(self, anchor: date) -> WeightTrend:
        """Least-squares weight line of the week containing ``anchor``."""
        window = self.week_window(anchor)
        points = {
            offset: ledger.weight.weight_kg
            for offset, ledger in enumerate(window.ledgers)
            if ledger.weight is not None
        }
        return fit_weight_trend(points)

    def weight_change(
        self, now: datetime, days: int = DEFAULT_WEIGHT_CHANGE_DAYS
    ) -> float | None:
        """Weight change over roughly the last ``days`` days."""
        return weight_change(self.snapshot.weights, now, days)

    def latest_weight(self) -> WeightSample | None:
        """Most recent weight sample."""
        return self.snapshot.weights[0] if self.snapshot.weights else None

    def remaining_calories(self, day: date | str) -> int:
        """Budget left after food, with active exercise added back."""
        ledger = self.ledger(day)
        return ledger.budget - ledger.calories + ledger.active_calories

    def meal_targets(
        self, day: date | str, allocations: Mapping[MealType, MealBudget]
    ) -> dict[MealType, int]:
        """Calorie target per meal derived from the day's budget."""
        budget = self.ledger(day).budget
        return {
            meal_type: meal_allocation(allocations, meal_type, budget)
            for meal_type in MealType
        }
