"""Read-only dashboard views assembled from source records."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_tracker.domain.entries import MealType, WeightSample
from calorie_tracker.domain.ledger import DayLedger, MacroTotals
from calorie_tracker.domain.metrics import (
    DayStatus,
    MacroSplit,
    StreakSummary,
    WeightTrend,
)
from calorie_tracker.domain.profile import UserProfile
from calorie_tracker.domain.units import WeightUnit
from calorie_tracker.services.budget import BudgetService
from calorie_tracker.services.entries import EntryRepository
from calorie_tracker.services.ledger import localize_entries, localize_weights
from calorie_tracker.services.metrics import (
    DEFAULT_WEIGHT_CHANGE_DAYS,
    MetricsAggregator,
    TrackerSnapshot,
)
from calorie_tracker.services.sync import ExerciseRepository, ReconciliationOrchestrator


@dataclass
class DaySummary:
    """Everything shown for a single day."""

    ledger: DayLedger
    status: DayStatus
    remaining_calories: int
    meal_calories: dict[MealType, int]
    meal_targets: dict[MealType, int]


@dataclass
class WeekSummary:
    """Weekly charts data."""

    start: date
    end: date
    calories: list[int]
    budgets: list[int]
    exercise: list[int]
    weights: list[float | None]
    macros: list[MacroTotals]
    macro_split: MacroSplit
    trend: WeightTrend
    unit: WeightUnit = WeightUnit.KG


@dataclass
class WeightSummary:
    """Latest weight and its change over a period."""

    latest: WeightSample | None
    change_kg: float | None
    change_days: int
    target_weight_kg: float | None
    unit: WeightUnit = WeightUnit.KG


@dataclass
class DashboardService:
    """Service exposing derived metrics for one user at a time."""

    entry_repository: EntryRepository
    exercise_repository: ExerciseRepository
    budget_service: BudgetService
    orchestrator: ReconciliationOrchestrator
    weight_change_days: int = DEFAULT_WEIGHT_CHANGE_DAYS

    def aggregator(self, user_id: UUID) -> tuple[UserProfile, MetricsAggregator]:
        """Build a metrics aggregator over the user's current data."""
        profile = self.budget_service.get_profile(user_id)
        tz = ZoneInfo(profile.timezone)
        cache = self.orchestrator.cached(user_id)
        if cache is not None:
            exercise = dict(cache.exercise)
        else:
            exercise = self.exercise_repository.list_exercise_records(user_id)
        weights = {
            sample.id: sample
            for sample in self.entry_repository.list_weight_samples(user_id)
        }
        if cache is not None:
            for sample in cache.weights.values():
                weights.setdefault(sample.id, sample)
        snapshot = TrackerSnapshot.build(
            localize_entries(self.entry_repository.list_food_entries(user_id), tz),
            exercise,
            localize_weights(weights.values(), tz),
        )
        aggregator = MetricsAggregator(
            snapshot=snapshot,
            timeline=self.budget_service.timeline(user_id),
            week_start=profile.week_start,
        )
        return profile, aggregator

    def today(self, user_id: UUID) -> date:
        """Current date in the user's timezone."""
        profile = self.budget_service.get_profile(user_id)
        return datetime.now(tz=ZoneInfo(profile.timezone)).date()

    def get_day(self, user_id: UUID, day: date) -> DaySummary:
        """Return the ledger and budget status of one day."""
        profile, aggregator = self.aggregator(user_id)
        ledger = aggregator.ledger(day)
        return DaySummary(
            ledger=ledger,
            status=aggregator.day_status(day),
            remaining_calories=aggregator.remaining_calories(day),
            meal_calories={
                meal_type: ledger.calories_for_meal(meal_type)
                for meal_type in MealType
            },
            meal_targets=aggregator.meal_targets(day, profile.meal_budgets),
        )

    def get_week(self, user_id: UUID, anchor: date) -> WeekSummary:
        """Return weekly aggregates for the week containing ``anchor``."""
        profile, aggregator = self.aggregator(user_id)
        window = aggregator.week_window(anchor)
        return WeekSummary(
            start=window.start,
            end=window.end,
            calories=[ledger.calories for ledger in window.ledgers],
            budgets=[ledger.budget for ledger in window.ledgers],
            exercise=[ledger.active_calories for ledger in window.ledgers],
            weights=[
                ledger.weight.weight_kg if ledger.weight else None
                for ledger in window.ledgers
            ],
            macros=[ledger.macros for ledger in window.ledgers],
            macro_split=aggregator.macro_split(anchor),
            trend=aggregator.weight_trend(anchor),
            unit=profile.weight_unit,
        )

    def get_streaks(self, user_id: UUID, today: date | None = None) -> StreakSummary:
        """Return the current streak and perfect-week count."""
        _, aggregator = self.aggregator(user_id)
        return aggregator.streaks(today or self.today(user_id))

    def get_weight(self, user_id: UUID, now: datetime | None = None) -> WeightSummary:
        """Return the latest weight and its change over the configured period."""
        profile, aggregator = self.aggregator(user_id)
        now = now or datetime.now(tz=ZoneInfo(profile.timezone))
        return WeightSummary(
            latest=aggregator.latest_weight(),
            change_kg=aggregator.weight_change(now, self.weight_change_days),
            change_days=self.weight_change_days,
            target_weight_kg=profile.target_weight_kg,
            unit=profile.weight_unit,
        )
