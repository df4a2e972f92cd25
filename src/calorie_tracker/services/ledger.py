"""Day ledger construction from source collections."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, tzinfo

from calorie_tracker.domain.budget import BudgetRecord
from calorie_tracker.domain.entries import FoodEntry, WeightSample
from calorie_tracker.domain.health import ExerciseDayRecord
from calorie_tracker.domain.ledger import DayLedger, MacroTotals
from calorie_tracker.domain.units import day_id, to_local
from calorie_tracker.services.budget import BudgetTimeline


def build_ledger(  # noqa: PLR0913
    day: date | datetime | str,
    food_entries: Iterable[FoodEntry],
    exercise_record: ExerciseDayRecord | None,
    weight_sample: WeightSample | None,
    budget_history: Iterable[BudgetRecord],
    fallback_budget: int,
) -> DayLedger:
    """Fold source records into the ledger for one day."""
    timeline = BudgetTimeline.from_history(budget_history, fallback_budget)
    return build_ledger_with_timeline(
        day, food_entries, exercise_record, weight_sample, timeline
    )


def build_ledger_with_timeline(
    day: date | datetime | str,
    food_entries: Iterable[FoodEntry],
    exercise_record: ExerciseDayRecord | None,
    weight_sample: WeightSample | None,
    timeline: BudgetTimeline,
) -> DayLedger:
    """Fold source records into a ledger using a pre-sorted budget timeline."""
    key = day if isinstance(day, str) else day_id(day)
    entries = tuple(entry for entry in food_entries if entry.day == key)
    calories = 0
    fat_g = carbs_g = protein_g = sugars_g = 0.0
    for entry in entries:
        calories += entry.calories
        fat_g += entry.fat_g
        carbs_g += entry.carbs_g
        protein_g += entry.protein_g
        sugars_g += entry.sugars_g
    exercise = (
        exercise_record
        if exercise_record is not None and exercise_record.day == key
        else None
    )
    weight = (
        weight_sample
        if weight_sample is not None and weight_sample.day == key
        else None
    )
    return DayLedger(
        day=key,
        entries=entries,
        exercise=exercise,
        weight=weight,
        budget=timeline.budget_on(key),
        calories=calories,
        macros=MacroTotals(
            fat_g=fat_g, carbs_g=carbs_g, protein_g=protein_g, sugars_g=sugars_g
        ),
    )


def index_by_day(food_entries: Iterable[FoodEntry]) -> dict[str, list[FoodEntry]]:
    """Bucket food entries by day identifier."""
    buckets: dict[str, list[FoodEntry]] = defaultdict(list)
    for entry in food_entries:
        buckets[entry.day].append(entry)
    return dict(buckets)


def latest_weight_by_day(
    samples: Iterable[WeightSample],
) -> dict[str, WeightSample]:
    """Keep the latest measurement of each day."""
    by_day: dict[str, WeightSample] = {}
    for sample in samples:
        current = by_day.get(sample.day)
        if current is None or sample.measured_at > current.measured_at:
            by_day[sample.day] = sample
    return by_day


def localize_entries(
    food_entries: Iterable[FoodEntry], tz: tzinfo | None
) -> list[FoodEntry]:
    """Move entry timestamps into the user's timezone before day bucketing."""
    return [
        replace(entry, logged_at=to_local(entry.logged_at, tz))
        for entry in food_entries
    ]


def localize_weights(
    samples: Iterable[WeightSample], tz: tzinfo | None
) -> list[WeightSample]:
    """Move weight timestamps into the user's timezone."""
    return [
        replace(sample, measured_at=to_local(sample.measured_at, tz))
        for sample in samples
    ]
