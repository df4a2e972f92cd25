"""Freshness-policy reconciliation of health-platform samples."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from calorie_tracker.domain.entries import FoodEntry, WeightSample, new_entry_id
from calorie_tracker.domain.health import (
    EnergyKind,
    ExerciseDayRecord,
    RawExerciseSample,
    RawWeightSample,
)
from calorie_tracker.domain.sync import ReconciliationResult, SyncWindow
from calorie_tracker.domain.units import day_id, round_half_up

_logger = logging.getLogger(__name__)

DEFAULT_FORCE_REFRESH_DAYS = 2
DEFAULT_SYNC_DAYS = 30
WEIGHT_LOOKBACK_DAYS = 90


def resolve_sync_start(
    health_connected_on: date | None,
    food_entries: Iterable[FoodEntry],
    today: date,
    default_days: int = DEFAULT_SYNC_DAYS,
) -> date:
    """Pick the first day to sync.

    Priority: the health connection date, then the earliest food entry, then
    ``default_days`` before today.
    """
    if health_connected_on is not None:
        return health_connected_on
    earliest = min((entry.logged_at for entry in food_entries), default=None)
    if earliest is not None:
        return earliest.date()
    return today - timedelta(days=default_days)


def exercise_window(start: date, today: date) -> SyncWindow:
    """Days whose exercise data is synced."""
    return SyncWindow(start=start, end=today)


def weight_window(
    start: date, today: date, lookback_days: int = WEIGHT_LOOKBACK_DAYS
) -> SyncWindow:
    """Days whose weight data is synced, widened to at least ``lookback_days``."""
    widened = min(start, today - timedelta(days=lookback_days))
    return SyncWindow(start=widened, end=today)


def fold_exercise_samples(
    samples: Iterable[RawExerciseSample], updated_at: datetime
) -> dict[str, ExerciseDayRecord]:
    """Sum raw energy samples into one record per day."""
    active: dict[str, float] = {}
    basal: dict[str, float] = {}
    for sample in samples:
        bucket = active if sample.kind is EnergyKind.ACTIVE else basal
        bucket[sample.day] = bucket.get(sample.day, 0.0) + sample.kcal
    return {
        key: ExerciseDayRecord(
            day=key,
            active_calories=round_half_up(active.get(key, 0.0)),
            basal_calories=round_half_up(basal.get(key, 0.0)),
            updated_at=updated_at,
        )
        for key in sorted(set(active) | set(basal))
    }


@dataclass(frozen=True)
class FreshnessPolicy:
    """Decides whether a fetched day overwrites, skips or is newly written."""

    force_refresh_days: int = DEFAULT_FORCE_REFRESH_DAYS

    def in_refresh_window(self, day: date, today: date) -> bool:
        """True for the most recent ``force_refresh_days`` days, today included."""
        return (today - day).days < self.force_refresh_days

    def should_write(self, day: date, today: date, exists: bool) -> bool:
        """Absent days are written; present days only inside the refresh window."""
        if not exists:
            return True
        return self.in_refresh_window(day, today)


@dataclass
class HealthSyncReconciler:
    """Merges fetched health samples into day-indexed records."""

    policy: FreshnessPolicy

    def exercise_fetch_start(
        self,
        window: SyncWindow,
        existing: Mapping[str, ExerciseDayRecord],
        today: date,
    ) -> date | None:
        """Return the first day in the window that may need writing."""
        for day in window.days():
            if self.policy.should_write(day, today, day_id(day) in existing):
                return day
        return None

    def reconcile_exercise(  # noqa: PLR0913
        self,
        window: SyncWindow,
        samples: Iterable[RawExerciseSample],
        existing: Mapping[str, ExerciseDayRecord],
        today: date,
        now: datetime,
    ) -> ReconciliationResult[ExerciseDayRecord]:
        """Decide which exercise days must be written.

        Zero-valued days are dropped rather than written, so an empty day reads
        the same as a day that was never synced.
        """
        folded = fold_exercise_samples(samples, updated_at=now)
        writes: dict[str, ExerciseDayRecord] = {}
        skipped = 0
        dropped = 0
        for day in window.days():
            key = day_id(day)
            if not self.policy.should_write(day, today, key in existing):
                skipped += 1
                continue
            record = folded.get(key)
            if record is None or record.is_empty:
                dropped += 1
                continue
            writes[key] = record
        merged = dict(existing)
        merged.update(writes)
        _logger.debug(
            "Exercise reconciled: window=%s..%s writes=%s skipped=%s dropped=%s",
            window.start,
            window.end,
            len(writes),
            skipped,
            dropped,
        )
        return ReconciliationResult(
            writes=writes, merged=merged, skipped=skipped, dropped=dropped
        )

    def reconcile_weight(
        self,
        window: SyncWindow,
        samples: Iterable[RawWeightSample],
        existing: Mapping[str, WeightSample],
    ) -> ReconciliationResult[WeightSample]:
        """Decide which weight samples must be written.

        Weight is append-only per day: a day that already has a sample is never
        overwritten by a sync, and only the earliest fetched sample of a new day
        is kept.
        """
        start_key = day_id(window.start)
        end_key = day_id(window.end)
        writes: dict[str, WeightSample] = {}
        skipped = 0
        dropped = 0
        for sample in sorted(samples, key=lambda item: item.recorded_at):
            key = sample.day
            if window.is_empty or not start_key <= key <= end_key:
                continue
            if key in existing:
                skipped += 1
                continue
            if key in writes:
                dropped += 1
                continue
            writes[key] = WeightSample(
                id=new_entry_id(sample.recorded_at),
                weight_kg=sample.weight_kg,
                measured_at=sample.recorded_at,
            )
        merged = dict(existing)
        merged.update(writes)
        return ReconciliationResult(
            writes=writes, merged=merged, skipped=skipped, dropped=dropped
        )
