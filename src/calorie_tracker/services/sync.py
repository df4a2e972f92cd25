"""Health data sync orchestration."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Protocol, TypeVar
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_tracker.domain.health import (
    ExerciseDayRecord,
    RawExerciseSample,
    RawWeightSample,
)
from calorie_tracker.domain.profile import UserProfile
from calorie_tracker.domain.sync import DayCache, SyncReport, SyncStatus, SyncWindow
from calorie_tracker.domain.units import to_local
from calorie_tracker.services.entries import EntryRepository
from calorie_tracker.services.ledger import (
    latest_weight_by_day,
    localize_entries,
    localize_weights,
)
from calorie_tracker.services.reconciler import (
    DEFAULT_SYNC_DAYS,
    WEIGHT_LOOKBACK_DAYS,
    HealthSyncReconciler,
    exercise_window,
    resolve_sync_start,
    weight_window,
)

_logger = logging.getLogger(__name__)

SampleT = TypeVar("SampleT")


class HealthDataSource(Protocol):
    """Interface for the health platform bridge."""

    async def fetch_exercise_samples(
        self, start: date, end: date
    ) -> list[RawExerciseSample]:
        """Return de-duplicated energy samples for an inclusive day range."""

    async def fetch_weight_samples(
        self, start: date, end: date
    ) -> list[RawWeightSample]:
        """Return de-duplicated weight samples for an inclusive day range."""


class ExerciseRepository(Protocol):
    """Persistence interface for per-day exercise records."""

    def list_exercise_records(self, user_id: UUID) -> dict[str, ExerciseDayRecord]:
        """Return exercise records keyed by day identifier."""

    def upsert_exercise_records(
        self, user_id: UUID, records: list[ExerciseDayRecord]
    ) -> None:
        """Create or replace exercise records by day in one batch."""


class ProfileReader(Protocol):
    """Read access to user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile if present."""


@dataclass
class ReconciliationOrchestrator:
    """Runs sync passes and holds the last synced day cache per user."""

    entry_repository: EntryRepository
    exercise_repository: ExerciseRepository
    profile_repository: ProfileReader
    health_source: HealthDataSource
    reconciler: HealthSyncReconciler
    default_budget: int = 2000
    default_sync_days: int = DEFAULT_SYNC_DAYS
    weight_lookback_days: int = WEIGHT_LOOKBACK_DAYS
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    _caches: dict[UUID, DayCache] = field(default_factory=dict, init=False)

    def cached(self, user_id: UUID) -> DayCache | None:
        """Return the snapshot left by the last completed pass."""
        return self._caches.get(user_id)

    async def sync(
        self,
        user_id: UUID,
        today: date | None = None,
        now: datetime | None = None,
    ) -> SyncReport:
        """Run one full reconciliation pass for a user."""
        try:
            profile = self._profile(user_id)
            tz = ZoneInfo(profile.timezone)
            food_entries = localize_entries(
                self.entry_repository.list_food_entries(user_id), tz
            )
            existing_exercise = self.exercise_repository.list_exercise_records(user_id)
            existing_weights = latest_weight_by_day(
                localize_weights(self.entry_repository.list_weight_samples(user_id), tz)
            )
            now = now or datetime.now(tz=tz)
            today = today or now.date()
            start = resolve_sync_start(
                profile.health_connected_on,
                food_entries,
                today,
                default_days=self.default_sync_days,
            )
            exercise_days = exercise_window(start, today)
            weight_days = weight_window(start, today, self.weight_lookback_days)
            fetch_start = self.reconciler.exercise_fetch_start(
                exercise_days, existing_exercise, today
            )
        except Exception as exc:
            _logger.exception("Sync load failed", extra={"user_id": str(user_id)})
            return SyncReport(status=SyncStatus.FAILED, error=str(exc))

        _logger.info(
            "Sync started: user=%s exercise=%s..%s fetch_from=%s weight=%s..%s",
            user_id,
            exercise_days.start,
            exercise_days.end,
            fetch_start,
            weight_days.start,
            weight_days.end,
        )

        try:
            raw_exercise: list[RawExerciseSample] = []
            if fetch_start is not None:
                raw_exercise = await self._call_with_retry(
                    lambda: self.health_source.fetch_exercise_samples(
                        fetch_start, today
                    ),
                    action="exercise",
                )
            raw_weights: list[RawWeightSample] = []
            if not weight_days.is_empty:
                raw_weights = await self._call_with_retry(
                    lambda: self.health_source.fetch_weight_samples(
                        weight_days.start, today
                    ),
                    action="weight",
                )
        except Exception as exc:
            _logger.exception("Health fetch failed", extra={"user_id": str(user_id)})
            return SyncReport(
                status=SyncStatus.FAILED,
                exercise_window=exercise_days,
                weight_window=weight_days,
                error=str(exc),
            )

        exercise_result = self.reconciler.reconcile_exercise(
            exercise_days,
            _localize_samples(raw_exercise, tz),
            existing_exercise,
            today,
            now,
        )
        weight_result = self.reconciler.reconcile_weight(
            weight_days, _localize_samples(raw_weights, tz), existing_weights
        )

        try:
            if exercise_result.writes:
                self.exercise_repository.upsert_exercise_records(
                    user_id, list(exercise_result.writes.values())
                )
            if weight_result.writes:
                self.entry_repository.upsert_weight_samples(
                    user_id, list(weight_result.writes.values())
                )
        except Exception as exc:
            _logger.exception("Sync persist failed", extra={"user_id": str(user_id)})
            return SyncReport(
                status=SyncStatus.FAILED,
                exercise_window=exercise_days,
                weight_window=weight_days,
                error=str(exc),
            )

        self._caches[user_id] = DayCache.build(
            exercise_result.merged, weight_result.merged
        )
        _logger.info(
            "Sync complete: user=%s exercise_written=%s weights_written=%s",
            user_id,
            exercise_result.written,
            weight_result.written,
        )
        return SyncReport(
            status=SyncStatus.OK,
            exercise_window=exercise_days,
            weight_window=weight_days,
            exercise_written=exercise_result.written,
            exercise_skipped=exercise_result.skipped,
            exercise_dropped=exercise_result.dropped,
            weights_written=weight_result.written,
            weights_skipped=weight_result.skipped,
        )

    async def refresh_today(
        self,
        user_id: UUID,
        today: date | None = None,
        now: datetime | None = None,
    ) -> SyncReport:
        """Force-refresh only today's exercise data."""
        window: SyncWindow | None = None
        try:
            profile = self._profile(user_id)
            tz = ZoneInfo(profile.timezone)
            now = now or datetime.now(tz=tz)
            today = today or now.date()
            window = SyncWindow(start=today, end=today)
            cache = self._caches.get(user_id)
            if cache is None:
                weights = self.entry_repository.list_weight_samples(user_id)
                cache = DayCache.build(
                    self.exercise_repository.list_exercise_records(user_id),
                    latest_weight_by_day(localize_weights(weights, tz)),
                )
            raw_exercise = await self._call_with_retry(
                lambda: self.health_source.fetch_exercise_samples(today, today),
                action="exercise",
            )
            result = self.reconciler.reconcile_exercise(
                window, _localize_samples(raw_exercise, tz), {}, today, now
            )
            if result.writes:
                self.exercise_repository.upsert_exercise_records(
                    user_id, list(result.writes.values())
                )
        except Exception as exc:
            _logger.exception("Refresh failed", extra={"user_id": str(user_id)})
            return SyncReport(
                status=SyncStatus.FAILED, exercise_window=window, error=str(exc)
            )

        exercise = dict(cache.exercise)
        exercise.update(result.writes)
        self._caches[user_id] = DayCache.build(exercise, dict(cache.weights))
        return SyncReport(
            status=SyncStatus.OK,
            exercise_window=window,
            exercise_written=result.written,
            exercise_dropped=result.dropped,
        )

    def _profile(self, user_id: UUID) -> UserProfile:
        return self.profile_repository.get_profile(user_id) or UserProfile(
            calorie_budget=self.default_budget
        )

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[list[SampleT]]], *, action: str
    ) -> list[SampleT]:
        """Call an async fetch with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Health %s fetch failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _localize_samples(samples: list[SampleT], tz: ZoneInfo) -> list[SampleT]:
    return [
        replace(sample, recorded_at=to_local(sample.recorded_at, tz))
        for sample in samples
    ]
