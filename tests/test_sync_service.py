"""Tests for the sync orchestrator."""

import asyncio
from datetime import UTC, date, datetime

from calorie_tracker.domain.entries import FoodEntry, MealType
from calorie_tracker.domain.health import EnergyKind, RawExerciseSample, RawWeightSample
from calorie_tracker.domain.profile import UserProfile
from calorie_tracker.domain.sync import SyncStatus

TODAY = date(2024, 3, 10)
NOW = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)


def _active(day: int, kcal: float, hour: int = 12) -> RawExerciseSample:
    return RawExerciseSample(
        kind=EnergyKind.ACTIVE,
        kcal=kcal,
        recorded_at=datetime(2024, 3, day, hour, tzinfo=UTC),
    )


def _connect(profile_repository, user_id, **overrides) -> None:
    profile_repository.save_profile(
        user_id, UserProfile(health_connected_on=date(2024, 3, 8), **overrides)
    )


def test_sync_writes_new_days_in_one_batch(
    orchestrator, profile_repository, health_source, exercise_repository, user_id
) -> None:
    _connect(profile_repository, user_id)
    health_source.exercise = [_active(8, 300), _active(9, 250), _active(10, 120)]
    health_source.weights = [
        RawWeightSample(80.4, datetime(2024, 3, 9, 7, tzinfo=UTC)),
    ]

    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.OK
    assert report.exercise_written == 3
    assert report.weights_written == 1
    assert report.exercise_window.start == date(2024, 3, 8)
    assert report.weight_window.start == date(2023, 12, 11)
    assert len(exercise_repository.batches) == 1
    cache = orchestrator.cached(user_id)
    assert sorted(cache.exercise) == ["2024-03-08", "2024-03-09", "2024-03-10"]
    assert cache.weights["2024-03-09"].weight_kg == 80.4


def test_second_sync_only_refreshes_recent_days(
    orchestrator, profile_repository, health_source, entry_repository, user_id
) -> None:
    _connect(profile_repository, user_id)
    health_source.exercise = [_active(8, 300), _active(9, 250), _active(10, 120)]
    health_source.weights = [
        RawWeightSample(80.4, datetime(2024, 3, 9, 7, tzinfo=UTC)),
    ]
    asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))
    health_source.exercise.append(_active(10, 80, hour=20))

    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.exercise_written == 2
    assert report.exercise_skipped == 1
    assert report.weights_written == 0
    assert report.weights_skipped == 1
    assert ("exercise", date(2024, 3, 9), TODAY) in health_source.calls
    assert orchestrator.cached(user_id).exercise["2024-03-10"].active_calories == 200
    assert len(entry_repository.list_weight_samples(user_id)) == 1


def test_sync_without_connection_date_uses_default_window(
    orchestrator, health_source, user_id
) -> None:
    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.OK
    assert report.total_written == 0
    assert report.exercise_window.start == date(2024, 2, 9)
    assert health_source.calls[0] == ("exercise", date(2024, 2, 9), TODAY)


def test_sync_retries_transient_fetch_failure(
    orchestrator, profile_repository, health_source, user_id
) -> None:
    _connect(profile_repository, user_id)
    health_source.exercise = [_active(10, 120)]
    health_source.failures = 1

    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.OK
    assert report.exercise_written == 1
    assert [call[0] for call in health_source.calls[:2]] == ["exercise", "exercise"]


def test_sync_reports_fetch_failure_and_keeps_cache(
    orchestrator, profile_repository, health_source, exercise_repository, user_id
) -> None:
    _connect(profile_repository, user_id)
    health_source.failures = 5

    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.FAILED
    assert "unavailable" in report.error
    assert orchestrator.cached(user_id) is None
    assert exercise_repository.batches == []


def _fail_profile_load(monkeypatch, profile_repository) -> None:
    def get_profile(user_id):
        raise RuntimeError("profile store down")

    monkeypatch.setattr(profile_repository, "get_profile", get_profile)


def test_sync_reports_profile_load_failure(
    orchestrator, profile_repository, health_source, monkeypatch, user_id
) -> None:
    _fail_profile_load(monkeypatch, profile_repository)

    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.FAILED
    assert report.error == "profile store down"
    assert health_source.calls == []
    assert orchestrator.cached(user_id) is None


def test_refresh_today_reports_profile_load_failure(
    orchestrator, profile_repository, health_source, monkeypatch, user_id
) -> None:
    _fail_profile_load(monkeypatch, profile_repository)

    report = asyncio.run(orchestrator.refresh_today(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.FAILED
    assert report.error == "profile store down"
    assert report.exercise_window is None
    assert health_source.calls == []


def test_refresh_today_reports_unknown_stored_timezone(
    orchestrator, profile_repository, health_source, user_id
) -> None:
    _connect(profile_repository, user_id, timezone="Mars/Olympus_Mons")

    report = asyncio.run(orchestrator.refresh_today(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.FAILED
    assert health_source.calls == []


def test_sync_handles_mixed_naive_and_aware_entries(
    orchestrator, entry_repository, health_source, user_id
) -> None:
    for entry_id, logged_at in [
        ("naive", datetime(2024, 3, 1, 8)),
        ("aware", datetime(2024, 3, 5, 8, tzinfo=UTC)),
    ]:
        entry_repository.save_food_entry(
            user_id,
            FoodEntry(
                id=entry_id,
                name="oats",
                calories=300,
                logged_at=logged_at,
                meal_type=MealType.BREAKFAST,
            ),
        )

    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.OK
    assert report.exercise_window.start == date(2024, 3, 1)
    assert health_source.calls[0] == ("exercise", date(2024, 3, 1), TODAY)


def test_sync_reports_persist_failure(
    orchestrator, profile_repository, health_source, exercise_repository, user_id
) -> None:
    _connect(profile_repository, user_id)
    health_source.exercise = [_active(9, 250)]
    asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))
    before = orchestrator.cached(user_id)
    health_source.exercise.append(_active(10, 100))
    exercise_repository.fail_writes = True

    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.FAILED
    assert orchestrator.cached(user_id) is before
    assert "2024-03-10" not in before.exercise


def test_sync_buckets_samples_in_profile_timezone(
    orchestrator, profile_repository, health_source, user_id
) -> None:
    _connect(profile_repository, user_id, timezone="America/New_York")
    health_source.exercise = [_active(10, 300, hour=3)]

    asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert list(orchestrator.cached(user_id).exercise) == ["2024-03-09"]


def test_refresh_today_only_touches_today(
    orchestrator, profile_repository, health_source, exercise_repository, user_id
) -> None:
    _connect(profile_repository, user_id)
    health_source.exercise = [_active(8, 300), _active(10, 120)]
    asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))
    health_source.exercise = [_active(8, 999), _active(10, 120), _active(10, 60)]

    report = asyncio.run(orchestrator.refresh_today(user_id, today=TODAY, now=NOW))

    assert report.status is SyncStatus.OK
    assert report.exercise_written == 1
    assert health_source.calls[-1] == ("exercise", TODAY, TODAY)
    cache = orchestrator.cached(user_id)
    assert cache.exercise["2024-03-10"].active_calories == 180
    assert cache.exercise["2024-03-08"].active_calories == 300
    assert exercise_repository.records[user_id]["2024-03-10"].active_calories == 180


def test_sync_status_is_ok_or_failed(orchestrator, user_id) -> None:
    report = asyncio.run(orchestrator.sync(user_id, today=TODAY, now=NOW))

    assert report.total_written == 0
    assert report.status is SyncStatus.OK
    assert {status.value for status in SyncStatus} == {"ok", "failed"}
