"""Tests for user-initiated entry changes."""

from datetime import UTC, datetime

import pytest

from calorie_tracker.domain.entries import MealType, WeightSample
from calorie_tracker.domain.errors import EntryValidationError


def test_add_and_delete_food_entry(entry_service, entry_repository, user_id) -> None:
    entry = entry_service.add_food_entry(
        user_id,
        name="Oatmeal",
        calories=350,
        meal_type=MealType.BREAKFAST,
        logged_at=datetime(2024, 3, 10, 8),
        carbs_g=60,
    )

    stored = entry_repository.list_food_entries(user_id)
    assert stored == [entry]
    assert entry.day == "2024-03-10"

    entry_service.delete_food_entry(user_id, entry.id)
    assert entry_repository.list_food_entries(user_id) == []


def test_entry_ids_sort_by_creation(entry_service, user_id) -> None:
    first = entry_service.add_food_entry(
        user_id,
        name="a",
        calories=1,
        meal_type=MealType.SNACKS,
        logged_at=datetime(2024, 3, 10, 8),
    )
    second = entry_service.add_food_entry(
        user_id,
        name="b",
        calories=1,
        meal_type=MealType.SNACKS,
        logged_at=datetime(2024, 3, 10, 8),
    )
    assert first.id != second.id
    assert first.id[:13] <= second.id[:13]


def test_add_food_entry_rejects_negative_calories(
    entry_service, entry_repository, user_id
) -> None:
    with pytest.raises(EntryValidationError):
        entry_service.add_food_entry(
            user_id,
            name="Bad",
            calories=-10,
            meal_type=MealType.LUNCH,
            logged_at=datetime(2024, 3, 10, 12),
        )
    assert entry_repository.list_food_entries(user_id) == []


def test_record_weight_replaces_same_day_sample(
    entry_service, entry_repository, user_id
) -> None:
    entry_repository.upsert_weight_samples(
        user_id,
        [WeightSample("synced", 81.0, datetime(2024, 3, 10, 6))],
    )

    sample = entry_service.record_weight(user_id, 80.5, datetime(2024, 3, 10, 9))

    assert sample.id == "synced"
    stored = entry_repository.list_weight_samples(user_id)
    assert len(stored) == 1
    assert stored[0].weight_kg == 80.5


def test_record_weight_on_new_day_appends(
    entry_service, entry_repository, user_id
) -> None:
    entry_service.record_weight(user_id, 81.0, datetime(2024, 3, 9, 7))
    entry_service.record_weight(user_id, 80.5, datetime(2024, 3, 10, 7))
    assert len(entry_repository.list_weight_samples(user_id)) == 2


def test_record_weight_replaces_latest_of_mixed_naive_and_aware_samples(
    entry_service, entry_repository, user_id
) -> None:
    entry_repository.upsert_weight_samples(
        user_id,
        [
            WeightSample("morning", 81.0, datetime(2024, 3, 10, 6)),
            WeightSample("noon", 80.8, datetime(2024, 3, 10, 12, tzinfo=UTC)),
        ],
    )

    sample = entry_service.record_weight(
        user_id, 80.5, datetime(2024, 3, 10, 18, tzinfo=UTC)
    )

    assert sample.id == "noon"
