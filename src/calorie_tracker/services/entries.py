"""Food and weight entry service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.entries import (
    FoodEntry,
    MealType,
    WeightSample,
    new_entry_id,
)
from calorie_tracker.domain.units import to_local

_logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Persistence interface for food entries and weight samples."""

    def list_food_entries(self, user_id: UUID) -> list[FoodEntry]:
        """Return all food entries for a user."""

    def save_food_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        """Create or replace a food entry by id."""

    def delete_food_entry(self, user_id: UUID, entry_id: str) -> None:
        """Delete a food entry by id."""

    def list_weight_samples(self, user_id: UUID) -> list[WeightSample]:
        """Return all weight samples for a user."""

    def upsert_weight_samples(self, user_id: UUID, samples: list[WeightSample]) -> None:
        """Create or replace weight samples by id in one batch."""


@dataclass
class EntryService:
    """Service for user-initiated food and weight changes."""

    repository: EntryRepository

    def add_food_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        name: str,
        calories: int,
        meal_type: MealType,
        logged_at: datetime,
        fat_g: float = 0.0,
        carbs_g: float = 0.0,
        protein_g: float = 0.0,
        sugars_g: float = 0.0,
    ) -> FoodEntry:
        """Create and persist a new food entry."""
        entry = FoodEntry(
            id=new_entry_id(),
            name=name,
            calories=calories,
            logged_at=logged_at,
            meal_type=meal_type,
            fat_g=fat_g,
            carbs_g=carbs_g,
            protein_g=protein_g,
            sugars_g=sugars_g,
        )
        self.repository.save_food_entry(user_id, entry)
        return entry

    def delete_food_entry(self, user_id: UUID, entry_id: str) -> None:
        """Remove a food entry."""
        self.repository.delete_food_entry(user_id, entry_id)

    def record_weight(
        self, user_id: UUID, weight_kg: float, measured_at: datetime
    ) -> WeightSample:
        """Record a user-entered weight, replacing that day's existing sample."""
        candidate = WeightSample(
            id=new_entry_id(), weight_kg=weight_kg, measured_at=measured_at
        )
        existing = [
            sample
            for sample in self.repository.list_weight_samples(user_id)
            if sample.day == candidate.day
        ]
        if existing:
            current = max(
                existing, key=lambda sample: to_local(sample.measured_at, UTC)
            )
            candidate = WeightSample(
                id=current.id, weight_kg=weight_kg, measured_at=measured_at
            )
            _logger.info(
                "Weight replaced: user=%s day=%s id=%s",
                user_id,
                candidate.day,
                current.id,
            )
        self.repository.upsert_weight_samples(user_id, [candidate])
        return candidate
