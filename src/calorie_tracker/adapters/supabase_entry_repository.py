"""Supabase repository for food entries and weight samples."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.entries import FoodEntry, MealType, WeightSample
from calorie_tracker.domain.units import parse_timestamp
from calorie_tracker.services.entries import EntryRepository


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for food entries and weight samples."""

    client: Client

    def list_food_entries(self, user_id: UUID) -> list[FoodEntry]:
        """Return all food entries for a user, oldest first."""
        response = (
            self.client.table("food_entries")
            .select(
                "id, name, calories, fat_g, carbs_g, protein_g, sugars_g, "
                "logged_at, meal_type"
            )
            .eq("user_id", str(user_id))
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def save_food_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        """Create or replace a food entry by id."""
        self.client.table("food_entries").upsert(
            {
                "id": entry.id,
                "user_id": str(user_id),
                "name": entry.name,
                "calories": entry.calories,
                "fat_g": entry.fat_g,
                "carbs_g": entry.carbs_g,
                "protein_g": entry.protein_g,
                "sugars_g": entry.sugars_g,
                "logged_at": entry.logged_at.isoformat(),
                "meal_type": entry.meal_type.value,
            },
            on_conflict="id",
        ).execute()

    def delete_food_entry(self, user_id: UUID, entry_id: str) -> None:
        """Delete a food entry by id."""
        self.client.table("food_entries").delete().eq("user_id", str(user_id)).eq(
            "id", entry_id
        ).execute()

    def list_weight_samples(self, user_id: UUID) -> list[WeightSample]:
        """Return all weight samples for a user, oldest first."""
        response = (
            self.client.table("weight_samples")
            .select("id, weight_kg, measured_at")
            .eq("user_id", str(user_id))
            .order("measured_at", desc=False)
            .execute()
        )
        return [
            WeightSample(
                id=str(row["id"]),
                weight_kg=float(row["weight_kg"]),
                measured_at=parse_timestamp(row["measured_at"]),
            )
            for row in response.data or []
        ]

    def upsert_weight_samples(self, user_id: UUID, samples: list[WeightSample]) -> None:
        """Create or replace weight samples by id in one batch."""
        payload = [
            {
                "id": sample.id,
                "user_id": str(user_id),
                "weight_kg": sample.weight_kg,
                "measured_at": sample.measured_at.isoformat(),
            }
            for sample in samples
        ]
        if payload:
            self.client.table("weight_samples").upsert(
                payload, on_conflict="id"
            ).execute()


def _parse_entry(row: dict[str, object]) -> FoodEntry:
    return FoodEntry(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        calories=int(row.get("calories") or 0),
        logged_at=parse_timestamp(row["logged_at"]),
        meal_type=MealType.parse(row.get("meal_type")),
        fat_g=float(row.get("fat_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        sugars_g=float(row.get("sugars_g") or 0.0),
    )
