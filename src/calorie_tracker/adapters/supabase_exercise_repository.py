"""Supabase repository for per-day exercise records."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.health import ExerciseDayRecord
from calorie_tracker.domain.units import parse_timestamp
from calorie_tracker.services.sync import ExerciseRepository


@dataclass
class SupabaseExerciseRepository(ExerciseRepository):
    """Supabase implementation for exercise day records."""

    client: Client

    def list_exercise_records(self, user_id: UUID) -> dict[str, ExerciseDayRecord]:
        """Return exercise records keyed by day identifier."""
        response = (
            self.client.table("exercise_days")
            .select("day, active_calories, basal_calories, updated_at")
            .eq("user_id", str(user_id))
            .execute()
        )
        records = {}
        for row in response.data or []:
            record = ExerciseDayRecord(
                day=str(row["day"])[:10],
                active_calories=int(row.get("active_calories") or 0),
                basal_calories=int(row.get("basal_calories") or 0),
                updated_at=parse_timestamp(row["updated_at"]),
            )
            records[record.day] = record
        return records

    def upsert_exercise_records(
        self, user_id: UUID, records: list[ExerciseDayRecord]
    ) -> None:
        """Create or replace exercise records by day in one batch."""
        payload = [
            {
                "user_id": str(user_id),
                "day": record.day,
                "active_calories": record.active_calories,
                "basal_calories": record.basal_calories,
                "updated_at": record.updated_at.isoformat(),
            }
            for record in records
        ]
        if payload:
            self.client.table("exercise_days").upsert(
                payload, on_conflict="user_id,day"
            ).execute()
