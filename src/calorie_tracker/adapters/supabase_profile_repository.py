"""Supabase repository for user profiles and budget history."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.config import parse_week_start
from calorie_tracker.domain.budget import BudgetRecord, MealBudget
from calorie_tracker.domain.entries import MealType
from calorie_tracker.domain.profile import DEFAULT_CALORIE_BUDGET, UserProfile
from calorie_tracker.domain.units import day_id, parse_day_id
from calorie_tracker.services.budget import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profiles and budget history."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select(
                "calorie_budget, meal_budgets, week_start, use_metric, timezone, "
                "health_connected_on, target_weight_kg"
            )
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        connected = row.get("health_connected_on")
        target = row.get("target_weight_kg")
        return UserProfile(
            calorie_budget=int(row.get("calorie_budget") or DEFAULT_CALORIE_BUDGET),
            meal_budgets=_parse_meal_budgets(row.get("meal_budgets") or {}),
            week_start=parse_week_start(row.get("week_start")),
            use_metric=bool(row.get("use_metric", True)),
            timezone=str(row.get("timezone") or "UTC"),
            health_connected_on=parse_day_id(connected) if connected else None,
            target_weight_kg=float(target) if target is not None else None,
        )

    def save_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Create or replace the user's profile."""
        self.client.table("profiles").upsert(
            {
                "user_id": str(user_id),
                "calorie_budget": profile.calorie_budget,
                "meal_budgets": {
                    meal_type.value: {
                        "value": allocation.value,
                        "is_percent": allocation.is_percent,
                    }
                    for meal_type, allocation in profile.meal_budgets.items()
                },
                "week_start": profile.week_start.value,
                "use_metric": profile.use_metric,
                "timezone": profile.timezone,
                "health_connected_on": (
                    day_id(profile.health_connected_on)
                    if profile.health_connected_on
                    else None
                ),
                "target_weight_kg": profile.target_weight_kg,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()

    def list_budget_history(self, user_id: UUID) -> list[BudgetRecord]:
        """Return budget records in insertion order."""
        response = (
            self.client.table("budget_history")
            .select("effective_date, calorie_budget")
            .eq("user_id", str(user_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [
            BudgetRecord(
                effective_date=parse_day_id(str(row["effective_date"])),
                calorie_budget=int(row["calorie_budget"]),
            )
            for row in response.data or []
        ]

    def add_budget_record(self, user_id: UUID, record: BudgetRecord) -> None:
        """Append a budget record, replacing one with the same effective date."""
        self.client.table("budget_history").upsert(
            {
                "user_id": str(user_id),
                "effective_date": day_id(record.effective_date),
                "calorie_budget": record.calorie_budget,
                "created_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id,effective_date",
        ).execute()


def _parse_meal_budgets(raw: dict[str, object]) -> dict[MealType, MealBudget]:
    budgets: dict[MealType, MealBudget] = {}
    for key, value in raw.items():
        if not isinstance(value, dict):
            continue
        try:
            meal_type = MealType(key)
        except ValueError:
            continue
        budgets[meal_type] = MealBudget(
            value=int(value.get("value", 0)),
            is_percent=bool(value.get("is_percent", True)),
        )
    return budgets
