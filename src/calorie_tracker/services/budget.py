"""Effective-dated calorie budget resolution."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.budget import (
    DEFAULT_MEAL_PERCENTAGES,
    ActivityLevel,
    BodyProfile,
    BudgetRecord,
    MealBudget,
    Sex,
)
from calorie_tracker.domain.entries import MealType
from calorie_tracker.domain.profile import UserProfile
from calorie_tracker.domain.units import day_id, round_half_up

_logger = logging.getLogger(__name__)

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}
WEIGHT_LOSS_DEFICIT = 500
MIN_CALORIES = {Sex.MALE: 1500, Sex.FEMALE: 1200}
MAX_CALORIES = 10000


class ProfileRepository(Protocol):
    """Persistence interface for profiles and budget history."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile if present."""

    def save_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Create or replace the user's profile."""

    def list_budget_history(self, user_id: UUID) -> list[BudgetRecord]:
        """Return budget records in insertion order."""

    def add_budget_record(self, user_id: UUID, record: BudgetRecord) -> None:
        """Append a budget record (upsert by effective date)."""


def sort_history(history: Iterable[BudgetRecord]) -> list[BudgetRecord]:
    """Sort newest effective date first; later insertions win on ties."""
    return sorted(
        reversed(list(history)),
        key=lambda record: record.effective_date,
        reverse=True,
    )


def _lookup(
    ordered: list[BudgetRecord], on: date | datetime | str, fallback: int
) -> int:
    target = on if isinstance(on, str) else day_id(on)
    for record in ordered:
        if day_id(record.effective_date) <= target:
            return record.calorie_budget
    return fallback


def active_budget(
    history: Iterable[BudgetRecord], on: date | datetime, fallback: int
) -> int:
    """Return the budget in effect on a day, or ``fallback`` when none applies."""
    return _lookup(sort_history(history), on, fallback)


@dataclass(frozen=True)
class BudgetTimeline:
    """Budget history sorted once for repeated per-day lookups."""

    fallback: int
    ordered: tuple[BudgetRecord, ...] = field(default_factory=tuple)

    @classmethod
    def from_history(
        cls, history: Iterable[BudgetRecord], fallback: int
    ) -> "BudgetTimeline":
        """Build a timeline from records in insertion order."""
        return cls(fallback=fallback, ordered=tuple(sort_history(history)))

    def budget_on(self, on: date | datetime | str) -> int:
        """Return the budget in effect on a day."""
        return _lookup(list(self.ordered), on, self.fallback)


def meal_allocation(
    allocations: Mapping[MealType, MealBudget], meal_type: MealType, day_budget: int
) -> int:
    """Return the calorie target for one meal of a day."""
    allocation = allocations.get(meal_type)
    if allocation is None:
        percent = DEFAULT_MEAL_PERCENTAGES[meal_type]
        return round_half_up(day_budget * percent / 100)
    if allocation.is_percent:
        return round_half_up(day_budget * allocation.value / 100)
    return allocation.value


def suggest_calorie_budget(body: BodyProfile) -> int:
    """Suggest a daily budget from Mifflin-St Jeor BMR and activity level."""
    bmr = 10 * body.weight_kg + 6.25 * body.height_cm - 5 * body.age
    bmr += 5 if body.sex is Sex.MALE else -161
    tdee = bmr * ACTIVITY_MULTIPLIERS[body.activity_level]
    if body.target_weight_kg is not None and body.target_weight_kg < body.weight_kg:
        tdee -= WEIGHT_LOSS_DEFICIT
    return max(MIN_CALORIES[body.sex], min(round_half_up(tdee), MAX_CALORIES))


@dataclass
class BudgetService:
    """Service for reading and changing a user's calorie budget."""

    repository: ProfileRepository
    default_budget: int = 2000

    def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the stored profile or defaults."""
        return self.repository.get_profile(user_id) or UserProfile(
            calorie_budget=self.default_budget
        )

    def timeline(self, user_id: UUID) -> BudgetTimeline:
        """Return the user's budget timeline with the profile fallback."""
        profile = self.get_profile(user_id)
        history = self.repository.list_budget_history(user_id)
        return BudgetTimeline.from_history(history, profile.calorie_budget)

    def set_budget(
        self, user_id: UUID, calorie_budget: int, effective_on: date
    ) -> BudgetRecord:
        """Record a budget change effective from a day onward.

        The profile budget is left untouched: it remains the fallback for days
        before the earliest recorded change.
        """
        record = BudgetRecord(
            effective_date=effective_on, calorie_budget=calorie_budget
        )
        self.repository.add_budget_record(user_id, record)
        _logger.info(
            "Budget set: user=%s budget=%s effective=%s",
            user_id,
            calorie_budget,
            day_id(effective_on),
        )
        return record

    def apply_body_profile(
        self, user_id: UUID, body: BodyProfile, use_metric: bool | None = None
    ) -> UserProfile:
        """Set the starting budget and target weight from body metrics.

        The suggested budget replaces the profile fallback, which covers days
        before the earliest recorded change.
        """
        current = self.get_profile(user_id)
        profile = replace(
            current,
            calorie_budget=suggest_calorie_budget(body),
            target_weight_kg=body.target_weight_kg,
            use_metric=current.use_metric if use_metric is None else use_metric,
        )
        self.repository.save_profile(user_id, profile)
        _logger.info(
            "Budget suggested: user=%s budget=%s target=%s",
            user_id,
            profile.calorie_budget,
            profile.target_weight_kg,
        )
        return profile
