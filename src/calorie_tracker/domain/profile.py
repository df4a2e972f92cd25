"""User profile domain model."""

from dataclasses import dataclass, field
from datetime import date

from calorie_tracker.domain.budget import MealBudget
from calorie_tracker.domain.entries import MealType
from calorie_tracker.domain.ledger import WeekStart
from calorie_tracker.domain.units import WeightUnit

DEFAULT_CALORIE_BUDGET = 2000


@dataclass(frozen=True)
class UserProfile:
    """Per-user preferences that drive budget and metric computation."""

    calorie_budget: int = DEFAULT_CALORIE_BUDGET
    meal_budgets: dict[MealType, MealBudget] = field(default_factory=dict)
    week_start: WeekStart = WeekStart.MONDAY
    use_metric: bool = True
    timezone: str = "UTC"
    health_connected_on: date | None = None
    target_weight_kg: float | None = None

    @property
    def weight_unit(self) -> WeightUnit:
        """Unit body weights are shown in."""
        return WeightUnit.KG if self.use_metric else WeightUnit.LB
