"""Domain models for derived dashboard metrics."""

from dataclasses import dataclass, field
from enum import StrEnum


class DayStatus(StrEnum):
    """Budget outcome of a single day."""

    EMPTY = "empty"
    UNDER = "under"
    OVER = "over"


class TrendDirection(StrEnum):
    """Presentation hint for the weekly weight trend."""

    DOWNWARD = "downward"
    UPWARD = "upward"
    NONE = "none"


@dataclass(frozen=True)
class WeightTrend:
    """Least-squares line through a week's weight samples.

    ``points`` maps day offset (0..6) to weight in kilograms. With fewer than
    two points the direction is ``NONE`` and the line parameters are ``None``.
    """

    direction: TrendDirection
    points: dict[int, float] = field(default_factory=dict)
    slope: float | None = None
    intercept: float | None = None

    @property
    def has_trend(self) -> bool:
        """True when a line could be fitted."""
        return self.slope is not None

    def value_at(self, offset: float) -> float | None:
        """Fitted weight at a day offset."""
        if self.slope is None or self.intercept is None:
            return None
        return self.slope * offset + self.intercept

    @property
    def start_weight(self) -> float | None:
        """Fitted weight on the first day of the week."""
        return self.value_at(0)

    @property
    def end_weight(self) -> float | None:
        """Fitted weight on the last day of the week."""
        return self.value_at(6)

    def residuals(self) -> dict[int, float]:
        """Observed minus fitted weight per offset."""
        if not self.has_trend:
            return {}
        return {
            offset: weight - (self.value_at(offset) or 0.0)
            for offset, weight in self.points.items()
        }


@dataclass(frozen=True)
class MacroSplit:
    """Rounded share of fat, carbs and protein in a period."""

    fat_percent: int
    carbs_percent: int
    protein_percent: int


@dataclass(frozen=True)
class StreakSummary:
    """Streak counters shown on the dashboard."""

    current_streak: int
    perfect_weeks: int
