"""Unit conversion and day identifier helpers.

Mass is stored canonically in grams (food) and kilograms (body weight);
conversions here exist for display and input only. Day identifiers are the
``YYYY-MM-DD`` form of a value's own calendar fields, so two timestamps on the
same local day always map to the same identifier regardless of time or offset.
"""

import math
from datetime import date, datetime, tzinfo
from enum import StrEnum

from calorie_tracker.domain.errors import EntryValidationError

GRAMS_PER_OUNCE = 28.3495
POUNDS_PER_KG = 2.20462
KG_PER_STONE = 6.35029
CM_PER_FOOT = 30.48


class WeightUnit(StrEnum):
    """Body weight display units."""

    KG = "kg"
    LB = "lb"
    ST = "st"


def grams_to_ounces(grams: float) -> float:
    """Convert grams to ounces."""
    return grams / GRAMS_PER_OUNCE


def ounces_to_grams(ounces: float) -> float:
    """Convert ounces to grams."""
    return ounces * GRAMS_PER_OUNCE


def kg_to_lb(kg: float) -> float:
    """Convert kilograms to pounds."""
    return kg * POUNDS_PER_KG


def lb_to_kg(lb: float) -> float:
    """Convert pounds to kilograms."""
    return lb / POUNDS_PER_KG


def stone_to_kg(stone: float) -> float:
    """Convert stone to kilograms."""
    return stone * KG_PER_STONE


def kg_to_stone(kg: float) -> float:
    """Convert kilograms to stone."""
    return kg / KG_PER_STONE


def feet_to_cm(feet: float) -> float:
    """Convert feet to centimetres."""
    return feet * CM_PER_FOOT


def to_kg(value: float, unit: WeightUnit | str) -> float:
    """Convert a body weight in the given unit to kilograms."""
    resolved = WeightUnit(unit)
    if resolved is WeightUnit.LB:
        return lb_to_kg(value)
    if resolved is WeightUnit.ST:
        return stone_to_kg(value)
    return value


def from_kg(kg: float, unit: WeightUnit | str) -> float:
    """Convert kilograms to the given display unit."""
    resolved = WeightUnit(unit)
    if resolved is WeightUnit.LB:
        return kg_to_lb(kg)
    if resolved is WeightUnit.ST:
        return kg_to_stone(kg)
    return kg


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def day_id(value: date | datetime) -> str:
    """Return the zero-padded YYYY-MM-DD identifier for a calendar day."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_day_id(raw: str) -> date:
    """Parse a YYYY-MM-DD identifier back into a date."""
    try:
        return date.fromisoformat(raw.strip()[:10])
    except (AttributeError, ValueError) as exc:
        raise EntryValidationError(f"Invalid day identifier: {raw!r}") from exc


def parse_timestamp(raw: object) -> datetime:
    """Parse a stored ISO-8601 timestamp."""
    if isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str) or not raw:
        raise EntryValidationError(f"Invalid timestamp: {raw!r}")
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise EntryValidationError(f"Invalid timestamp: {raw!r}") from exc


def to_local(value: datetime, tz: tzinfo | None) -> datetime:
    """Express a timestamp in ``tz``.

    Naive timestamps are taken as wall-clock time in ``tz`` and get it attached.
    """
    if tz is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)
