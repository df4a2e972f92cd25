"""Tests for unit conversion and day identifiers."""

from datetime import UTC, date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from calorie_tracker.domain.errors import EntryValidationError
from calorie_tracker.domain.units import (
    WeightUnit,
    day_id,
    feet_to_cm,
    from_kg,
    grams_to_ounces,
    kg_to_lb,
    lb_to_kg,
    ounces_to_grams,
    parse_day_id,
    parse_timestamp,
    round_half_up,
    to_kg,
    to_local,
)


def test_mass_conversions_round_trip() -> None:
    assert ounces_to_grams(grams_to_ounces(250.0)) == pytest.approx(250.0)
    assert lb_to_kg(kg_to_lb(72.5)) == pytest.approx(72.5)
    assert kg_to_lb(1) == pytest.approx(2.20462)
    assert grams_to_ounces(28.3495) == pytest.approx(1.0)


def test_weight_unit_conversions() -> None:
    assert to_kg(14, WeightUnit.ST) == pytest.approx(88.90406)
    assert from_kg(to_kg(11.5, "st"), "st") == pytest.approx(11.5)
    assert from_kg(80, WeightUnit.KG) == 80
    assert to_kg(176.37, "lb") == pytest.approx(80.0, abs=0.01)


def test_feet_to_cm() -> None:
    assert feet_to_cm(6) == pytest.approx(182.88)


def test_round_half_up() -> None:
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(-2.5) == -3


def test_day_id_is_zero_padded_and_time_independent() -> None:
    morning = datetime(2024, 3, 5, 0, 1)
    night = datetime(2024, 3, 5, 23, 59)
    assert day_id(morning) == "2024-03-05"
    assert day_id(morning) == day_id(night)
    assert day_id(date(987, 1, 2)) == "0987-01-02"


def test_day_id_uses_local_fields_of_aware_timestamps() -> None:
    offset = timezone(timedelta(hours=-8))
    value = datetime(2024, 3, 5, 22, 0, tzinfo=offset)
    assert day_id(value) == "2024-03-05"
    assert day_id(value.astimezone(UTC)) == "2024-03-06"


def test_parse_day_id_rejects_garbage() -> None:
    assert parse_day_id("2024-02-29") == date(2024, 2, 29)
    with pytest.raises(EntryValidationError):
        parse_day_id("yesterday")


def test_parse_timestamp() -> None:
    parsed = parse_timestamp("2024-01-01T08:30:00+00:00")
    assert parsed == datetime(2024, 1, 1, 8, 30, tzinfo=UTC)
    with pytest.raises(EntryValidationError):
        parse_timestamp("")
    with pytest.raises(EntryValidationError):
        parse_timestamp(None)


def test_to_local_converts_aware_and_attaches_zone_to_naive() -> None:
    tz = ZoneInfo("America/Los_Angeles")
    aware = datetime(2024, 6, 1, 3, 0, tzinfo=UTC)
    assert day_id(to_local(aware, tz)) == "2024-05-31"
    naive = datetime(2024, 6, 1, 3, 0)
    localized = to_local(naive, tz)
    assert localized.tzinfo is tz
    assert localized.replace(tzinfo=None) == naive
    assert to_local(naive, None) is naive
    assert sorted([to_local(aware, tz), localized])[0] == to_local(aware, tz)
