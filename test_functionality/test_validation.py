"""
Test measurement validation
"""
from datetime import date

import pytest

from inbody_tracker.domain.exceptions import ValidationError
from inbody_tracker.domain.validation import validate_measurement

pytestmark = pytest.mark.unit

TODAY = date(2024, 3, 20)


def test_valid_form_strings_are_parsed():
    valid = validate_measurement("2024-03-01", " 80.5 ", "35", "21.4", today=TODAY)

    assert valid.date == date(2024, 3, 1)
    assert valid.weight_kg == 80.5
    assert valid.skeletal_muscle_kg == 35.0
    assert valid.body_fat_percentage == 21.4


@pytest.mark.parametrize("weight,fat", [(20, 3), (300, 60)])
def test_bounds_are_inclusive(weight, fat):
    validate_measurement(TODAY, weight, 35.0, fat, today=TODAY)


def test_every_offending_field_is_reported():
    with pytest.raises(ValidationError) as exc_info:
        validate_measurement("2024-13-01", "abc", 0, 70, today=TODAY)

    assert exc_info.value.field_errors == {
        "date": "Date must be a valid YYYY-MM-DD date",
        "weight_kg": "Weight must be between 20-300 kg",
        "skeletal_muscle_kg": "Muscle mass must be a positive number",
        "body_fat_percentage": "Body fat must be between 3-60%",
    }


def test_muscle_above_sanity_bound():
    with pytest.raises(ValidationError) as exc_info:
        validate_measurement(TODAY, 90, 151, 20, today=TODAY)

    assert exc_info.value.field_errors == {
        "skeletal_muscle_kg": "Muscle mass cannot exceed 150 kg",
    }


def test_future_date_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_measurement("2024-03-21", 80, 35, 20, today=TODAY)

    assert exc_info.value.field_errors == {"date": "Date cannot be in the future"}


def test_empty_fields_are_errors():
    with pytest.raises(ValidationError) as exc_info:
        validate_measurement("", "", None, "  ", today=TODAY)

    assert set(exc_info.value.field_errors) == {
        "date", "weight_kg", "skeletal_muscle_kg", "body_fat_percentage",
    }
