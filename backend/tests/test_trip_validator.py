"""Trip request validation — field-level errors for untrusted payloads."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date

import pytest

from services.trip_validator import (
    TripValidationError,
    require_valid_trip,
    validate_trip_request,
)


def _payload(**overrides):
    body = {
        "origin": "NYC",
        "destination": "Paris",
        "start_date": "2024-06-01",
        "end_date": "2024-06-05",
        "budget_total": 2000,
        "currency": "usd",
        "num_travelers": 2,
        "preferred_themes": ["heritage", "food"],
    }
    body.update(overrides)
    return body


def _fields(result):
    return {e.field for e in result.errors}


def test_valid_payload_builds_trip_request():
    result = validate_trip_request(_payload())

    assert result.success
    trip = result.data
    assert trip.start_date == date(2024, 6, 1)
    assert trip.end_date == date(2024, 6, 5)
    assert trip.budget_total == 2000
    assert trip.currency == "USD"
    assert trip.preferred_themes == ("heritage", "food")
    assert trip.additional_info is None


def test_missing_required_fields_are_reported():
    body = _payload()
    del body["destination"]
    del body["budget_total"]

    result = validate_trip_request(body)

    assert not result.success
    assert {"destination", "budget_total"} <= _fields(result)


@pytest.mark.parametrize("budget", [0, -50])
def test_non_positive_budget_rejected(budget):
    result = validate_trip_request(_payload(budget_total=budget))
    assert not result.success
    assert _fields(result) == {"budget_total"}


@pytest.mark.parametrize("travelers", [0, -1])
def test_non_positive_travelers_rejected(travelers):
    result = validate_trip_request(_payload(num_travelers=travelers))
    assert not result.success
    assert _fields(result) == {"num_travelers"}


def test_end_before_start_rejected():
    result = validate_trip_request(_payload(start_date="2024-06-05", end_date="2024-06-01"))

    assert not result.success
    assert result.errors[0].field == "end_date"
    assert "on or after start_date" in result.errors[0].reason


def test_same_day_trip_allowed():
    result = validate_trip_request(_payload(end_date="2024-06-01"))
    assert result.success


def test_blank_destination_rejected():
    result = validate_trip_request(_payload(destination="   "))
    assert not result.success
    assert _fields(result) == {"destination"}


def test_bad_currency_rejected():
    result = validate_trip_request(_payload(currency="dollars"))
    assert not result.success
    assert _fields(result) == {"currency"}


def test_null_themes_default_to_empty():
    result = validate_trip_request(_payload(preferred_themes=None))
    assert result.success
    assert result.data.preferred_themes == ()


def test_non_object_body_rejected():
    result = validate_trip_request(["not", "a", "dict"])
    assert not result.success
    assert result.errors[0].field == "body"


def test_require_valid_trip_raises_with_errors():
    with pytest.raises(TripValidationError) as info:
        require_valid_trip(_payload(budget_total=-1))
    assert info.value.errors[0].field == "budget_total"


@pytest.mark.parametrize("budget", ["inf", "-inf", "nan", 1.7e308, 1e15])
def test_non_finite_or_huge_budget_rejected(budget):
    result = validate_trip_request(_payload(budget_total=budget))
    assert not result.success
    assert _fields(result) == {"budget_total"}


def test_largest_accepted_budget_still_generates():
    from services.mock_generator import MockItineraryGenerator

    result = validate_trip_request(_payload(budget_total=9.9e14, end_date="2024-06-01"))
    assert result.success

    data = MockItineraryGenerator().generate(result.data, "premium")
    assert data["itineraries"][0]["total_cost"]["amount"] == int(9.9e14 * 1.2)


def test_trip_longer_than_limit_rejected():
    from config.settings import settings

    result = validate_trip_request(_payload(start_date="2000-01-01", end_date="2100-01-01"))

    assert not result.success
    assert _fields(result) == {"end_date"}
    assert f"{settings.MAX_TRIP_DAYS} days" in result.errors[0].reason


def test_trip_at_limit_allowed(monkeypatch):
    from config.settings import settings

    monkeypatch.setattr(settings, "MAX_TRIP_DAYS", 10)

    assert validate_trip_request(_payload(start_date="2024-06-01", end_date="2024-06-11")).success
    assert not validate_trip_request(_payload(start_date="2024-06-01", end_date="2024-06-12")).success
