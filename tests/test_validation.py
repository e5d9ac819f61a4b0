import pytest

from mechanic_shop_api.app.core import validation
from mechanic_shop_api.app.core.config import settings
from mechanic_shop_api.app.core.exceptions import ValidationError


@pytest.mark.parametrize("phone", ["555-123-4567", "(555)123-4567", "+555 123-4567"])
def test_phone_accepts_both_layouts(phone):
    assert validation.validate_phone(phone) == phone


@pytest.mark.parametrize("phone", ["5551234567", "555-1234-567", "(555)123-456A", ""])
def test_phone_rejects_malformed(phone):
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_phone(phone)
    assert exc_info.value.field == "phone"


def test_names_are_trimmed_and_bounded():
    assert validation.validate_name("fname", "  Jane ") == "Jane"
    assert validation.validate_name("fname", "x" * 32) == "x" * 32
    with pytest.raises(ValidationError):
        validation.validate_name("fname", "x" * 33)
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_name("lname", "   ")
    assert exc_info.value.field == "lname"
    assert exc_info.value.reason == "must not be empty"


def test_address_limit():
    assert validation.validate_address("a" * 256) == "a" * 256
    with pytest.raises(ValidationError):
        validation.validate_address("a" * 257)


def test_vin_is_upper_cased():
    assert validation.validate_vin("1hgcm82633a12345") == "1HGCM82633A12345"


@pytest.mark.parametrize("vin", ["1HGCM82633A1234", "1HGCM82633A123456", "1HGCM82633A1234-"])
def test_vin_rejects_bad_length_or_characters(vin):
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_vin(vin)
    assert exc_info.value.field == "vin"


def test_strict_vin_requires_letters_then_digits(monkeypatch):
    monkeypatch.setattr(settings, "strict_vin", True)
    assert validation.validate_vin("ABCDEF1234567890") == "ABCDEF1234567890"
    with pytest.raises(ValidationError):
        validation.validate_vin("1HGCM82633A12345")


def test_year_respects_configured_maximum(monkeypatch):
    assert validation.validate_year(2021) == 2021
    with pytest.raises(ValidationError):
        validation.validate_year(2022)
    with pytest.raises(ValidationError):
        validation.validate_year(0)
    monkeypatch.setattr(settings, "max_car_year", 2030)
    assert validation.validate_year(2025) == 2025


def test_numeric_ranges():
    assert validation.validate_odometer(0) == 0
    assert validation.validate_odometer(9_999_999) == 9_999_999
    with pytest.raises(ValidationError):
        validation.validate_odometer(10_000_000)
    with pytest.raises(ValidationError):
        validation.validate_odometer(-1)
    assert validation.validate_experience(99) == 99
    with pytest.raises(ValidationError):
        validation.validate_experience(0)
    assert validation.validate_bill(0) == 0
    with pytest.raises(ValidationError):
        validation.validate_bill(-5)
    with pytest.raises(ValidationError):
        validation.validate_positive("k", 0)


def test_integers_must_be_integers():
    with pytest.raises(ValidationError):
        validation.validate_bill(True)
    with pytest.raises(ValidationError):
        validation.validate_odometer(None)


def test_comment_and_complaint():
    assert validation.validate_complaint(None) == ""
    assert validation.validate_complaint(" rattles ") == "rattles"
    assert validation.validate_comment("replaced pads") == "replaced pads"
    with pytest.raises(ValidationError) as exc_info:
        validation.validate_comment("  ")
    assert exc_info.value.field == "comment"
