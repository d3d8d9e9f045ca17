"""Tests for pure helpers: money formatting, lead value, month window, schemas."""

from datetime import datetime

import pydantic
import pytest

from realty_crm.core.security import create_access_token, decode_access_token
from realty_crm.core.exceptions import AuthenticationError
from realty_crm.models.customer import Customer
from realty_crm.models.property import PropertyType
from realty_crm.schemas.customer import Budget
from realty_crm.schemas.property import PropertyCreate, PropertyUpdate
from realty_crm.schemas.task import TaskUpdate
from realty_crm.schemas.user import UserRegister
from realty_crm.services.dashboard import _month_window
from realty_crm.services.notifications import format_amount, is_high_value


@pytest.mark.unit
def test_format_amount_uses_currency_and_grouping():
    assert format_amount(1_250_000) == "৳1,250,000"
    assert format_amount(None) == "৳0"


@pytest.mark.unit
@pytest.mark.parametrize(
    "budget_max, expected",
    [(500_000, True), (750_000, True), (499_999.99, False), (0, False), (None, False)],
)
def test_high_value_threshold_is_inclusive(budget_max, expected):
    assert is_high_value(Customer(budget_max=budget_max)) is expected


@pytest.mark.unit
def test_month_window_spans_year_boundary():
    window = _month_window(datetime(2026, 2, 15), 6)
    assert window == [(2025, 9), (2025, 10), (2025, 11), (2025, 12), (2026, 1), (2026, 2)]


@pytest.mark.unit
def test_property_type_is_case_insensitive():
    prop = PropertyCreate(
        name="Lake View", price=100, location="Gulshan", square_feet=900, type="Apartment"
    )
    assert prop.property_type == PropertyType.APARTMENT
    assert PropertyType("HOUSE") == PropertyType.HOUSE


@pytest.mark.unit
def test_budget_rejects_inverted_range():
    with pytest.raises(pydantic.ValidationError):
        Budget(min=10, max=5)
    assert Budget(min=10, max=0).min == 10


@pytest.mark.unit
def test_registration_lowercases_email():
    user = UserRegister(name="Rafi", email="Rafi.Khan@RealtyCRM.com", password="secret123")
    assert user.email == "rafi.khan@realtycrm.com"


@pytest.mark.unit
def test_access_token_round_trip_and_tampering():
    token = create_access_token({"sub": "abc", "role": "agent"})
    assert decode_access_token(token)["sub"] == "abc"

    with pytest.raises(AuthenticationError):
        decode_access_token(token + "x")


@pytest.mark.unit
def test_update_schemas_reject_nulls_only_for_required_columns():
    assert TaskUpdate(description=None).model_dump(exclude_unset=True) == {"description": None}
    assert TaskUpdate().model_dump(exclude_unset=True) == {}

    with pytest.raises(pydantic.ValidationError, match="title"):
        TaskUpdate(title=None)
    with pytest.raises(pydantic.ValidationError, match="property_type"):
        PropertyUpdate.model_validate({"type": None})
