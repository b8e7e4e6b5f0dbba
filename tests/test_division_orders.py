"""
Unit Tests for Division Orders and the interest-sum check
"""

from datetime import date
from decimal import Decimal

import pytest

from revenue_engine.division_orders import (
    INTEREST_TOLERANCE,
    DivisionOrder,
    DivisionOrderInterest,
    DivisionOrderInterestValidator,
)
from revenue_engine.errors import DivisionOrderImbalanceError, InputValidationError


def interests(*values):
    return [DivisionOrderInterest(f"P{i}", Decimal(v)) for i, v in enumerate(values, start=1)]


class TestInterestValidator:

    @pytest.fixture
    def validator(self):
        return DivisionOrderInterestValidator()

    def test_tolerance_constant(self, validator):
        assert validator.tolerance == INTEREST_TOLERANCE == Decimal("0.000001")

    def test_exact_sum_is_valid(self, validator):
        result = validator.validate(interests("0.5", "0.3", "0.2"), well_id="W1")
        assert result.valid
        assert result.total == Decimal("1.0")
        assert result.difference == Decimal("0")

    def test_thirds_within_tolerance(self, validator):
        """0.33333333 × 2 + 0.33333334 = 1.00000000"""
        result = validator.validate(interests("0.33333333", "0.33333333", "0.33333334"))
        assert result.valid

    def test_boundary_is_inclusive(self, validator):
        assert validator.validate(interests("0.5", "0.500001")).valid
        assert validator.validate(interests("0.5", "0.499999")).valid

    def test_just_outside_tolerance(self, validator):
        result = validator.validate(interests("0.5", "0.5000011"))
        assert not result.valid
        assert result.difference == Decimal("0.0000011")

    def test_under_allocated(self, validator):
        result = validator.validate(interests("0.5", "0.3"), well_id="W1")
        assert not result.valid
        assert result.total == Decimal("0.8")

    def test_empty_set_is_invalid(self, validator):
        result = validator.validate([])
        assert not result.valid
        assert result.total == Decimal("0")

    def test_raise_for_imbalance(self, validator):
        result = validator.validate(interests("0.9"), well_id="W1")
        with pytest.raises(DivisionOrderImbalanceError, match="well W1"):
            result.raise_for_imbalance()

    def test_raise_for_imbalance_noop_when_valid(self, validator):
        validator.validate(interests("1")).raise_for_imbalance()

    def test_to_dict(self, validator):
        result = validator.validate(interests("0.75", "0.25"), well_id="W1", as_of=date(2024, 3, 31))
        data = result.to_dict()
        assert data["valid"] is True
        assert data["sum"] == 1.0
        assert data["as_of"] == "2024-03-31"
        assert [e["partner_id"] for e in data["entries"]] == ["P1", "P2"]

    def test_custom_tolerance(self):
        validator = DivisionOrderInterestValidator(tolerance=Decimal("0.01"))
        assert validator.validate(interests("0.995")).valid


class TestDivisionOrder:

    def test_effective_window(self):
        order = DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 1, 1), end_date=date(2024, 6, 30))
        assert not order.is_effective_on(date(2023, 12, 31))
        assert order.is_effective_on(date(2024, 1, 1))
        assert order.is_effective_on(date(2024, 6, 30))
        assert not order.is_effective_on(date(2024, 7, 1))

    def test_open_ended(self):
        order = DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 1, 1))
        assert order.is_effective_on(date(2030, 1, 1))

    def test_inactive_never_effective(self):
        order = DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 1, 1), is_active=False)
        assert not order.is_effective_on(date(2024, 3, 1))

    @pytest.mark.parametrize("interest", ["0", "1.0000001", "-0.5"])
    def test_interest_bounds(self, interest):
        with pytest.raises(InputValidationError):
            DivisionOrder("W1", "P1", Decimal(interest), date(2024, 1, 1))

    def test_coerces_interest_to_decimal(self):
        order = DivisionOrder("W1", "P1", "0.125", date(2024, 1, 1))
        assert order.decimal_interest == Decimal("0.125")

    def test_end_date_after_effective_date(self):
        with pytest.raises(InputValidationError, match="end_date"):
            DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 1, 1), end_date=date(2024, 1, 1))

    def test_overlaps(self):
        first = DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 1, 1), end_date=date(2024, 6, 30))
        second = DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 6, 1))
        later = DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 7, 1))
        other_partner = DivisionOrder("W1", "P2", Decimal("0.5"), date(2024, 1, 1))
        assert first.overlaps_with(second)
        assert not first.overlaps_with(later)
        assert not first.overlaps_with(other_partner)

    def test_interest_from_order(self):
        order = DivisionOrder("W1", "P1", Decimal("0.5"), date(2024, 1, 1), id="DO-1")
        entry = DivisionOrderInterest.from_division_order(order)
        assert entry == DivisionOrderInterest("P1", Decimal("0.5"), "DO-1")

    def test_from_dict(self):
        order = DivisionOrder.from_dict({
            "id": "DO-7",
            "well_id": "W1",
            "partner_id": "P1",
            "decimal_interest": "0.1875",
            "effective_date": "2024-01-01",
            "end_date": "2024-12-31",
        })
        assert order.decimal_interest == Decimal("0.1875")
        assert order.end_date == date(2024, 12, 31)
        assert order.to_dict()["effective_date"] == "2024-01-01"

    def test_from_dict_bad_date(self):
        with pytest.raises(InputValidationError, match="effective_date"):
            DivisionOrder.from_dict({
                "well_id": "W1", "partner_id": "P1", "decimal_interest": 1, "effective_date": "soon",
            })
