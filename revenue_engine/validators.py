"""
Input Validation for the Revenue Distribution Engine

Validates calculation inputs and proposed revenue breakdowns before anything
is computed or mutated. Raises InputValidationError with the offending field,
or NegativeNetRevenueError for a breakdown that would pay out less than zero.
"""

from datetime import date, datetime
from decimal import Decimal

from .errors import InputValidationError, NegativeNetRevenueError
from .models import PAYMENT_METHODS, LeaseData, MarketData, ProductionData, RevenueBreakdown
from .money import to_decimal

# Largest allowed gap between net revenue and total revenue less deductions
NET_REVENUE_TOLERANCE = Decimal("0.01")


class InputValidator:
    """Validates engine inputs according to business rules."""

    def validate_lease(self, lease: LeaseData) -> None:
        # Fractions above 1 are tolerated for override scenarios; negatives are not
        for name in ("royalty_rate", "working_interest", "net_revenue_interest", "acreage"):
            self._non_negative(getattr(lease, name), name)

        for name in ("operating_expenses", "lease_bonus"):
            value = getattr(lease, name)
            if value is not None:
                self._non_negative(value, name)

    def validate_production(self, production: ProductionData) -> None:
        for name in ("oil_volume", "gas_volume", "water_volume", "oil_price", "gas_price"):
            value = getattr(production, name)
            if value is not None:
                self._non_negative(value, name)

    def validate_market(self, market: MarketData, volumes: dict) -> None:
        for name in ("oil_base_price", "gas_base_price"):
            self._non_negative(getattr(market, name), name)

        for key in ("oil", "gas"):
            value = volumes.get(key)
            if value is not None:
                self._non_negative(value, key, label=f"{key} volume")

    @staticmethod
    def _non_negative(value, field: str, label: str | None = None) -> Decimal:
        number = to_decimal(value, field)
        if number < 0:
            raise InputValidationError(f"{label or field} cannot be negative, got: {value}", field=field)
        return number

    def validate_breakdown(self, breakdown: RevenueBreakdown) -> None:
        """
        Check the revenue breakdown rules.

        total >= 0, net >= 0, net <= total, every deduction >= 0, one currency,
        and net == total - deductions within NET_REVENUE_TOLERANCE.
        """
        if not isinstance(breakdown, RevenueBreakdown):
            raise InputValidationError("revenue_breakdown is required", field="revenue_breakdown")

        breakdown.check_currency()

        if breakdown.total_revenue.is_negative():
            raise InputValidationError(
                f"total_revenue cannot be negative, got: {breakdown.total_revenue.amount}",
                field="total_revenue",
            )

        if breakdown.net_revenue.is_negative():
            raise NegativeNetRevenueError(breakdown.net_revenue.amount)

        if breakdown.net_revenue > breakdown.total_revenue:
            raise InputValidationError(
                f"net_revenue ({breakdown.net_revenue.amount}) cannot exceed "
                f"total_revenue ({breakdown.total_revenue.amount})",
                field="net_revenue",
            )

        for name, amount in breakdown.deductions().items():
            if amount.is_negative():
                raise InputValidationError(f"{name} cannot be negative, got: {amount.amount}", field=name)

        expected = breakdown.expected_net_revenue()
        if expected.is_negative():
            raise NegativeNetRevenueError(expected.amount)

        if abs(breakdown.net_revenue.amount - expected.amount) > NET_REVENUE_TOLERANCE:
            raise InputValidationError(
                f"net_revenue ({breakdown.net_revenue.amount}) must equal total_revenue less "
                f"deductions ({expected.amount})",
                field="net_revenue",
            )

    def validate_payment(self, check_number: str | None, payment_date: date | None, payment_method: str | None) -> None:
        if not check_number or not str(check_number).strip():
            raise InputValidationError("check_number is required for payment processing", field="check_number")

        if not isinstance(payment_date, date):
            raise InputValidationError("payment_date is required for payment processing", field="payment_date")

        if isinstance(payment_date, datetime):
            payment_date = payment_date.date()

        if payment_date > date.today():
            raise InputValidationError(
                f"payment_date cannot be in the future, got: {payment_date.isoformat()}",
                field="payment_date",
            )

        if payment_method not in PAYMENT_METHODS:
            raise InputValidationError(
                f"Invalid payment_method: {payment_method}. Must be one of {', '.join(PAYMENT_METHODS)}",
                field="payment_method",
            )

    def validate_identifiers(self, **identifiers: str) -> None:
        for name, value in identifiers.items():
            if not value or not str(value).strip():
                raise InputValidationError(f"{name} is required", field=name)
