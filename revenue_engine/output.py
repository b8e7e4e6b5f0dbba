"""
Output Builder

Turns engine results into JSON-ready dictionaries. Money is rendered as a
float rounded to cents; rounding happens here and nowhere upstream.
"""

from datetime import date, datetime
from decimal import Decimal

from .distribution import RevenueDistribution
from .models import PaymentAmount, PricingResult, RevenueBreakdown
from .money import Money, quantize_money


def to_money(value) -> float | None:
    """Convert Decimal or Money to float with 2 decimal places."""
    if value is None:
        return None
    if isinstance(value, Money):
        value = value.amount
    return float(quantize_money(Decimal(str(value))))


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"${to_money(value):,.2f}"


def _pct(value: Decimal) -> str:
    return f"{float(value) * 100:.2f}%"


def _plain(value):
    """Decimals to floats, nested results to dicts."""
    if isinstance(value, PaymentAmount):
        return OutputBuilder().payment(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class OutputBuilder:
    """Builds API responses."""

    def payment(self, result: PaymentAmount) -> dict:
        return {
            "amount": to_money(result.amount),
            "currency": result.currency,
            "calculation_type": result.calculation_type,
            "description": self._describe_payment(result),
            "breakdown": _plain(result.breakdown),
        }

    def pricing(self, result: PricingResult) -> dict:
        return {
            "oil_price": float(result.oil_price),
            "gas_price": float(result.gas_price),
            "total_value": to_money(result.total_value),
            "pricing_method": result.pricing_method,
            "adjustments": _plain(result.adjustments),
        }

    def breakdown(self, breakdown: RevenueBreakdown) -> dict:
        return {
            "currency": breakdown.currency,
            "oil_revenue": to_money(breakdown.oil_revenue),
            "gas_revenue": to_money(breakdown.gas_revenue),
            "total_revenue": to_money(breakdown.total_revenue),
            "severance_tax": to_money(breakdown.severance_tax),
            "ad_valorem": to_money(breakdown.ad_valorem),
            "transportation_costs": to_money(breakdown.transportation_costs),
            "processing_costs": to_money(breakdown.processing_costs),
            "other_deductions": to_money(breakdown.other_deductions),
            "total_deductions": to_money(breakdown.total_deductions()),
            "net_revenue": to_money(breakdown.net_revenue),
        }

    def distribution(self, distribution: RevenueDistribution) -> dict:
        payment_info = distribution.payment_info
        return {
            "id": distribution.id,
            "organization_id": distribution.organization_id,
            "well_id": distribution.well_id,
            "partner_id": distribution.partner_id,
            "division_order_id": distribution.division_order_id,
            "production_month": distribution.production_month.formatted_string(),
            "production_volumes": distribution.production_volumes.to_dict(),
            "revenue_breakdown": self.breakdown(distribution.revenue_breakdown),
            "payment_info": {
                "check_number": payment_info.check_number,
                "payment_date": payment_info.payment_date.isoformat() if payment_info.payment_date else None,
                "payment_method": payment_info.payment_method,
            },
            "is_paid": distribution.is_paid,
            "status": distribution.status.value,
            "version": distribution.version,
            "created_at": distribution.created_at.isoformat(),
            "updated_at": distribution.updated_at.isoformat(),
        }

    def _describe_payment(self, result: PaymentAmount) -> str:
        b = result.breakdown
        kind = result.calculation_type
        if kind == "ROYALTY_PAYMENT":
            return f"{_pct(b['royalty_rate'])} royalty × {_fmt(b['total_revenue'])} revenue = {_fmt(result.amount)}"
        if kind == "WORKING_INTEREST":
            return (
                f"{_pct(b['working_interest'])} working interest × ({_fmt(b['gross_revenue'])} revenue "
                f"- {_fmt(b['operating_expenses'])} expenses) = {_fmt(result.amount)}"
            )
        if kind == "NET_REVENUE_INTEREST":
            return f"{_pct(b['net_revenue_interest'])} NRI × {_fmt(b['total_revenue'])} revenue = {_fmt(result.amount)}"
        if kind == "LEASE_BONUS":
            return f"{_fmt(b['lease_bonus'])}/acre × {b['acreage']} acres = {_fmt(result.amount)}"
        if kind == "COMPOSITE_PAYMENT":
            parts = " + ".join(b["calculations"]) or "no applicable payments"
            return f"{parts} = {_fmt(result.amount)}"
        return _fmt(result.amount)
