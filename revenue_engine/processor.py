"""
Revenue Engine - Calculation Orchestrator

Runs the pure, synchronous part of the pipeline:
1. Validate inputs
2. Price production (pricing strategy, explicit or auto-selected)
3. Calculate payments (payment strategies, explicit or from lease terms)
4. Assemble a validated RevenueBreakdown
"""

from decimal import Decimal
from typing import Any, Dict

from .calculators import PaymentStrategyFactory, PricingStrategyFactory
from .errors import InputValidationError
from .models import (
    DEDUCTION_FIELDS,
    ZERO,
    LeaseData,
    LocationFactors,
    MarketData,
    PaymentAmount,
    PricingResult,
    ProductionData,
    QualityAdjustments,
    RevenueBreakdown,
)
from .money import DEFAULT_CURRENCY, Money, to_decimal
from .output import OutputBuilder
from .validators import InputValidator


class RevenueEngine:
    """Entry point for payment and pricing calculations."""

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self.currency = currency
        self.validator = InputValidator()
        self.output_builder = OutputBuilder()

    def calculate_payment(
        self,
        lease: LeaseData,
        production: ProductionData,
        strategy_types: list[str] | str | None = None,
    ) -> PaymentAmount:
        """
        Calculate an owner payment.

        With explicit strategy tags those strategies are used (several tags
        form a composite). Without tags the strategies are picked from the
        lease terms and production.
        """
        self.validator.validate_lease(lease)
        self.validator.validate_production(production)

        if isinstance(strategy_types, str):
            strategy_types = [strategy_types]
        elif strategy_types is not None and not isinstance(strategy_types, (list, tuple)):
            raise InputValidationError(
                f"strategy_types must be a list of strategy tags, got: {strategy_types!r}",
                field="strategy_types",
            )

        if strategy_types:
            strategy = PaymentStrategyFactory.create_from_types(strategy_types)
        else:
            strategy = PaymentStrategyFactory.create_default_strategy(lease, production)

        result = strategy.calculate(lease, production)
        if result.currency != self.currency:
            result = PaymentAmount(result.amount, result.calculation_type, self.currency, result.breakdown)
        return result

    def calculate_price(
        self,
        market: MarketData,
        quality: QualityAdjustments | None = None,
        location: LocationFactors | None = None,
        volumes: dict | None = None,
        strategy_type: str | None = None,
    ) -> PricingResult:
        """Price production with the named strategy, or the best fit for the signals."""
        quality = quality or QualityAdjustments()
        location = location or LocationFactors()
        volumes = volumes or {}
        self.validator.validate_market(market, volumes)

        if strategy_type:
            strategy = PricingStrategyFactory.create_strategy(strategy_type)
        else:
            strategy = PricingStrategyFactory.create_optimal_strategy(quality, location)

        return strategy.calculate_price(market, quality, location, volumes)

    def build_breakdown(
        self,
        production: ProductionData,
        pricing: PricingResult | None = None,
        deductions: Dict[str, Any] | None = None,
    ) -> RevenueBreakdown:
        """
        Assemble a revenue breakdown from production and optional deductions.

        Unit prices come from `pricing` when given, otherwise from the
        production record. Net revenue is total revenue less the present
        deductions.
        """
        self.validator.validate_production(production)
        deductions = deductions or {}
        unknown = set(deductions) - set(DEDUCTION_FIELDS)
        if unknown:
            raise InputValidationError(
                f"Unknown deduction(s): {', '.join(sorted(unknown))}", field="deductions"
            )

        oil_price = pricing.oil_price if pricing else (production.oil_price or ZERO)
        gas_price = pricing.gas_price if pricing else (production.gas_price or ZERO)

        oil_revenue = self._money((production.oil_volume or ZERO) * oil_price)
        gas_revenue = self._money((production.gas_volume or ZERO) * gas_price)
        total_revenue = oil_revenue.add(gas_revenue)

        deduction_amounts = {
            name: self._money(to_decimal(value, name))
            for name, value in deductions.items()
            if value is not None
        }
        net_revenue = total_revenue
        for amount in deduction_amounts.values():
            net_revenue = net_revenue.subtract(amount)

        breakdown = RevenueBreakdown(
            total_revenue=total_revenue,
            net_revenue=net_revenue,
            oil_revenue=oil_revenue if production.oil_volume is not None else None,
            gas_revenue=gas_revenue if production.gas_volume is not None else None,
            **deduction_amounts,
        )
        self.validator.validate_breakdown(breakdown)
        return breakdown

    def _money(self, amount: Decimal) -> Money:
        return Money(amount, self.currency)

    # -------------------------------------------------------------------------
    # Dictionary API (HTTP entry points)
    # -------------------------------------------------------------------------

    def calculate_payment_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        lease = LeaseData.from_dict(data["lease"])
        production = ProductionData.from_dict(data.get("production", {}))
        strategy_types = data.get("strategy_types") or None
        result = self.calculate_payment(lease, production, strategy_types)
        return self.output_builder.payment(result)

    def calculate_price_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        market = MarketData.from_dict(data["market"])
        quality = QualityAdjustments.from_dict(data.get("quality"))
        location = LocationFactors.from_dict(data.get("location"))
        volumes = data.get("volumes") or {}
        result = self.calculate_price(market, quality, location, volumes, data.get("strategy_type"))
        return self.output_builder.pricing(result)
