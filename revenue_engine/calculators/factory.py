"""
Strategy Factories

Registries mapping string tags to strategy constructors. Unknown tags fail
loudly with UnknownStrategyError.
"""

from decimal import Decimal

from ..errors import UnknownStrategyError
from ..models import LeaseData, LocationFactors, ProductionData, QualityAdjustments
from .payment import (
    CompositePaymentStrategy,
    LeaseBonusStrategy,
    NetRevenueInterestStrategy,
    PaymentCalculationStrategy,
    RoyaltyPaymentStrategy,
    WorkingInterestStrategy,
)
from .pricing import (
    DiscountedPricingStrategy,
    LocationBasedPricingStrategy,
    PremiumPricingStrategy,
    PricingStrategy,
    QualityAdjustedPricingStrategy,
    StandardMarketPricingStrategy,
)


class PaymentStrategyFactory:
    """Builds payment strategies by tag or from a lease's own terms."""

    STRATEGIES = {
        "ROYALTY": RoyaltyPaymentStrategy,
        "WORKING_INTEREST": WorkingInterestStrategy,
        "NET_REVENUE_INTEREST": NetRevenueInterestStrategy,
        "LEASE_BONUS": LeaseBonusStrategy,
    }

    # Lease term that gates each strategy when production is not known yet
    LEASE_TERMS = {
        "ROYALTY": "royalty_rate",
        "WORKING_INTEREST": "working_interest",
        "NET_REVENUE_INTEREST": "net_revenue_interest",
        "LEASE_BONUS": "lease_bonus",
    }

    @classmethod
    def create_strategy(cls, strategy_type: str) -> PaymentCalculationStrategy:
        strategy_class = cls.STRATEGIES.get(str(strategy_type).strip().upper())
        if strategy_class is None:
            raise UnknownStrategyError("payment calculation", strategy_type)
        return strategy_class()

    @classmethod
    def create_composite_strategy(cls, strategy_types: list[str]) -> CompositePaymentStrategy:
        return CompositePaymentStrategy([cls.create_strategy(t) for t in strategy_types])

    @classmethod
    def create_from_types(cls, strategy_types: list[str]) -> PaymentCalculationStrategy:
        """One tag gives that strategy, several give a composite."""
        if len(strategy_types) == 1:
            return cls.create_strategy(strategy_types[0])
        return cls.create_composite_strategy(strategy_types)

    @classmethod
    def available_strategies(cls) -> list[str]:
        return list(cls.STRATEGIES)

    @classmethod
    def create_default_strategy(
        cls,
        lease: LeaseData,
        production: ProductionData | None = None,
    ) -> PaymentCalculationStrategy:
        """
        Pick every strategy whose applicability gate passes for this lease.

        Falls back to royalty when none pass. More than one match is wrapped
        in a composite, in registry order.
        """
        strategies = []
        for tag, strategy_class in cls.STRATEGIES.items():
            strategy = strategy_class()
            if production is None:
                applicable = (getattr(lease, cls.LEASE_TERMS[tag]) or 0) > 0
            else:
                applicable = strategy.is_applicable(lease, production)
            if applicable:
                strategies.append(strategy)

        if not strategies:
            strategies.append(RoyaltyPaymentStrategy())

        if len(strategies) == 1:
            return strategies[0]
        return CompositePaymentStrategy(strategies)


class PricingStrategyFactory:
    """Builds pricing strategies by tag or from quality and location signals."""

    STRATEGIES = {
        "STANDARD": StandardMarketPricingStrategy,
        "QUALITY_ADJUSTED": QualityAdjustedPricingStrategy,
        "LOCATION_BASED": LocationBasedPricingStrategy,
        "PREMIUM": PremiumPricingStrategy,
        "DISCOUNTED": DiscountedPricingStrategy,
    }

    HIGH_QUALITY_GRAVITY = Decimal("38")
    HIGH_QUALITY_SULFUR = Decimal("0.5")
    POOR_QUALITY_GRAVITY = Decimal("32")
    POOR_QUALITY_SULFUR = Decimal("1.0")
    WELL_LOCATED_MAX_PENALTY = Decimal("2")
    POOR_LOCATION_PENALTY = Decimal("5")

    @classmethod
    def create_strategy(cls, strategy_type: str) -> PricingStrategy:
        strategy_class = cls.STRATEGIES.get(str(strategy_type).strip().upper())
        if strategy_class is None:
            raise UnknownStrategyError("pricing", strategy_type)
        return strategy_class()

    @classmethod
    def available_strategies(cls) -> list[str]:
        return list(cls.STRATEGIES)

    @classmethod
    def create_optimal_strategy(cls, quality: QualityAdjustments, location: LocationFactors) -> PricingStrategy:
        """
        Select a strategy from quality and location signals.

        Precedence is fixed: premium (high quality and well located), then
        discounted (poor quality or poor location), then quality-adjusted,
        then location-based, then standard. A zero signal counts as absent.
        """
        gravity = quality.oil_gravity
        sulfur = quality.sulfur_content
        premium = location.region_premium
        penalty = location.market_access_penalty

        is_high_quality = bool(
            (gravity and gravity > cls.HIGH_QUALITY_GRAVITY)
            or (sulfur and sulfur < cls.HIGH_QUALITY_SULFUR)
        )
        is_well_located = bool(
            premium and premium > 0
            and (not penalty or penalty < cls.WELL_LOCATED_MAX_PENALTY)
        )
        if is_high_quality and is_well_located:
            return PremiumPricingStrategy()

        is_poor_quality = bool(
            (gravity and gravity < cls.POOR_QUALITY_GRAVITY)
            or (sulfur and sulfur > cls.POOR_QUALITY_SULFUR)
        )
        is_poor_location = bool(penalty and penalty > cls.POOR_LOCATION_PENALTY)
        if is_poor_quality or is_poor_location:
            return DiscountedPricingStrategy()

        if quality.has_quality_signal():
            return QualityAdjustedPricingStrategy()

        if location.has_location_signal():
            return LocationBasedPricingStrategy()

        return StandardMarketPricingStrategy()
