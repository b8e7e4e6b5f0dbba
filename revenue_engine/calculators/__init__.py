"""
Calculators Package

Payment calculation and pricing strategies, plus the factories that select them.
"""

from .factory import PaymentStrategyFactory, PricingStrategyFactory
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

__all__ = [
    "PaymentCalculationStrategy",
    "RoyaltyPaymentStrategy",
    "WorkingInterestStrategy",
    "NetRevenueInterestStrategy",
    "LeaseBonusStrategy",
    "CompositePaymentStrategy",
    "PaymentStrategyFactory",
    "PricingStrategy",
    "StandardMarketPricingStrategy",
    "QualityAdjustedPricingStrategy",
    "LocationBasedPricingStrategy",
    "PremiumPricingStrategy",
    "DiscountedPricingStrategy",
    "PricingStrategyFactory",
]
