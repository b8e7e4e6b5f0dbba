"""
REVENUE DISTRIBUTION ENGINE

Oil & gas revenue split among royalty and working-interest owners, and the
lifecycle of each owner's monthly distribution.
"""

from .distribution import DistributionStatus, RevenueDistribution
from .division_orders import DivisionOrder, DivisionOrderInterest, DivisionOrderInterestValidator
from .models import (
    LeaseData,
    LocationFactors,
    MarketData,
    PaymentAmount,
    PricingResult,
    ProductionData,
    ProductionVolumes,
    QualityAdjustments,
    RevenueBreakdown,
)
from .money import Money
from .processor import RevenueEngine
from .production_month import ProductionMonth
from .repository import InMemoryDistributionRepository, InMemoryDivisionOrderSource
from .service import DistributionService

__all__ = [
    "RevenueEngine",
    "DistributionService",
    "RevenueDistribution",
    "DistributionStatus",
    "DivisionOrder",
    "DivisionOrderInterest",
    "DivisionOrderInterestValidator",
    "InMemoryDistributionRepository",
    "InMemoryDivisionOrderSource",
    "LeaseData",
    "ProductionData",
    "MarketData",
    "QualityAdjustments",
    "LocationFactors",
    "ProductionVolumes",
    "PaymentAmount",
    "PricingResult",
    "RevenueBreakdown",
    "Money",
    "ProductionMonth",
]
