"""
Unit Tests for Pricing Strategies

Market: WTI $75.00/bbl, Henry Hub $3.00/MCF. Volumes: 100 bbl, 1,000 MCF.
"""

from decimal import Decimal

import pytest

from revenue_engine.calculators import (
    DiscountedPricingStrategy,
    LocationBasedPricingStrategy,
    PremiumPricingStrategy,
    PricingStrategyFactory,
    QualityAdjustedPricingStrategy,
    StandardMarketPricingStrategy,
)
from revenue_engine.errors import UnknownStrategyError
from revenue_engine.models import LocationFactors, MarketData, QualityAdjustments

VOLUMES = {"oil": Decimal("100"), "gas": Decimal("1000")}


@pytest.fixture
def market():
    return MarketData(oil_base_price=Decimal("75.00"), gas_base_price=Decimal("3.00"))


class TestStandardMarketPricing:

    def test_adds_region_premium(self, market):
        location = LocationFactors(region_premium=Decimal("2"))
        result = StandardMarketPricingStrategy().calculate_price(
            market, QualityAdjustments(), location, VOLUMES
        )
        assert result.oil_price == Decimal("77.00")
        assert result.gas_price == Decimal("5.00")
        assert result.total_value == Decimal("12700")
        assert result.pricing_method == "STANDARD_MARKET"

    def test_no_volumes_is_zero_value(self, market):
        result = StandardMarketPricingStrategy().calculate_price(
            market, QualityAdjustments(), LocationFactors(), {}
        )
        assert result.oil_price == Decimal("75.00")
        assert result.total_value == Decimal("0")


class TestQualityAdjustedPricing:

    def test_light_sweet_rich_gas(self, market):
        """
        Oil: (41 − 37) × 0.25 + 1.00 sweet = +2.00, less $1.50 transport
        Gas: (1080 − 1030) / 50 × 0.10 = +0.10, less $1.50 transport
        """
        quality = QualityAdjustments(
            oil_gravity=Decimal("41"),
            sulfur_content=Decimal("0.3"),
            gas_heat_content=Decimal("1080"),
            transportation_cost=Decimal("1.50"),
            processing_cost=Decimal("100"),
        )
        result = QualityAdjustedPricingStrategy().calculate_price(
            market, quality, LocationFactors(), VOLUMES
        )
        assert result.oil_price == Decimal("75.50")
        assert result.gas_price == Decimal("1.60")
        # 100 × 75.50 + 1,000 × 1.60 − 100 processing
        assert result.total_value == Decimal("9050")
        assert result.adjustments["oil_quality_adjustment"] == Decimal("2.00")
        assert result.adjustments["gas_quality_adjustment"] == Decimal("0.10")
        assert result.adjustments["transportation_cost"] == Decimal("-1.50")
        assert result.adjustments["processing_cost"] == Decimal("-100")

    def test_sour_crude_penalty(self, market):
        quality = QualityAdjustments(oil_gravity=Decimal("37"), sulfur_content=Decimal("1.2"))
        result = QualityAdjustedPricingStrategy().calculate_price(
            market, quality, LocationFactors(), VOLUMES
        )
        assert result.oil_price == Decimal("73.00")
        assert result.gas_price == Decimal("3.00")


class TestLocationBasedPricing:

    def test_location_adjustment(self, market):
        location = LocationFactors(
            region_premium=Decimal("2"),
            transportation_differential=Decimal("1.5"),
            market_access_penalty=Decimal("0.5"),
        )
        result = LocationBasedPricingStrategy().calculate_price(
            market, QualityAdjustments(), location, VOLUMES
        )
        assert result.oil_price == Decimal("78.00")
        assert result.gas_price == Decimal("6.00")
        assert result.adjustments["total_location_adjustment"] == Decimal("3.0")
        assert result.adjustments["market_access_penalty"] == Decimal("-0.5")


class TestPremiumPricing:

    def test_full_premium(self, market):
        """1 + 0.15 base + 0.05 light + 0.05 sweet = 1.25"""
        quality = QualityAdjustments(oil_gravity=Decimal("42"), sulfur_content=Decimal("0.2"))
        result = PremiumPricingStrategy().calculate_price(
            market, quality, LocationFactors(region_premium=Decimal("3")), VOLUMES
        )
        assert result.adjustments["total_premium"] == Decimal("1.25")
        assert result.oil_price == Decimal("93.75")
        assert result.gas_price == Decimal("3.75")

    def test_base_premium_only(self, market):
        quality = QualityAdjustments(oil_gravity=Decimal("39"))
        result = PremiumPricingStrategy().calculate_price(market, quality, LocationFactors(), VOLUMES)
        assert result.oil_price == Decimal("86.25")


class TestDiscountedPricing:

    def test_all_discounts(self, market):
        """1.0 − 0.10 heavy − 0.05 sour − 0.08 poor access = 0.77"""
        quality = QualityAdjustments(oil_gravity=Decimal("28"), sulfur_content=Decimal("1.5"))
        location = LocationFactors(market_access_penalty=Decimal("6"))
        result = DiscountedPricingStrategy().calculate_price(market, quality, location, VOLUMES)
        assert result.adjustments["discount_factor"] == Decimal("0.77")
        assert result.adjustments["final_discount"] == Decimal("0.23")
        assert result.oil_price == Decimal("57.75")
        assert result.gas_price == Decimal("2.31")

    def test_factor_never_below_minimum(self, market):
        class SteepDiscount(DiscountedPricingStrategy):
            HEAVY_CRUDE_DISCOUNT = Decimal("0.50")

        quality = QualityAdjustments(oil_gravity=Decimal("20"), sulfur_content=Decimal("3"))
        location = LocationFactors(market_access_penalty=Decimal("10"))
        result = SteepDiscount().calculate_price(market, quality, location, VOLUMES)
        assert result.adjustments["discount_factor"] == Decimal("0.60")
        assert result.oil_price == Decimal("45.00")
        assert result.oil_price >= market.oil_base_price * Decimal("0.60")

    def test_no_discount_signals(self, market):
        result = DiscountedPricingStrategy().calculate_price(
            market, QualityAdjustments(), LocationFactors(), VOLUMES
        )
        assert result.oil_price == Decimal("75.00")


class TestPricingStrategyFactory:

    def test_create_by_tag(self):
        assert isinstance(PricingStrategyFactory.create_strategy("premium"), PremiumPricingStrategy)

    def test_unknown_tag(self):
        with pytest.raises(UnknownStrategyError, match="Unknown pricing strategy: SPOT"):
            PricingStrategyFactory.create_strategy("SPOT")

    @pytest.mark.parametrize("quality,location,expected", [
        # high quality and well located
        ({"oil_gravity": 40}, {"region_premium": 2}, PremiumPricingStrategy),
        ({"sulfur_content": "0.3"}, {"region_premium": 1, "market_access_penalty": 1}, PremiumPricingStrategy),
        # high quality but access penalty too large for premium
        ({"oil_gravity": 40}, {"region_premium": 2, "market_access_penalty": 3}, QualityAdjustedPricingStrategy),
        # poor quality or poor location
        ({"oil_gravity": 30}, {}, DiscountedPricingStrategy),
        ({"sulfur_content": "1.5"}, {"region_premium": 2}, DiscountedPricingStrategy),
        ({}, {"market_access_penalty": 6}, DiscountedPricingStrategy),
        # middling quality signal
        ({"oil_gravity": 35}, {}, QualityAdjustedPricingStrategy),
        ({"gas_heat_content": 1050}, {}, QualityAdjustedPricingStrategy),
        # location signal only
        ({}, {"region_premium": 2}, LocationBasedPricingStrategy),
        ({}, {"transportation_differential": "-1.5"}, LocationBasedPricingStrategy),
        # nothing
        ({}, {}, StandardMarketPricingStrategy),
    ])
    def test_create_optimal_strategy(self, quality, location, expected):
        strategy = PricingStrategyFactory.create_optimal_strategy(
            QualityAdjustments.from_dict(quality), LocationFactors.from_dict(location)
        )
        assert isinstance(strategy, expected)

    def test_zero_signal_counts_as_absent(self):
        strategy = PricingStrategyFactory.create_optimal_strategy(
            QualityAdjustments(oil_gravity=Decimal("0")), LocationFactors(region_premium=Decimal("0"))
        )
        assert isinstance(strategy, StandardMarketPricingStrategy)
