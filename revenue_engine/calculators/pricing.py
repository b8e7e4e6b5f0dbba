"""
Pricing Strategies

Turn benchmark market prices plus quality and location signals into the
effective unit prices a well's production is valued at.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from ..models import ZERO, LocationFactors, MarketData, PricingResult, QualityAdjustments
from ..money import to_decimal


class PricingStrategy(ABC):
    """Interface shared by all pricing strategies."""

    PRICING_METHOD = ""

    @abstractmethod
    def calculate_price(
        self,
        market: MarketData,
        quality: QualityAdjustments,
        location: LocationFactors,
        volumes: dict,
    ) -> PricingResult:
        """Price oil and gas. `volumes` holds optional "oil" and "gas" keys."""

    def get_pricing_method(self) -> str:
        return self.PRICING_METHOD

    @staticmethod
    def _value(volumes: dict, oil_price: Decimal, gas_price: Decimal) -> Decimal:
        oil = to_decimal(volumes.get("oil") or 0, "oil")
        gas = to_decimal(volumes.get("gas") or 0, "gas")
        return oil * oil_price + gas * gas_price

    def _result(self, oil_price: Decimal, gas_price: Decimal, total_value: Decimal, adjustments: dict) -> PricingResult:
        return PricingResult(
            oil_price=oil_price,
            gas_price=gas_price,
            total_value=total_value,
            adjustments=adjustments,
            pricing_method=self.get_pricing_method(),
        )


class StandardMarketPricingStrategy(PricingStrategy):
    """Base market price plus the region premium."""

    PRICING_METHOD = "STANDARD_MARKET"

    def calculate_price(self, market, quality, location, volumes) -> PricingResult:
        region_premium = location.region_premium or ZERO
        oil_price = market.oil_base_price + region_premium
        gas_price = market.gas_base_price + region_premium
        return self._result(
            oil_price,
            gas_price,
            self._value(volumes, oil_price, gas_price),
            {"region_premium": region_premium},
        )


class QualityAdjustedPricingStrategy(PricingStrategy):
    """Adjusts for API gravity, sulfur content and gas heat content."""

    PRICING_METHOD = "QUALITY_ADJUSTED"

    REFERENCE_GRAVITY = Decimal("37")
    GRAVITY_ADJUSTMENT_PER_DEGREE = Decimal("0.25")
    SWEET_SULFUR_THRESHOLD = Decimal("0.5")
    SWEET_CRUDE_ADJUSTMENT = Decimal("1.00")
    SOUR_CRUDE_ADJUSTMENT = Decimal("-2.00")
    REFERENCE_BTU = Decimal("1030")
    BTU_STEP = Decimal("50")
    BTU_ADJUSTMENT_PER_STEP = Decimal("0.10")

    def calculate_price(self, market, quality, location, volumes) -> PricingResult:
        oil_adjustment = ZERO
        if quality.oil_gravity:
            oil_adjustment += (quality.oil_gravity - self.REFERENCE_GRAVITY) * self.GRAVITY_ADJUSTMENT_PER_DEGREE
        if quality.sulfur_content:
            if quality.sulfur_content > self.SWEET_SULFUR_THRESHOLD:
                oil_adjustment += self.SOUR_CRUDE_ADJUSTMENT
            else:
                oil_adjustment += self.SWEET_CRUDE_ADJUSTMENT

        gas_adjustment = ZERO
        if quality.gas_heat_content:
            gas_adjustment += (
                (quality.gas_heat_content - self.REFERENCE_BTU) / self.BTU_STEP
            ) * self.BTU_ADJUSTMENT_PER_STEP

        transportation_cost = quality.transportation_cost or ZERO
        processing_cost = quality.processing_cost or ZERO

        oil_price = market.oil_base_price + oil_adjustment - transportation_cost
        gas_price = market.gas_base_price + gas_adjustment - transportation_cost
        total_value = self._value(volumes, oil_price, gas_price) - processing_cost

        return self._result(oil_price, gas_price, total_value, {
            "oil_quality_adjustment": oil_adjustment,
            "gas_quality_adjustment": gas_adjustment,
            "transportation_cost": -transportation_cost,
            "processing_cost": -processing_cost,
        })


class LocationBasedPricingStrategy(PricingStrategy):
    """Region premium and transportation differential, less the market access penalty."""

    PRICING_METHOD = "LOCATION_BASED"

    def calculate_price(self, market, quality, location, volumes) -> PricingResult:
        region_premium = location.region_premium or ZERO
        transportation_differential = location.transportation_differential or ZERO
        market_access_penalty = location.market_access_penalty or ZERO

        location_adjustment = region_premium + transportation_differential - market_access_penalty
        oil_price = market.oil_base_price + location_adjustment
        gas_price = market.gas_base_price + location_adjustment

        return self._result(oil_price, gas_price, self._value(volumes, oil_price, gas_price), {
            "region_premium": region_premium,
            "transportation_differential": transportation_differential,
            "market_access_penalty": -market_access_penalty,
            "total_location_adjustment": location_adjustment,
        })


class PremiumPricingStrategy(PricingStrategy):
    """Multiplier pricing for high-quality, well-located resources."""

    PRICING_METHOD = "PREMIUM_PRICING"

    BASE_PREMIUM = Decimal("0.15")
    LIGHT_CRUDE_BONUS = Decimal("0.05")
    SWEET_CRUDE_BONUS = Decimal("0.05")
    LIGHT_CRUDE_GRAVITY = Decimal("40")
    SWEET_CRUDE_SULFUR = Decimal("0.3")

    def calculate_price(self, market, quality, location, volumes) -> PricingResult:
        quality_bonus = ZERO
        if quality.oil_gravity and quality.oil_gravity > self.LIGHT_CRUDE_GRAVITY:
            quality_bonus += self.LIGHT_CRUDE_BONUS
        if quality.sulfur_content and quality.sulfur_content < self.SWEET_CRUDE_SULFUR:
            quality_bonus += self.SWEET_CRUDE_BONUS

        total_premium = 1 + self.BASE_PREMIUM + quality_bonus
        oil_price = market.oil_base_price * total_premium
        gas_price = market.gas_base_price * total_premium

        return self._result(oil_price, gas_price, self._value(volumes, oil_price, gas_price), {
            "base_premium": self.BASE_PREMIUM,
            "quality_bonus": quality_bonus,
            "total_premium": total_premium,
        })


class DiscountedPricingStrategy(PricingStrategy):
    """
    Discount for heavy or sour crude and poor market access.

    The discount factor never drops below MINIMUM_FACTOR, so production is
    never valued under 60% of the market price.
    """

    PRICING_METHOD = "DISCOUNTED_PRICING"

    HEAVY_CRUDE_GRAVITY = Decimal("30")
    HEAVY_CRUDE_DISCOUNT = Decimal("0.10")
    SOUR_CRUDE_SULFUR = Decimal("1.0")
    SOUR_CRUDE_DISCOUNT = Decimal("0.05")
    POOR_ACCESS_PENALTY = Decimal("5")
    POOR_ACCESS_DISCOUNT = Decimal("0.08")
    MINIMUM_FACTOR = Decimal("0.60")

    def calculate_price(self, market, quality, location, volumes) -> PricingResult:
        discount_factor = Decimal("1.0")
        if quality.oil_gravity and quality.oil_gravity < self.HEAVY_CRUDE_GRAVITY:
            discount_factor -= self.HEAVY_CRUDE_DISCOUNT
        if quality.sulfur_content and quality.sulfur_content > self.SOUR_CRUDE_SULFUR:
            discount_factor -= self.SOUR_CRUDE_DISCOUNT
        if location.market_access_penalty and location.market_access_penalty > self.POOR_ACCESS_PENALTY:
            discount_factor -= self.POOR_ACCESS_DISCOUNT

        discount_factor = max(discount_factor, self.MINIMUM_FACTOR)

        oil_price = market.oil_base_price * discount_factor
        gas_price = market.gas_base_price * discount_factor

        return self._result(oil_price, gas_price, self._value(volumes, oil_price, gas_price), {
            "discount_factor": discount_factor,
            "final_discount": 1 - discount_factor,
        })
