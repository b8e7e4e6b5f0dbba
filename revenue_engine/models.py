"""
Domain Models for the Revenue Distribution Engine

Dataclasses for the facts the engine consumes (lease terms, production,
market prices) and the results it produces (payment amounts, pricing results,
revenue breakdowns). All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from decimal import Decimal

from .errors import CurrencyMismatchError, InputValidationError
from .money import DEFAULT_CURRENCY, Money, to_decimal

ZERO = Decimal("0")


def _optional_decimal(data: dict, key: str) -> Decimal | None:
    value = data.get(key)
    return to_decimal(value, key) if value is not None else None


def _parse_date(value, field_name: str) -> date | None:
    if value is None or isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        raise InputValidationError(
            f"{field_name} must be an ISO date (YYYY-MM-DD), got: {value!r}", field=field_name
        ) from None


# =============================================================================
# INPUT FACTS
# =============================================================================


@dataclass
class LeaseData:
    """Lease terms for one calculation call. Fractions are decimals (0.125 = 12.5%)."""

    lease_id: str
    royalty_rate: Decimal = ZERO
    working_interest: Decimal = ZERO
    net_revenue_interest: Decimal = ZERO
    acreage: Decimal = ZERO
    operating_expenses: Decimal | None = None
    lease_bonus: Decimal | None = None  # per acre

    @classmethod
    def from_dict(cls, data: dict) -> "LeaseData":
        return cls(
            lease_id=str(data.get("lease_id", data.get("id", ""))),
            royalty_rate=to_decimal(data.get("royalty_rate", 0), "royalty_rate"),
            working_interest=to_decimal(data.get("working_interest", 0), "working_interest"),
            net_revenue_interest=to_decimal(data.get("net_revenue_interest", 0), "net_revenue_interest"),
            acreage=to_decimal(data.get("acreage", 0), "acreage"),
            operating_expenses=_optional_decimal(data, "operating_expenses"),
            lease_bonus=_optional_decimal(data, "lease_bonus"),
        )


@dataclass
class ProductionData:
    """A well's production volumes and unit prices for a period."""

    oil_volume: Decimal | None = None  # barrels
    gas_volume: Decimal | None = None  # MCF
    water_volume: Decimal | None = None  # barrels
    oil_price: Decimal | None = None  # per barrel
    gas_price: Decimal | None = None  # per MCF
    production_date: date | None = None

    @property
    def oil_revenue(self) -> Decimal:
        return (self.oil_volume or ZERO) * (self.oil_price or ZERO)

    @property
    def gas_revenue(self) -> Decimal:
        return (self.gas_volume or ZERO) * (self.gas_price or ZERO)

    @property
    def gross_revenue(self) -> Decimal:
        return self.oil_revenue + self.gas_revenue

    def has_hydrocarbons(self) -> bool:
        return (self.oil_volume or ZERO) > 0 or (self.gas_volume or ZERO) > 0

    @classmethod
    def from_dict(cls, data: dict) -> "ProductionData":
        return cls(
            oil_volume=_optional_decimal(data, "oil_volume"),
            gas_volume=_optional_decimal(data, "gas_volume"),
            water_volume=_optional_decimal(data, "water_volume"),
            oil_price=_optional_decimal(data, "oil_price"),
            gas_price=_optional_decimal(data, "gas_price"),
            production_date=_parse_date(data.get("production_date"), "production_date"),
        )


@dataclass
class MarketData:
    """Benchmark prices: WTI per barrel, Henry Hub per MCF."""

    oil_base_price: Decimal
    gas_base_price: Decimal
    market_date: date | None = None
    exchange_rate: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "MarketData":
        return cls(
            oil_base_price=to_decimal(data["oil_base_price"], "oil_base_price"),
            gas_base_price=to_decimal(data["gas_base_price"], "gas_base_price"),
            market_date=_parse_date(data.get("market_date"), "market_date"),
            exchange_rate=_optional_decimal(data, "exchange_rate"),
        )


@dataclass
class QualityAdjustments:
    """Crude and gas quality signals plus per-unit costs."""

    oil_gravity: Decimal | None = None  # API gravity
    sulfur_content: Decimal | None = None  # percent
    gas_heat_content: Decimal | None = None  # BTU per cubic foot
    transportation_cost: Decimal | None = None
    processing_cost: Decimal | None = None

    def has_quality_signal(self) -> bool:
        return bool(self.oil_gravity or self.sulfur_content or self.gas_heat_content)

    @classmethod
    def from_dict(cls, data: dict | None) -> "QualityAdjustments":
        data = data or {}
        return cls(
            oil_gravity=_optional_decimal(data, "oil_gravity"),
            sulfur_content=_optional_decimal(data, "sulfur_content"),
            gas_heat_content=_optional_decimal(data, "gas_heat_content"),
            transportation_cost=_optional_decimal(data, "transportation_cost"),
            processing_cost=_optional_decimal(data, "processing_cost"),
        )


@dataclass
class LocationFactors:
    """Regional price differentials. Positive premium raises price, penalty lowers it."""

    region_premium: Decimal | None = None
    transportation_differential: Decimal | None = None
    market_access_penalty: Decimal | None = None

    def has_location_signal(self) -> bool:
        return bool(self.region_premium or self.transportation_differential)

    @classmethod
    def from_dict(cls, data: dict | None) -> "LocationFactors":
        data = data or {}
        return cls(
            region_premium=_optional_decimal(data, "region_premium"),
            transportation_differential=_optional_decimal(data, "transportation_differential"),
            market_access_penalty=_optional_decimal(data, "market_access_penalty"),
        )


@dataclass(frozen=True)
class ProductionVolumes:
    """Volumes recorded on a distribution. None means not reported."""

    oil_volume: Decimal | None = None
    gas_volume: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "ProductionVolumes":
        data = data or {}
        return cls(
            oil_volume=_optional_decimal(data, "oil_volume"),
            gas_volume=_optional_decimal(data, "gas_volume"),
        )

    def to_dict(self) -> dict:
        return {
            "oil_volume": float(self.oil_volume) if self.oil_volume is not None else None,
            "gas_volume": float(self.gas_volume) if self.gas_volume is not None else None,
        }


# =============================================================================
# RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class PaymentAmount:
    """Result of a payment calculation strategy."""

    amount: Decimal
    calculation_type: str
    currency: str = DEFAULT_CURRENCY
    breakdown: dict = field(default_factory=dict)


@dataclass(frozen=True)
class PricingResult:
    """Effective unit prices and total value produced by a pricing strategy."""

    oil_price: Decimal
    gas_price: Decimal
    total_value: Decimal
    pricing_method: str
    adjustments: dict = field(default_factory=dict)


DEDUCTION_FIELDS = (
    "severance_tax",
    "ad_valorem",
    "transportation_costs",
    "processing_costs",
    "other_deductions",
)


@dataclass(frozen=True)
class RevenueBreakdown:
    """
    Revenue and deductions for one distribution.

    Optional amounts are None when not applicable, which is distinct from
    Money zero (e.g. no severance tax owed vs. severance tax not assessed).
    """

    total_revenue: Money
    net_revenue: Money
    oil_revenue: Money | None = None
    gas_revenue: Money | None = None
    severance_tax: Money | None = None
    ad_valorem: Money | None = None
    transportation_costs: Money | None = None
    processing_costs: Money | None = None
    other_deductions: Money | None = None

    @property
    def currency(self) -> str:
        return self.total_revenue.currency

    def deductions(self) -> dict[str, Money]:
        """Present deductions only, keyed by field name."""
        return {
            name: getattr(self, name)
            for name in DEDUCTION_FIELDS
            if getattr(self, name) is not None
        }

    def total_deductions(self) -> Money:
        total = Money.zero(self.currency)
        for amount in self.deductions().values():
            total = total.add(amount)
        return total

    def expected_net_revenue(self) -> Money:
        return self.total_revenue.subtract(self.total_deductions())

    def amounts(self) -> dict[str, Money]:
        """Every present amount keyed by field name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def allocate(self, decimal_interest) -> "RevenueBreakdown":
        """Scale every present amount by an owner's decimal interest."""
        interest = to_decimal(decimal_interest, "decimal_interest")
        if not (0 <= interest <= 1):
            raise InputValidationError(
                f"decimal_interest must be between 0 and 1, got: {interest}",
                field="decimal_interest",
            )
        scaled = {name: amount.multiply(interest) for name, amount in self.amounts().items()}
        return replace(self, **scaled)

    def check_currency(self) -> None:
        for amount in self.amounts().values():
            if amount.currency != self.currency:
                raise CurrencyMismatchError(self.currency, amount.currency)

    @classmethod
    def from_dict(cls, data: dict, currency: str = DEFAULT_CURRENCY) -> "RevenueBreakdown":
        currency = data.get("currency", currency)
        for required in ("total_revenue", "net_revenue"):
            if data.get(required) is None:
                raise InputValidationError(f"{required} is required", field=required)

        def money(key: str) -> Money | None:
            value = data.get(key)
            return Money(to_decimal(value, key), currency) if value is not None else None

        return cls(
            total_revenue=money("total_revenue"),
            net_revenue=money("net_revenue"),
            oil_revenue=money("oil_revenue"),
            gas_revenue=money("gas_revenue"),
            severance_tax=money("severance_tax"),
            ad_valorem=money("ad_valorem"),
            transportation_costs=money("transportation_costs"),
            processing_costs=money("processing_costs"),
            other_deductions=money("other_deductions"),
        )


PAYMENT_METHODS = ("check", "ach", "wire")


@dataclass(frozen=True)
class PaymentInfo:
    """How and when a distribution was paid."""

    check_number: str | None = None
    payment_date: date | None = None
    payment_method: str | None = None
