"""
Payment Calculation Strategies

Each strategy turns lease terms and production into one category of owner
payment. Strategies are stateless and safe to share between calculations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from ..models import ZERO, LeaseData, PaymentAmount, ProductionData


class PaymentCalculationStrategy(ABC):
    """Interface shared by all payment calculation strategies."""

    CALCULATION_TYPE = ""

    @abstractmethod
    def calculate(self, lease: LeaseData, production: ProductionData) -> PaymentAmount:
        """Compute the payment for this category."""

    @abstractmethod
    def is_applicable(self, lease: LeaseData, production: ProductionData) -> bool:
        """Whether this category pays anything for the given lease."""

    def get_calculation_type(self) -> str:
        return self.CALCULATION_TYPE

    def _result(self, amount: Decimal, breakdown: dict) -> PaymentAmount:
        return PaymentAmount(
            amount=amount,
            calculation_type=self.get_calculation_type(),
            breakdown=breakdown,
        )


class RoyaltyPaymentStrategy(PaymentCalculationStrategy):
    """Mineral owner's royalty: a share of gross revenue, free of operating costs."""

    CALCULATION_TYPE = "ROYALTY_PAYMENT"

    def calculate(self, lease: LeaseData, production: ProductionData) -> PaymentAmount:
        total_revenue = production.gross_revenue
        royalty_amount = total_revenue * lease.royalty_rate
        return self._result(royalty_amount, {
            "oil_revenue": production.oil_revenue,
            "gas_revenue": production.gas_revenue,
            "total_revenue": total_revenue,
            "royalty_rate": lease.royalty_rate,
            "royalty_amount": royalty_amount,
        })

    def is_applicable(self, lease: LeaseData, production: ProductionData) -> bool:
        return lease.royalty_rate > 0 and production.has_hydrocarbons()


class WorkingInterestStrategy(PaymentCalculationStrategy):
    """
    Working interest owner's share of revenue after operating expenses.

    Expenses are netted against gross revenue before the interest is applied,
    and the net is floored at zero, so the payout is never negative.
    """

    CALCULATION_TYPE = "WORKING_INTEREST"

    def calculate(self, lease: LeaseData, production: ProductionData) -> PaymentAmount:
        gross_revenue = production.gross_revenue
        operating_expenses = lease.operating_expenses or ZERO
        net_revenue = max(ZERO, gross_revenue - operating_expenses)
        working_interest_amount = net_revenue * lease.working_interest
        return self._result(working_interest_amount, {
            "oil_revenue": production.oil_revenue,
            "gas_revenue": production.gas_revenue,
            "gross_revenue": gross_revenue,
            "operating_expenses": operating_expenses,
            "net_revenue": net_revenue,
            "working_interest": lease.working_interest,
            "working_interest_amount": working_interest_amount,
        })

    def is_applicable(self, lease: LeaseData, production: ProductionData) -> bool:
        return lease.working_interest > 0


class NetRevenueInterestStrategy(PaymentCalculationStrategy):
    """Net revenue interest: gross revenue times NRI, no expense netting."""

    CALCULATION_TYPE = "NET_REVENUE_INTEREST"

    def calculate(self, lease: LeaseData, production: ProductionData) -> PaymentAmount:
        total_revenue = production.gross_revenue
        nri_amount = total_revenue * lease.net_revenue_interest
        return self._result(nri_amount, {
            "oil_revenue": production.oil_revenue,
            "gas_revenue": production.gas_revenue,
            "total_revenue": total_revenue,
            "net_revenue_interest": lease.net_revenue_interest,
            "nri_amount": nri_amount,
        })

    def is_applicable(self, lease: LeaseData, production: ProductionData) -> bool:
        return lease.net_revenue_interest > 0


class LeaseBonusStrategy(PaymentCalculationStrategy):
    """One-time lease bonus per acre. Production is ignored."""

    CALCULATION_TYPE = "LEASE_BONUS"

    def calculate(self, lease: LeaseData, production: ProductionData) -> PaymentAmount:
        bonus_per_acre = lease.lease_bonus or ZERO
        bonus_amount = bonus_per_acre * lease.acreage
        return self._result(bonus_amount, {
            "lease_bonus": bonus_per_acre,
            "acreage": lease.acreage,
            "bonus_amount": bonus_amount,
        })

    def is_applicable(self, lease: LeaseData, production: ProductionData) -> bool:
        return (lease.lease_bonus or ZERO) > 0


class CompositePaymentStrategy(PaymentCalculationStrategy):
    """Sums the applicable strategies out of an ordered list."""

    CALCULATION_TYPE = "COMPOSITE_PAYMENT"

    def __init__(self, strategies: list[PaymentCalculationStrategy]):
        self.strategies = list(strategies)

    def calculate(self, lease: LeaseData, production: ProductionData) -> PaymentAmount:
        total_amount = ZERO
        calculations: dict[str, PaymentAmount] = {}

        for strategy in self.strategies:
            if not strategy.is_applicable(lease, production):
                continue
            result = strategy.calculate(lease, production)
            total_amount += result.amount
            calculations[strategy.get_calculation_type()] = result

        return self._result(total_amount, {
            "total_amount": total_amount,
            "calculations": calculations,
            "strategy_count": len(calculations),
        })

    def is_applicable(self, lease: LeaseData, production: ProductionData) -> bool:
        return any(strategy.is_applicable(lease, production) for strategy in self.strategies)
