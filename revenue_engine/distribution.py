"""
Revenue Distribution Aggregate

One owner's share of one well's revenue for one production month. Snapshots
are immutable: `recalculate` and `mark_paid` return a new snapshot with the
version bumped and a domain event queued in `pending_events`. The repository
compares versions on save, so two writers starting from the same snapshot
cannot both succeed.

Lifecycle: CALCULATED -> RECALCULATED (any number of times) -> PAID.
PAID is terminal here; reopening a paid period is a separate business action.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum

from .errors import AlreadyPaidError, InputValidationError
from .events import (
    DomainEvent,
    RevenueDistributionCalculated,
    RevenueDistributionCreated,
    RevenueDistributionPaid,
)
from .models import PaymentInfo, ProductionVolumes, RevenueBreakdown
from .money import DEFAULT_CURRENCY, Money, to_decimal
from .production_month import ProductionMonth
from .validators import InputValidator

_validator = InputValidator()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DistributionStatus(str, Enum):
    CALCULATED = "calculated"
    RECALCULATED = "recalculated"
    PAID = "paid"


@dataclass(frozen=True)
class RevenueDistribution:
    """Aggregate root for a (well, partner, division order, production month) tuple."""

    id: str
    organization_id: str
    well_id: str
    partner_id: str
    division_order_id: str
    production_month: ProductionMonth
    production_volumes: ProductionVolumes
    revenue_breakdown: RevenueBreakdown
    payment_info: PaymentInfo = field(default_factory=PaymentInfo)
    is_paid: bool = False
    status: DistributionStatus = DistributionStatus.CALCULATED
    version: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    pending_events: tuple[DomainEvent, ...] = field(default=(), compare=False)

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        organization_id: str,
        well_id: str,
        partner_id: str,
        division_order_id: str,
        production_month: ProductionMonth,
        production_volumes: ProductionVolumes,
        revenue_breakdown: RevenueBreakdown,
        distribution_id: str | None = None,
        now: datetime | None = None,
    ) -> "RevenueDistribution":
        """Build a new, unpaid distribution at version 0."""
        _validator.validate_identifiers(
            organization_id=organization_id,
            well_id=well_id,
            partner_id=partner_id,
            division_order_id=division_order_id,
        )
        if not isinstance(production_month, ProductionMonth):
            raise InputValidationError("production_month is required", field="production_month")
        now = now or _utcnow()
        if production_month.is_future_month(now.date()):
            raise InputValidationError(
                f"Production month cannot be in the future, got: {production_month}",
                field="production_month",
            )
        _validator.validate_breakdown(revenue_breakdown)

        distribution = cls(
            id=distribution_id or str(uuid.uuid4()),
            organization_id=organization_id,
            well_id=well_id,
            partner_id=partner_id,
            division_order_id=division_order_id,
            production_month=production_month,
            production_volumes=production_volumes,
            revenue_breakdown=revenue_breakdown,
            created_at=now,
            updated_at=now,
        )
        return distribution._with_event(RevenueDistributionCreated(**distribution._event_fields()))

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def recalculate(
        self,
        new_volumes: ProductionVolumes,
        new_breakdown: RevenueBreakdown,
        calculated_by: str,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> "RevenueDistribution":
        """
        Replace volumes and breakdown on an unpaid distribution.

        Identical inputs give an identical breakdown; the version still moves
        because every accepted write is its own audit entry.
        """
        if self.is_paid:
            raise AlreadyPaidError(self.id, "recalculate")
        _validator.validate_identifiers(calculated_by=calculated_by)
        _validator.validate_breakdown(new_breakdown)

        updated = replace(
            self,
            production_volumes=new_volumes,
            revenue_breakdown=new_breakdown,
            status=DistributionStatus.RECALCULATED,
            version=self.version + 1,
            updated_at=now or _utcnow(),
        )
        return updated._with_event(RevenueDistributionCalculated(
            **updated._event_fields(),
            calculated_by=calculated_by,
            reason=reason,
            version=updated.version,
        ))

    def mark_paid(
        self,
        check_number: str,
        payment_date: date,
        payment_method: str,
        processed_by: str,
        now: datetime | None = None,
    ) -> "RevenueDistribution":
        """Record payment. Allowed once."""
        if self.is_paid:
            raise AlreadyPaidError(self.id, "mark paid")
        _validator.validate_payment(check_number, payment_date, payment_method)
        _validator.validate_identifiers(processed_by=processed_by)

        if isinstance(payment_date, datetime):
            payment_date = payment_date.date()
        check_number = check_number.strip()

        updated = replace(
            self,
            payment_info=PaymentInfo(
                check_number=check_number,
                payment_date=payment_date,
                payment_method=payment_method,
            ),
            is_paid=True,
            status=DistributionStatus.PAID,
            version=self.version + 1,
            updated_at=now or _utcnow(),
        )
        return updated._with_event(RevenueDistributionPaid(
            **updated._event_fields(),
            check_number=check_number,
            payment_date=payment_date,
            payment_method=payment_method,
            processed_by=processed_by,
        ))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def natural_key(self) -> tuple[str, str, str, str]:
        return (
            self.well_id,
            self.partner_id,
            self.division_order_id,
            self.production_month.formatted_string(),
        )

    @property
    def net_revenue(self) -> Money:
        return self.revenue_breakdown.net_revenue

    @property
    def total_revenue(self) -> Money:
        return self.revenue_breakdown.total_revenue

    def total_deductions(self) -> Money:
        return self.revenue_breakdown.total_deductions()

    def clear_events(self) -> "RevenueDistribution":
        return replace(self, pending_events=())

    def _with_event(self, event: DomainEvent) -> "RevenueDistribution":
        return replace(self, pending_events=self.pending_events + (event,))

    def _event_fields(self) -> dict:
        return {
            "revenue_distribution_id": self.id,
            "organization_id": self.organization_id,
            "well_id": self.well_id,
            "partner_id": self.partner_id,
            "production_month": self.production_month.formatted_string(),
            "net_revenue": self.revenue_breakdown.net_revenue.amount,
        }

    # -------------------------------------------------------------------------
    # Persistence mapping
    # -------------------------------------------------------------------------

    def to_persistence(self) -> dict:
        """Flat record with Decimal amounts. Absent amounts stay None."""
        breakdown = self.revenue_breakdown
        record = {
            "id": self.id,
            "organization_id": self.organization_id,
            "well_id": self.well_id,
            "partner_id": self.partner_id,
            "division_order_id": self.division_order_id,
            "production_month": self.production_month.to_database_date(),
            "oil_volume": self.production_volumes.oil_volume,
            "gas_volume": self.production_volumes.gas_volume,
            "currency": breakdown.currency,
            "check_number": self.payment_info.check_number,
            "payment_date": self.payment_info.payment_date,
            "payment_method": self.payment_info.payment_method,
            "is_paid": self.is_paid,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "version": self.version,
        }
        for name in (
            "oil_revenue", "gas_revenue", "total_revenue", "severance_tax", "ad_valorem",
            "transportation_costs", "processing_costs", "other_deductions", "net_revenue",
        ):
            amount = getattr(breakdown, name)
            record[name] = amount.amount if amount is not None else None
        return record

    @classmethod
    def from_persistence(cls, record: dict) -> "RevenueDistribution":
        """Rebuild a stored snapshot. No events are queued."""
        currency = record.get("currency") or DEFAULT_CURRENCY

        def money(key: str) -> Money | None:
            value = record.get(key)
            return Money(to_decimal(value, key), currency) if value is not None else None

        return cls(
            id=record["id"],
            organization_id=record["organization_id"],
            well_id=record["well_id"],
            partner_id=record["partner_id"],
            division_order_id=record["division_order_id"],
            production_month=ProductionMonth.from_database_date(record["production_month"]),
            production_volumes=ProductionVolumes(
                oil_volume=record.get("oil_volume"),
                gas_volume=record.get("gas_volume"),
            ),
            revenue_breakdown=RevenueBreakdown(
                total_revenue=money("total_revenue"),
                net_revenue=money("net_revenue"),
                oil_revenue=money("oil_revenue"),
                gas_revenue=money("gas_revenue"),
                severance_tax=money("severance_tax"),
                ad_valorem=money("ad_valorem"),
                transportation_costs=money("transportation_costs"),
                processing_costs=money("processing_costs"),
                other_deductions=money("other_deductions"),
            ),
            payment_info=PaymentInfo(
                check_number=record.get("check_number"),
                payment_date=record.get("payment_date"),
                payment_method=record.get("payment_method"),
            ),
            is_paid=bool(record.get("is_paid")),
            status=DistributionStatus(record.get("status", DistributionStatus.CALCULATED.value)),
            version=record["version"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )
