"""
Distribution Service

Application-level operations on revenue distributions. Calculation and state
transitions are pure; the only suspension points are the awaited repository
and division order source calls. Version conflicts are never retried here:
the caller reloads and tries again.
"""

import logging
from datetime import date
from typing import Any, Dict

from .distribution import RevenueDistribution
from .division_orders import DivisionOrderInterestValidator, InterestValidationResult
from .errors import DuplicateDistributionError, InputValidationError, VersionConflictError
from .events import EventPublisher, LoggingEventPublisher
from .models import ProductionVolumes, RevenueBreakdown
from .money import DEFAULT_CURRENCY
from .output import OutputBuilder
from .production_month import ProductionMonth
from .repository import DistributionRepository, DivisionOrderSource

logger = logging.getLogger(__name__)


class DistributionService:
    """Creates, recalculates and pays revenue distributions."""

    def __init__(
        self,
        repository: DistributionRepository,
        division_orders: DivisionOrderSource | None = None,
        publisher: EventPublisher | None = None,
        interest_validator: DivisionOrderInterestValidator | None = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.repository = repository
        self.division_orders = division_orders
        self.publisher = publisher or LoggingEventPublisher()
        self.interest_validator = interest_validator or DivisionOrderInterestValidator()
        self.currency = currency
        self.output_builder = OutputBuilder()

    async def create_distribution(
        self,
        organization_id: str,
        well_id: str,
        partner_id: str,
        division_order_id: str,
        production_month: ProductionMonth,
        production_volumes: ProductionVolumes,
        revenue_breakdown: RevenueBreakdown,
        distribution_id: str | None = None,
        allow_interest_imbalance: bool = False,
    ) -> RevenueDistribution:
        """
        Create and store a new distribution.

        When a division order source is configured the well's interests are
        checked first. An imbalance raises DivisionOrderImbalanceError unless
        the caller passes allow_interest_imbalance=True.
        """
        distribution = RevenueDistribution.create(
            organization_id=organization_id,
            well_id=well_id,
            partner_id=partner_id,
            division_order_id=division_order_id,
            production_month=production_month,
            production_volumes=production_volumes,
            revenue_breakdown=revenue_breakdown,
            distribution_id=distribution_id,
        )

        if self.division_orders is not None:
            check = await self.validate_division_order_interests(well_id, production_month.last_day())
            if not check.valid:
                if not allow_interest_imbalance:
                    check.raise_for_imbalance()
                logger.warning(
                    "Creating distribution for well %s despite interest imbalance (sum=%s)",
                    well_id, check.total,
                )

        existing = await self.repository.find_by_natural_key(*distribution.natural_key)
        if existing is not None:
            raise DuplicateDistributionError(well_id, partner_id, production_month.formatted_string())

        await self.repository.save(distribution, expected_version=None)
        logger.info(
            "Created revenue distribution %s for well %s, partner %s, month %s",
            distribution.id, well_id, partner_id, production_month,
        )
        return self._publish(distribution)

    async def recalculate_distribution(
        self,
        distribution_id: str,
        new_volumes: ProductionVolumes,
        new_breakdown: RevenueBreakdown,
        calculated_by: str,
        reason: str | None = None,
    ) -> RevenueDistribution:
        current, version = await self.repository.load(distribution_id)
        updated = current.recalculate(new_volumes, new_breakdown, calculated_by, reason)
        await self._save(updated, version)
        logger.info(
            "Recalculated revenue distribution %s (version %s) by %s",
            distribution_id, updated.version, calculated_by,
        )
        return self._publish(updated)

    async def mark_distribution_paid(
        self,
        distribution_id: str,
        check_number: str,
        payment_date: date,
        payment_method: str,
        processed_by: str,
    ) -> RevenueDistribution:
        current, version = await self.repository.load(distribution_id)
        updated = current.mark_paid(check_number, payment_date, payment_method, processed_by)
        await self._save(updated, version)
        logger.info(
            "Revenue distribution %s paid by %s %s on %s",
            distribution_id, payment_method, updated.payment_info.check_number, payment_date,
        )
        return self._publish(updated)

    async def get_distribution(self, distribution_id: str) -> RevenueDistribution:
        distribution, _ = await self.repository.load(distribution_id)
        return distribution

    async def validate_division_order_interests(self, well_id: str, as_of: date) -> InterestValidationResult:
        if self.division_orders is None:
            raise InputValidationError("No division order source configured", field="well_id")
        entries = await self.division_orders.list_active_interests(well_id, as_of)
        result = self.interest_validator.validate(entries, well_id=well_id, as_of=as_of)
        if not result.valid:
            logger.warning(
                "Division order interests for well %s as of %s sum to %s (%d entries)",
                well_id, as_of, result.total, len(result.entries),
            )
        return result

    async def _save(self, distribution: RevenueDistribution, expected_version: int) -> None:
        try:
            await self.repository.save(distribution, expected_version=expected_version)
        except VersionConflictError as e:
            logger.warning("Version conflict saving revenue distribution %s: %s", distribution.id, e)
            raise

    def _publish(self, distribution: RevenueDistribution) -> RevenueDistribution:
        """Publish queued events. Failures are logged, never raised."""
        for event in distribution.pending_events:
            try:
                self.publisher.publish(event)
            except Exception:
                logger.warning("Failed to publish %s for %s", event.event_type, distribution.id, exc_info=True)
        return distribution.clear_events()

    # -------------------------------------------------------------------------
    # Dictionary API (HTTP entry points)
    # -------------------------------------------------------------------------

    async def create_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        distribution = await self.create_distribution(
            organization_id=data.get("organization_id", ""),
            well_id=data.get("well_id", ""),
            partner_id=data.get("partner_id", ""),
            division_order_id=data.get("division_order_id", ""),
            production_month=ProductionMonth.from_string(data.get("production_month", "")),
            production_volumes=ProductionVolumes.from_dict(data.get("production_volumes")),
            revenue_breakdown=RevenueBreakdown.from_dict(data.get("revenue_breakdown") or {}, self.currency),
            distribution_id=data.get("id"),
            allow_interest_imbalance=data.get("allow_interest_imbalance") is True,
        )
        return self.output_builder.distribution(distribution)

    async def recalculate_from_dict(self, distribution_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        distribution = await self.recalculate_distribution(
            distribution_id,
            new_volumes=ProductionVolumes.from_dict(data.get("production_volumes")),
            new_breakdown=RevenueBreakdown.from_dict(data.get("revenue_breakdown") or {}, self.currency),
            calculated_by=data.get("calculated_by", ""),
            reason=data.get("reason"),
        )
        return self.output_builder.distribution(distribution)

    async def pay_from_dict(self, distribution_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        distribution = await self.mark_distribution_paid(
            distribution_id,
            check_number=data.get("check_number", ""),
            payment_date=_parse_iso_date(data.get("payment_date"), "payment_date"),
            payment_method=data.get("payment_method", "check"),
            processed_by=data.get("processed_by", ""),
        )
        return self.output_builder.distribution(distribution)

    async def get_as_dict(self, distribution_id: str) -> Dict[str, Any]:
        return self.output_builder.distribution(await self.get_distribution(distribution_id))

    async def division_order_check_as_dict(self, well_id: str, as_of: str | None) -> Dict[str, Any]:
        as_of_date = _parse_iso_date(as_of, "as_of") if as_of else date.today()
        result = await self.validate_division_order_interests(well_id, as_of_date)
        return result.to_dict()


def _parse_iso_date(value, field: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InputValidationError(f"{field} must be an ISO date (YYYY-MM-DD), got: {value!r}", field=field) from None
