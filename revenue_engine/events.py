"""
Domain Events

Raised by RevenueDistribution transitions and published by the service after
a successful save. Publication is informational; a failed publish never undoes
the write.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Protocol

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Fields shared by every revenue distribution event."""

    revenue_distribution_id: str
    organization_id: str
    well_id: str
    partner_id: str
    production_month: str
    net_revenue: Decimal
    occurred_at: datetime = field(default_factory=_utcnow, compare=False)

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        data = asdict(self)
        data["event_type"] = self.event_type
        for key, value in data.items():
            if isinstance(value, Decimal):
                data[key] = str(value)
            elif isinstance(value, (date, datetime)):
                data[key] = value.isoformat()
        return data


@dataclass(frozen=True)
class RevenueDistributionCreated(DomainEvent):
    pass


@dataclass(frozen=True)
class RevenueDistributionCalculated(DomainEvent):
    calculated_by: str = ""
    reason: str | None = None
    version: int = 0


@dataclass(frozen=True)
class RevenueDistributionPaid(DomainEvent):
    check_number: str = ""
    payment_date: date | None = None
    payment_method: str = ""
    processed_by: str = ""


class EventPublisher(Protocol):
    def publish(self, event: DomainEvent) -> None:
        ...


class LoggingEventPublisher:
    """Default publisher: writes each event to the log."""

    def publish(self, event: DomainEvent) -> None:
        logger.info("Domain event %s: %s", event.event_type, event.to_dict())


class InMemoryEventPublisher:
    """Collects published events in order. Useful for tests and local runs."""

    def __init__(self):
        self.events: list[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self.events.append(event)
