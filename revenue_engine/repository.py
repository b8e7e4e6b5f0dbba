"""
Persistence Boundary

Async interfaces the service depends on, plus thread-safe in-memory
implementations. `save` is a compare-and-swap on the version token: a write
whose expected version does not match the stored one raises
VersionConflictError instead of overwriting.
"""

import threading
from abc import ABC, abstractmethod
from datetime import date

from .distribution import RevenueDistribution
from .division_orders import DivisionOrder, DivisionOrderInterest
from .errors import DistributionNotFoundError, DuplicateDistributionError, VersionConflictError


class DistributionRepository(ABC):
    """Loads and saves revenue distributions under optimistic locking."""

    @abstractmethod
    async def load(self, distribution_id: str) -> tuple[RevenueDistribution, int]:
        """Return the stored snapshot and its version, or raise DistributionNotFoundError."""

    @abstractmethod
    async def save(self, distribution: RevenueDistribution, expected_version: int | None) -> None:
        """
        Store a snapshot.

        `expected_version` is the version the caller loaded, or None for a
        record that must not exist yet.
        """

    @abstractmethod
    async def find_by_natural_key(
        self, well_id: str, partner_id: str, division_order_id: str, production_month: str
    ) -> RevenueDistribution | None:
        """Look up a distribution by its (well, partner, division order, month) key."""


class DivisionOrderSource(ABC):
    """Supplies the active owner interests for a well."""

    @abstractmethod
    async def list_active_interests(self, well_id: str, as_of: date) -> list[DivisionOrderInterest]:
        ...


class InMemoryDistributionRepository(DistributionRepository):
    """Dict-backed repository. Snapshots are immutable, so they are stored as-is."""

    def __init__(self):
        self._records: dict[str, RevenueDistribution] = {}
        self._natural_keys: dict[tuple, str] = {}
        self._lock = threading.Lock()

    async def load(self, distribution_id: str) -> tuple[RevenueDistribution, int]:
        with self._lock:
            record = self._records.get(distribution_id)
        if record is None:
            raise DistributionNotFoundError(distribution_id)
        return record, record.version

    async def save(self, distribution: RevenueDistribution, expected_version: int | None) -> None:
        stored = distribution.clear_events()
        with self._lock:
            current = self._records.get(distribution.id)
            current_version = current.version if current is not None else None
            if current_version != expected_version:
                raise VersionConflictError(distribution.id, expected_version, current_version)

            owner = self._natural_keys.get(distribution.natural_key)
            if owner is not None and owner != distribution.id:
                raise DuplicateDistributionError(
                    distribution.well_id, distribution.partner_id, distribution.natural_key[3]
                )

            self._records[distribution.id] = stored
            self._natural_keys[distribution.natural_key] = distribution.id

    async def find_by_natural_key(
        self, well_id: str, partner_id: str, division_order_id: str, production_month: str
    ) -> RevenueDistribution | None:
        with self._lock:
            distribution_id = self._natural_keys.get((well_id, partner_id, division_order_id, production_month))
            return self._records.get(distribution_id) if distribution_id else None

    def __len__(self) -> int:
        return len(self._records)


class InMemoryDivisionOrderSource(DivisionOrderSource):
    """Holds division orders and answers which are effective on a date."""

    def __init__(self, orders: list[DivisionOrder] | None = None):
        self._orders: list[DivisionOrder] = list(orders or [])
        self._lock = threading.Lock()

    def add(self, order: DivisionOrder) -> None:
        with self._lock:
            self._orders.append(order)

    async def list_active_interests(self, well_id: str, as_of: date) -> list[DivisionOrderInterest]:
        with self._lock:
            orders = list(self._orders)
        return [
            DivisionOrderInterest.from_division_order(order)
            for order in orders
            if order.well_id == well_id and order.is_effective_on(as_of)
        ]
