"""
Integration Test Scenarios for the Revenue Distribution Engine

End-to-end month close for one well: price production, build the well's
revenue breakdown, split it across division order owners, then create and
pay one distribution per owner.

Run with: python -m pytest tests/test_integration_scenarios.py -v
"""

from datetime import date
from decimal import Decimal

import pytest

from revenue_engine import (
    DistributionService,
    DivisionOrder,
    InMemoryDistributionRepository,
    InMemoryDivisionOrderSource,
    RevenueEngine,
)
from revenue_engine.errors import AlreadyPaidError
from revenue_engine.events import InMemoryEventPublisher
from revenue_engine.models import MarketData, ProductionData, ProductionVolumes
from revenue_engine.money import Money
from revenue_engine.production_month import ProductionMonth

OWNERS = {"P1": Decimal("0.5"), "P2": Decimal("0.375"), "P3": Decimal("0.125")}


class TestMonthClose:
    """Well W1, March 2024: 1,000 bbl and 5,000 MCF at $75 / $3."""

    @pytest.fixture
    def engine(self):
        return RevenueEngine(currency="USD")

    @pytest.fixture
    def division_orders(self):
        return InMemoryDivisionOrderSource([
            DivisionOrder("W1", partner_id, interest, date(2023, 1, 1), id=f"DO-{partner_id}")
            for partner_id, interest in OWNERS.items()
        ])

    @pytest.fixture
    def publisher(self):
        return InMemoryEventPublisher()

    @pytest.fixture
    def service(self, division_orders, publisher):
        return DistributionService(
            InMemoryDistributionRepository(), division_orders=division_orders, publisher=publisher,
        )

    @pytest.fixture
    def well_breakdown(self, engine):
        """$90,000 − $4,140 severance − $900 ad valorem = $84,960"""
        production = ProductionData(oil_volume=Decimal("1000"), gas_volume=Decimal("5000"))
        market = MarketData(oil_base_price=Decimal("75"), gas_base_price=Decimal("3"))
        pricing = engine.calculate_price(market, strategy_type="STANDARD")
        return engine.build_breakdown(
            production, pricing, deductions={"severance_tax": "4140", "ad_valorem": "900"}
        )

    @pytest.mark.asyncio
    async def test_owner_shares_add_up_to_well_net(self, service, well_breakdown, publisher):
        month = ProductionMonth(2024, 3)
        created = []
        for partner_id, interest in OWNERS.items():
            created.append(await service.create_distribution(
                organization_id="ORG-1",
                well_id="W1",
                partner_id=partner_id,
                division_order_id=f"DO-{partner_id}",
                production_month=month,
                production_volumes=ProductionVolumes(oil_volume=Decimal("1000") * interest),
                revenue_breakdown=well_breakdown.allocate(interest),
                distribution_id=f"RD-{partner_id}",
            ))

        nets = {d.partner_id: d.net_revenue for d in created}
        assert nets == {
            "P1": Money.of("42480"),
            "P2": Money.of("31860"),
            "P3": Money.of("10620"),
        }
        total = Money.zero("USD")
        for net in nets.values():
            total = total + net
        assert total == well_breakdown.net_revenue
        assert len(publisher.events) == 3

    @pytest.mark.asyncio
    async def test_pay_every_owner_then_lock(self, service, well_breakdown):
        month = ProductionMonth(2024, 3)
        for partner_id, interest in OWNERS.items():
            await service.create_distribution(
                "ORG-1", "W1", partner_id, f"DO-{partner_id}", month,
                ProductionVolumes(), well_breakdown.allocate(interest), distribution_id=f"RD-{partner_id}",
            )

        for number, partner_id in enumerate(OWNERS, start=1):
            paid = await service.mark_distribution_paid(
                f"RD-{partner_id}", f"CHK-{number:03d}", date(2024, 4, 1), "check", "accountant-2",
            )
            assert paid.version == 1

        with pytest.raises(AlreadyPaidError):
            await service.recalculate_distribution(
                "RD-P1", ProductionVolumes(), well_breakdown.allocate(OWNERS["P1"]), "accountant-1",
            )

    @pytest.mark.asyncio
    async def test_interest_check_for_the_month(self, service):
        result = await service.validate_division_order_interests("W1", ProductionMonth(2024, 3).last_day())
        assert result.valid
        assert {e.partner_id for e in result.entries} == set(OWNERS)
