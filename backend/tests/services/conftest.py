"""Service test fixtures — two async tier databases + seeded ledgers + FastAPI test client.

Invariants:
    - Every test gets fresh SQLite databases, one file per tier under tmp_path
    - The engine's clock is pinned to 2025-01-01 UTC, so the threshold is 2023-01-01
    - app.state.engine / app.state.databases swapped in for route tests

Design Decisions:
    - SQLite files rather than :memory:: the tiers are queried concurrently and an
      in-memory database would share one connection between overlapping sessions
      (PostgreSQL-specific features not exercised here)
    - Seed data places one sale exactly on the threshold to exercise boundary routing
"""

import uuid
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from ledgerfed.config import Settings
from ledgerfed.core.domain_types import Tier
from ledgerfed.db.base import ColdBase, HotBase
from ledgerfed.infrastructure.database import DatabaseSessionManager, TierDatabases
from ledgerfed.main import app
from ledgerfed.models import (
    DealerRequest, DealerRequestArchive, Payment, PaymentArchive,
    Product, Sale, SaleArchive, Shopkeeper, User,
)
from ledgerfed.services.federation import FederationEngine
from tests.services.fakes import NOW, THRESHOLD, utc


async def _tier_engine(base, path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.create_all)
    return engine


@pytest.fixture
async def hot_engine(tmp_path):
    engine = await _tier_engine(HotBase, tmp_path / "hot.db")
    yield engine
    await engine.dispose()


@pytest.fixture
async def cold_engine(tmp_path):
    engine = await _tier_engine(ColdBase, tmp_path / "cold.db")
    yield engine
    await engine.dispose()


@pytest.fixture
def databases(hot_engine, cold_engine):
    return TierDatabases(
        hot=DatabaseSessionManager.from_engine(hot_engine, Tier.HOT),
        cold=DatabaseSessionManager.from_engine(cold_engine, Tier.COLD),
    )


@pytest.fixture
def engine(databases):
    return FederationEngine.from_settings(databases, Settings(), clock=lambda: NOW)


@dataclass
class Seed:
    dealer: User
    salesman: User
    product: Product
    shopkeeper: Shopkeeper
    hot_sale: Sale
    boundary_sale: Sale
    cold_sale: SaleArchive
    oldest_sale: SaleArchive
    hot_payment: Payment
    cold_payment: PaymentArchive
    hot_request: DealerRequest
    cold_request: DealerRequestArchive


def _sale_fields(seed_refs, sale_date, **extra):
    dealer, salesman, product = seed_refs
    return dict(
        salesman_id=salesman.id,
        dealer_id=dealer.id,
        product_id=product.id,
        quantity=2,
        unit_price=10.0,
        total_amount=20.0,
        sale_date=sale_date,
        created_at=sale_date,
        updated_at=sale_date,
        **extra,
    )


@pytest.fixture
async def seed(databases):
    """Reference data and ledger rows on both sides of the 2023-01-01 threshold."""
    dealer = User(id=uuid.uuid4(), name="Asha Dealer", email="asha@example.com", role="dealer")
    salesman = User(id=uuid.uuid4(), name="Ravi Salesman", email="ravi@example.com", role="salesman")
    product = Product(id=uuid.uuid4(), title="Masala Chai", packet_price=5.0, packets_per_strip=10)
    shopkeeper = Shopkeeper(id=uuid.uuid4(), name="Corner Store", phone="555-0101", district="North")
    refs = (dealer, salesman, product)

    hot_sale = Sale(**_sale_fields(refs, utc(2024, 6, 1), shopkeeper_id=shopkeeper.id))
    boundary_sale = Sale(**_sale_fields(refs, THRESHOLD, invoice_no="INV-T"))
    hot_payment = Payment(
        dealer_id=dealer.id, type="credit", amount=100.0,
        transaction_date=None, created_at=utc(2024, 2, 1), updated_at=utc(2024, 2, 1),
    )
    hot_request = DealerRequest(
        dealer_id=dealer.id, product_id=product.id, strips=3,
        requested_at=utc(2024, 3, 1), created_at=utc(2024, 3, 1), updated_at=utc(2024, 3, 1),
    )

    cold_sale = SaleArchive(
        original_id=uuid.uuid4(),
        **_sale_fields(refs, utc(2022, 6, 1), shopkeeper_id=uuid.uuid4()),
    )
    oldest_sale = SaleArchive(
        original_id=uuid.uuid4(), **_sale_fields(refs, utc(2021, 3, 1)),
    )
    cold_payment = PaymentArchive(
        original_id=uuid.uuid4(), dealer_id=dealer.id, type="debit", amount=50.0,
        transaction_date=utc(2022, 5, 5), created_at=utc(2022, 5, 5), updated_at=utc(2022, 5, 5),
    )
    cold_request = DealerRequestArchive(
        original_id=uuid.uuid4(), dealer_id=dealer.id, product_id=product.id, strips=1,
        requested_at=None, created_at=utc(2022, 1, 1), updated_at=utc(2022, 1, 1),
    )

    async with databases.hot.session() as db:
        db.add_all([dealer, salesman, product, shopkeeper])
        await db.flush()
        db.add_all([hot_sale, boundary_sale, hot_payment, hot_request])
        await db.commit()
    async with databases.cold.session() as db:
        db.add_all([cold_sale, oldest_sale, cold_payment, cold_request])
        await db.commit()

    return Seed(
        dealer=dealer, salesman=salesman, product=product, shopkeeper=shopkeeper,
        hot_sale=hot_sale, boundary_sale=boundary_sale,
        cold_sale=cold_sale, oldest_sale=oldest_sale,
        hot_payment=hot_payment, cold_payment=cold_payment,
        hot_request=hot_request, cold_request=cold_request,
    )


@pytest.fixture
async def client(databases, engine):
    """FastAPI test client with the tier databases and engine swapped onto app.state."""
    app.state.databases = databases
    app.state.engine = engine

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    del app.state.engine
    del app.state.databases
