"""Reusable seed data fixtures for integration tests."""

from decimal import Decimal

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import make_item, make_supplier


@pytest_asyncio.fixture
async def seeded_db(db: AsyncSession) -> AsyncSession:
    """Seed 2 suppliers and 3 inventory items.

    ACME Corp supplies two items; Globex has one. A third supplier,
    Initech, has no items and can be deleted freely.
    """
    acme = make_supplier(name="ACME Corp")
    globex = make_supplier(
        name="Globex", contact_name="Hank Scorpio", phone=None, email="supply@globex.example"
    )
    initech = make_supplier(name="Initech", contact_name=None, phone=None, email=None)
    db.add_all([acme, globex, initech])
    await db.flush()

    db.add_all(
        [
            make_item(supplier_id=acme.id, name="Rocket Skates", sku="RS-001", quantity=25),
            make_item(
                supplier_id=acme.id,
                name="Giant Magnet",
                sku="GM-002",
                quantity=3,
                price=Decimal("89.50"),
            ),
            make_item(
                supplier_id=globex.id,
                name="Doomsday Device",
                sku="DD-100",
                quantity=1,
                price=Decimal("99999.00"),
                minimum_quantity=0,
            ),
        ]
    )
    await db.commit()
    return db
