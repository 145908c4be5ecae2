"""Stock changes and the inventory movement ledger."""

import asyncio
import logging
from decimal import Decimal
from uuid import uuid4

import aiosqlite
import pytest

from application.dto import NewProduct, StockUpdateRequest
from domain.entities import MovementType
from domain.exceptions import (
    InsufficientStockError,
    InvalidActionError,
    InvalidIdentifierError,
    NotFoundError,
    RepositoryError,
)
from infrastructure.persistence.connection import AsyncSQLiteConnection


def _update(product_id, quantity, user_id, movement_type=MovementType.PURCHASE, notes=None):
    return StockUpdateRequest(
        product_id=product_id,
        quantity=quantity,
        movement_type=movement_type,
        user_id=user_id,
        notes=notes,
    )


async def test_every_movement_satisfies_ledger_identity(make_product, product_service, inventory_repo, product_repo, user_id):
    product = await make_product(stock_quantity=10)

    await product_service.update_stock(_update(product.id, 5, user_id))
    await product_service.update_stock(_update(product.id, -3, user_id, MovementType.SALE))
    await product_service.update_stock(_update(product.id, 2, user_id, MovementType.RETURN))

    movements = await inventory_repo.get_by_product(product.id)
    assert len(movements) == 3
    for m in movements:
        assert m.new_stock == m.previous_stock + m.quantity_change
        assert m.new_stock >= 0

    stored = await product_repo.get_by_id(product.id)
    assert stored.stock_quantity == 14
    # Newest first: the last movement ends at the stored quantity.
    assert movements[0].new_stock == stored.stock_quantity


async def test_update_stock_returns_before_and_after(make_product, product_service, user_id):
    product = await make_product(stock_quantity=7, min_stock_level=3)

    result = await product_service.update_stock(
        _update(product.id, -2, user_id, MovementType.SALE, notes="counter sale"),
    )

    assert result.product.previous_stock == 7
    assert result.product.new_stock == 5
    assert result.product.quantity_changed == -2
    assert result.product.min_stock_level == 3
    assert result.movement.type == "sale"
    assert result.movement.created_at


async def test_failed_ledger_write_rolls_back_stock(make_product, product_service, inventory_repo, product_repo, user_id, monkeypatch):
    product = await make_product(stock_quantity=10)

    async def boom(conn, movement):
        raise RuntimeError("disk full")

    monkeypatch.setattr(inventory_repo, "_insert_movement", boom)

    with pytest.raises(RuntimeError):
        await product_service.update_stock(_update(product.id, 4, user_id))

    stored = await product_repo.get_by_id(product.id)
    assert stored.stock_quantity == 10
    assert await inventory_repo.get_by_product(product.id) == []


async def test_database_error_leaves_as_repository_error(make_product, product_service, inventory_repo, product_repo, user_id, monkeypatch):
    product = await make_product(stock_quantity=10)

    async def locked(conn, movement):
        raise aiosqlite.OperationalError("database is locked")

    monkeypatch.setattr(inventory_repo, "_insert_movement", locked)

    with pytest.raises(RepositoryError) as exc_info:
        await product_service.update_stock(_update(product.id, 4, user_id))

    assert "database is locked" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, aiosqlite.OperationalError)
    stored = await product_repo.get_by_id(product.id)
    assert stored.stock_quantity == 10
    assert await inventory_repo.get_by_product(product.id) == []


async def test_unopenable_database_is_repository_error(tmp_path):
    missing = AsyncSQLiteConnection(str(tmp_path / "missing" / "inventory.db"))

    with pytest.raises(RepositoryError):
        async with missing.acquire() as conn:
            await conn.execute("SELECT 1")


async def test_concurrent_updates_are_serialized(make_product, product_service, inventory_repo, product_repo, user_id):
    product = await make_product(stock_quantity=10)

    await asyncio.gather(*(
        product_service.update_stock(_update(product.id, 1, user_id))
        for _ in range(20)
    ))

    stored = await product_repo.get_by_id(product.id)
    assert stored.stock_quantity == 30
    movements = await inventory_repo.get_by_product(product.id)
    assert len(movements) == 20
    assert sorted(m.new_stock for m in movements) == list(range(11, 31))
    for m in movements:
        assert m.new_stock == m.previous_stock + 1


async def test_stock_cannot_go_negative(make_product, product_service, inventory_repo, product_repo, user_id):
    product = await make_product(name="Bolt", stock_quantity=2)

    with pytest.raises(InsufficientStockError) as exc_info:
        await product_service.update_stock(_update(product.id, -3, user_id, MovementType.SALE))

    assert '"Bolt" has 2 in stock' in str(exc_info.value)
    stored = await product_repo.get_by_id(product.id)
    assert stored.stock_quantity == 2
    assert await inventory_repo.get_by_product(product.id) == []


async def test_refused_sale_is_not_logged_as_an_error(make_product, product_service, user_id, caplog):
    product = await make_product(name="Bolt", stock_quantity=2)

    with caplog.at_level(logging.INFO, logger="infrastructure.persistence.connection"):
        with pytest.raises(InsufficientStockError):
            await product_service.update_stock(_update(product.id, -3, user_id, MovementType.SALE))

    records = [r for r in caplog.records if r.name == "infrastructure.persistence.connection"]
    assert records
    assert all(r.levelno == logging.INFO for r in records)
    assert all(r.exc_info is None for r in records)


async def test_stock_may_reach_exactly_zero(make_product, product_service, user_id):
    product = await make_product(stock_quantity=2)

    result = await product_service.update_stock(_update(product.id, -2, user_id, MovementType.SALE))

    assert result.product.new_stock == 0


async def test_non_uuid_product_id_is_rejected_before_any_change(make_product, product_service, product_repo, user_id):
    product = await make_product(stock_quantity=10)

    with pytest.raises(InvalidIdentifierError) as exc_info:
        await product_service.update_stock(_update("abc", 1, user_id))

    message = str(exc_info.value)
    assert 'Invalid product ID format: "abc"' in message
    assert "search for the product first" in message
    assert (await product_repo.get_by_id(product.id)).stock_quantity == 10


async def test_non_uuid_user_id_is_rejected(make_product, product_service):
    product = await make_product()

    with pytest.raises(InvalidIdentifierError, match="user ID"):
        await product_service.update_stock(_update(product.id, 1, "abc"))


async def test_unknown_product_is_not_found(product_service, user_id):
    with pytest.raises(NotFoundError, match="Product not found"):
        await product_service.update_stock(_update(str(uuid4()), 1, user_id))


async def test_unknown_movement_type_is_invalid_action(make_product, product_service, user_id):
    product = await make_product()

    with pytest.raises(InvalidActionError, match="Invalid movement type"):
        await product_service.update_stock(_update(product.id, 1, user_id, movement_type="theft"))


async def test_create_product_with_invalid_user_creates_nothing(product_service, product_repo):
    with pytest.raises(InvalidIdentifierError, match='Invalid user ID format: "abc"'):
        await product_service.create_product(NewProduct(
            name="Ghost", price=Decimal("1.00"), stock_quantity=1, user_id="abc",
        ))

    assert await product_repo.search() == []
