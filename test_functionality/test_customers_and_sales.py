"""Customer lookups and sales history."""

from datetime import timedelta
from decimal import Decimal

import pytest

from application.dto import CustomerQuery, NewCustomer, SalesQuery
from domain.entities import Customer, Sale, SaleItem
from domain.exceptions import InvalidActionError, InvalidIdentifierError
from domain.time_utils import to_iso, utcnow


@pytest.fixture
def record_sale(sales_repo, user_id):
    async def _record(customer_id=None, lines=(), created_at=""):
        items = [
            SaleItem(
                product_id=product_id,
                quantity=quantity,
                unit_price=Decimal(price),
                subtotal=Decimal(price) * quantity,
            )
            for product_id, quantity, price in lines
        ]
        return await sales_repo.save(
            Sale(
                customer_id=customer_id,
                total_amount=sum((i.subtotal for i in items), Decimal("0")),
                payment_method="cash",
                user_id=user_id,
                created_at=created_at,
            ),
            items,
        )
    return _record


async def test_create_and_search_customers(customer_service, user_id):
    await customer_service.create_customer(NewCustomer(
        name="Alice Martin", email="alice@example.com", phone="555-0101", user_id=user_id,
    ))
    await customer_service.create_customer(NewCustomer(name="Bob Chen", phone="555-0199", user_id=user_id))

    by_email = await customer_service.list_customers(CustomerQuery(search="ALICE@"))
    assert [c.name for c in by_email] == ["Alice Martin"]

    by_phone = await customer_service.list_customers(CustomerQuery(search="0199"))
    assert [c.name for c in by_phone] == ["Bob Chen"]


async def test_customer_limit(customer_service, user_id):
    for i in range(4):
        await customer_service.create_customer(NewCustomer(name=f"Customer {i}", user_id=user_id))

    customers = await customer_service.list_customers(CustomerQuery(limit=2))

    assert len(customers) == 2


async def test_create_customer_requires_uuid_user(customer_service):
    with pytest.raises(InvalidIdentifierError):
        await customer_service.create_customer(NewCustomer(name="Nobody", user_id="abc"))


async def test_recent_sales_totals_cover_three_latest_sales(customer_repo, customer_service, make_product, record_sale, user_id):
    customer = await customer_repo.save(Customer(name="Regular", user_id=user_id))
    product = await make_product(price="10.00")
    base = utcnow()
    for days_ago, quantity in [(4, 1), (3, 2), (2, 3), (1, 4)]:
        await record_sale(
            customer.id,
            [(product.id, quantity, "10.00")],
            created_at=to_iso(base - timedelta(days=days_ago)),
        )

    [summary] = await customer_service.list_customers(CustomerQuery(search="Regular"))

    assert summary.recent_sales == 3
    assert summary.total_recent_sales == Decimal("90.00")


async def test_sales_include_items_and_walk_in_name(customer_repo, sales_service, make_product, record_sale, user_id):
    customer = await customer_repo.save(Customer(name="Dana", user_id=user_id))
    pen = await make_product(name="Pen", price="1.50")
    pad = await make_product(name="Pad", price="3.25")
    await record_sale(customer.id, [(pen.id, 2, "1.50"), (pad.id, 1, "3.25")])
    await record_sale(None, [(pen.id, 1, "1.50")])

    sales = await sales_service.list_sales(SalesQuery())

    assert [s.customer for s in sales] == ["Walk-in Customer", "Dana"]
    dana = sales[1]
    assert dana.items_count == 2
    assert dana.total_amount == Decimal("6.25")
    assert {line.product for line in dana.items} == {"Pen", "Pad"}


async def test_sales_date_range_is_inclusive(sales_service, record_sale):
    await record_sale(created_at="2024-03-01T00:00:00.000000+00:00")
    await record_sale(created_at="2024-03-15T12:00:00.000000+00:00")
    await record_sale(created_at="2024-04-01T00:00:00.000000+00:00")

    sales = await sales_service.list_sales(SalesQuery(date_from="2024-03-01", date_to="2024-04-01"))

    assert len(sales) == 3

    march_only = await sales_service.list_sales(
        SalesQuery(date_from="2024-03-02", date_to="2024-03-31"),
    )
    assert [s.created_at for s in march_only] == ["2024-03-15T12:00:00.000000+00:00"]


async def test_sales_filter_by_customer_and_limit(customer_repo, sales_service, record_sale, user_id):
    customer = await customer_repo.save(Customer(name="Eve", user_id=user_id))
    for _ in range(3):
        await record_sale(customer.id)
    await record_sale(None)

    sales = await sales_service.list_sales(SalesQuery(customer_id=customer.id, limit=2))

    assert len(sales) == 2
    assert all(s.customer == "Eve" for s in sales)


async def test_bad_date_is_invalid_action(sales_service):
    with pytest.raises(InvalidActionError, match="Invalid date"):
        await sales_service.list_sales(SalesQuery(date_from="last tuesday"))
