"""
Name: Inventory Workflow Tests

Responsibilities:
  - Concurrent purchases never overdraw stock
  - Restock then purchase restores the original quantity
  - Typed errors for missing records, insufficient stock and bad input
  - Values outside the column range never reach the store unchecked
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy.exc import DataError

from sweetshop.core.errors import InsufficientStockError, NotFoundError, ValidationError
from sweetshop.models.sweet import MAX_QUANTITY
from sweetshop.services.sweet_service import SweetService

pytestmark = pytest.mark.unit


@pytest.fixture
def service(db):
    return SweetService(db)


def _create(service, quantity=5, **overrides):
    data = {"name": "Gummy", "category": "Candy", "price": Decimal("1.00"), "quantity": quantity}
    data.update(overrides)
    return service.create_sweet(data)


def test_concurrent_purchases_never_overdraw(session_factory, make_sweet, stored_quantity):
    stock = 3
    attempts = 8
    sweet_id = make_sweet(quantity=stock)

    def purchase_one():
        with session_factory() as session:
            try:
                SweetService(session).purchase_sweet(sweet_id, 1)
                return "ok"
            except InsufficientStockError:
                return "insufficient"

    with ThreadPoolExecutor(max_workers=attempts) as pool:
        outcomes = list(pool.map(lambda _: purchase_one(), range(attempts)))

    assert outcomes.count("ok") == stock
    assert outcomes.count("insufficient") == attempts - stock
    assert stored_quantity(sweet_id) == 0


def test_restock_then_purchase_round_trip(service):
    sweet = _create(service, quantity=6)

    service.restock_sweet(sweet.id, 9)
    result = service.purchase_sweet(sweet.id, 9)

    assert result.quantity == 6


def test_purchase_insufficient_stock_keeps_quantity(service):
    sweet = _create(service, quantity=2)

    with pytest.raises(InsufficientStockError):
        service.purchase_sweet(sweet.id, 3)

    assert service.list_sweets()[0].quantity == 2


def test_purchase_and_restock_unknown_sweet(service):
    with pytest.raises(NotFoundError):
        service.purchase_sweet(404, 1)
    with pytest.raises(NotFoundError):
        service.restock_sweet(404, 1)


@pytest.mark.parametrize("quantity", [0, -2, 1.0, "1", None, False])
def test_quantity_must_be_positive_integer(service, quantity):
    sweet = _create(service)

    with pytest.raises(ValidationError):
        service.purchase_sweet(sweet.id, quantity)
    with pytest.raises(ValidationError):
        service.restock_sweet(sweet.id, quantity)


def test_validation_precedes_lookup(service):
    with pytest.raises(ValidationError):
        service.purchase_sweet(404, 0)


def test_create_requires_every_field(service):
    with pytest.raises(ValidationError):
        service.create_sweet({"name": "Gummy", "category": "Candy", "price": Decimal("1")})


def test_update_merges_supplied_fields(service):
    sweet = _create(service, quantity=5)

    updated = service.update_sweet(sweet.id, {"category": "Gummies"})

    assert updated.name == "Gummy"
    assert updated.category == "Gummies"
    assert updated.quantity == 5
    assert updated.price == Decimal("1.00")


def test_update_and_delete_unknown(service):
    with pytest.raises(NotFoundError):
        service.update_sweet(404, {"name": "X"})
    with pytest.raises(NotFoundError):
        service.delete_sweet(404)


def test_search_rejects_inverted_range_without_data(service):
    with pytest.raises(ValidationError):
        service.search_sweets(min_price="5", max_price="1")


def test_search_without_filters_returns_all(service):
    _create(service, name="A")
    _create(service, name="B")

    assert len(service.search_sweets()) == 2
    assert service.search_sweets(name="zzz") == []


def test_purchase_beyond_column_range_is_insufficient_stock(service):
    sweet = _create(service, quantity=5)

    with pytest.raises(InsufficientStockError):
        service.purchase_sweet(sweet.id, 2**63)


def test_restock_stops_at_maximum_quantity(service):
    sweet = _create(service, quantity=MAX_QUANTITY)

    with pytest.raises(ValidationError):
        service.restock_sweet(sweet.id, 1)

    assert service.list_sweets()[0].quantity == MAX_QUANTITY


@pytest.mark.parametrize("price", ["1.005", "100000000", Decimal("1E+30")])
def test_create_rejects_unstorable_price(service, price):
    with pytest.raises(ValidationError):
        _create(service, price=price)


def test_trailing_zero_decimals_are_accepted(service):
    sweet = _create(service, price="2.500")

    assert sweet.price == Decimal("2.50")


@pytest.mark.parametrize("error", [
    DataError("UPDATE sweets", {}, Exception("integer out of range")),
    OverflowError("Python int too large to convert to SQLite INTEGER"),
])
def test_store_range_errors_become_validation_errors(service, monkeypatch, error):
    sweet = _create(service, quantity=5)

    def reject(sweet_id, quantity):
        raise error

    monkeypatch.setattr(service.sweet_repo, "increment_quantity", reject)

    with pytest.raises(ValidationError):
        service.restock_sweet(sweet.id, 1)
