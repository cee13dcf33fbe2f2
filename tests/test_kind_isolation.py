# NG-HEADER: Nombre de archivo: test_kind_isolation.py
# NG-HEADER: Ubicación: tests/test_kind_isolation.py
# NG-HEADER: Descripción: Tests de aislamiento entre ventas y compras sobre la misma tabla.
# NG-HEADER: Lineamientos: Ver AGENTS.md
import pytest

from services.transactions import (
    TransactionNotFoundError,
    purchases_service,
    sales_service,
    transactions_service,
)

ITEMS = [{"product_id": 1, "quantity": 1}]


async def _purchase(db):
    return await purchases_service.create(db, {"rut": "11111111-1", "payment_method": "cash"}, ITEMS)


async def _sale(db):
    return await sales_service.create(db, {"rut": "11111111-1", "payment_method": "debit_card"}, ITEMS)


@pytest.mark.asyncio
async def test_purchase_is_invisible_to_sales(seeded, db):
    purchase = await _purchase(db)

    with pytest.raises(TransactionNotFoundError) as exc:
        await sales_service.get_by_id(db, purchase["id"])
    assert exc.value.code == "SALE_NOT_FOUND"
    with pytest.raises(TransactionNotFoundError):
        await sales_service.update(db, purchase["id"], {"notes": "x"})
    with pytest.raises(TransactionNotFoundError):
        await sales_service.delete(db, purchase["id"])

    still = await purchases_service.get_by_id(db, purchase["id"])
    assert still["notes"] is None
    assert still["kind"] == "purchase"


@pytest.mark.asyncio
async def test_sale_is_invisible_to_purchases(seeded, db):
    sale = await _sale(db)
    with pytest.raises(TransactionNotFoundError) as exc:
        await purchases_service.get_by_id(db, sale["id"])
    assert exc.value.code == "PURCHASE_NOT_FOUND"
    with pytest.raises(TransactionNotFoundError):
        await purchases_service.delete(db, sale["id"])
    assert (await sales_service.get_by_id(db, sale["id"]))["transaction_type"] == "Venta"


@pytest.mark.asyncio
async def test_scoped_create_ignores_requested_kind(seeded, db):
    sale = await sales_service.create(
        db, {"rut": "11111111-1", "payment_method": "cash", "kind": "purchase"}, ITEMS
    )
    assert sale["kind"] == "sale"


@pytest.mark.asyncio
async def test_generic_create_honours_kind_and_defaults_to_purchase(seeded, db):
    default = await transactions_service.create(db, {"rut": "11111111-1", "payment_method": "cash"}, ITEMS)
    explicit = await transactions_service.create(
        db, {"rut": "11111111-1", "payment_method": "cash", "kind": "sale"}, ITEMS
    )
    assert default["kind"] == "purchase"
    assert explicit["kind"] == "sale"


@pytest.mark.asyncio
async def test_kind_cannot_change_through_update(seeded, db):
    purchase = await _purchase(db)
    edited = await transactions_service.update(db, purchase["id"], {"kind": "sale"})
    assert edited["kind"] == "purchase"
    edited = await purchases_service.update(db, purchase["id"], {"kind": "sale"})
    assert edited["kind"] == "purchase"


@pytest.mark.asyncio
async def test_listings_are_scoped(seeded, db):
    purchase = await _purchase(db)
    sale = await _sale(db)

    sales_page = await sales_service.list(db)
    assert [t["id"] for t in sales_page["items"]] == [sale["id"]]
    # Un kind pedido explícitamente no rompe el alcance del servicio
    sales_page = await sales_service.list(db, kind="purchase")
    assert [t["id"] for t in sales_page["items"]] == [sale["id"]]

    by_rut = await purchases_service.get_by_rut(db, "11111111-1")
    assert [t["id"] for t in by_rut["transactions"]] == [purchase["id"]]

    everything = await transactions_service.list(db)
    assert everything["total_count"] == 2
    only_sales = await transactions_service.list(db, kind="sale")
    assert [t["id"] for t in only_sales["items"]] == [sale["id"]]
