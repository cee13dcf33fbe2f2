# NG-HEADER: Nombre de archivo: test_transactions_api.py
# NG-HEADER: Ubicación: tests/test_transactions_api.py
# NG-HEADER: Descripción: Tests HTTP de /transactions, /sales y /purchases.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""
Tests de integración HTTP.

Valida:
- Códigos de estado (201/204/400/404/422)
- Forma ``{"detail", "code"}`` de los errores de dominio
- Aislamiento por tipo entre /sales y /purchases
- Header X-Correlation-Id
"""
import pytest

SALE = {
    "rut": "11111111-1",
    "payment_method": "debit_card",
    "items": [{"product_id": 1, "quantity": 2}],
}


@pytest.mark.asyncio
async def test_create_sale_returns_joined_record(seeded, client):
    r = await client.post("/sales", json=SALE)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["kind"] == "sale"
    assert body["transaction_type"] == "Venta"
    assert body["total_amount"] == 1000.0
    assert body["person"]["name"] == "Ana"
    assert body["lines"][0]["product"]["id"] == 1

    r = await client.get(f"/sales/{body['id']}")
    assert r.status_code == 200
    assert r.json()["id"] == body["id"]


@pytest.mark.asyncio
async def test_purchase_rejects_sale_only_payment_method(seeded, client):
    r = await client.post("/purchases", json=SALE)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_create_validation_errors(seeded, client):
    r = await client.post("/sales", json={**SALE, "items": []})
    assert r.status_code == 422
    r = await client.post("/sales", json={**SALE, "items": [{"product_id": 1, "quantity": 0}]})
    assert r.status_code == 422
    r = await client.post("/sales", json={**SALE, "notes": "x" * 1001})
    assert r.status_code == 422
    r = await client.post("/sales", json={**SALE, "total_amount": -1})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_create_with_unknown_references(seeded, client):
    r = await client.post("/sales", json={**SALE, "rut": "99999999-9"})
    assert r.status_code == 404
    assert r.json()["code"] == "PERSON_NOT_FOUND"

    r = await client.post("/sales", json={**SALE, "items": [{"product_id": 999, "quantity": 1}]})
    assert r.status_code == 404
    assert r.json() == {"detail": "Producto con ID 999 no encontrado", "code": "PRODUCT_NOT_FOUND:999"}

    r = await client.get("/sales")
    assert r.json()["total_count"] == 0


@pytest.mark.asyncio
async def test_kind_isolation_over_http(seeded, client):
    purchase = (await client.post("/purchases", json={**SALE, "payment_method": "cash"})).json()

    r = await client.get(f"/sales/{purchase['id']}")
    assert r.status_code == 404
    assert r.json()["code"] == "SALE_NOT_FOUND"
    r = await client.put(f"/sales/{purchase['id']}", json={"notes": "x"})
    assert r.status_code == 404
    r = await client.delete(f"/sales/{purchase['id']}")
    assert r.status_code == 404

    r = await client.get(f"/transactions/{purchase['id']}")
    assert r.status_code == 200
    assert r.json()["kind"] == "purchase"


@pytest.mark.asyncio
async def test_put_replaces_items_and_omitted_items_are_kept(seeded, client):
    created = (await client.post("/purchases", json={**SALE, "payment_method": "cash"})).json()

    r = await client.put(f"/purchases/{created['id']}", json={"notes": "sólo notas"})
    assert r.status_code == 200
    assert len(r.json()["lines"]) == 1
    assert r.json()["notes"] == "sólo notas"

    r = await client.put(
        f"/purchases/{created['id']}",
        json={"items": [{"product_id": 2, "quantity": 2}, {"product_id": 3, "quantity": 2}]},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["total_amount"] == 2900.0
    assert len(body["lines"]) == 2

    r = await client.put(f"/purchases/{created['id']}", json={"notes": "null no borra", "items": None})
    assert r.status_code == 200
    assert len(r.json()["lines"]) == 2
    assert r.json()["total_amount"] == 2900.0

    r = await client.put(f"/purchases/{created['id']}", json={"items": []})
    assert r.json()["lines"] == []
    assert r.json()["total_amount"] == 0.0


@pytest.mark.asyncio
async def test_delete_returns_204_then_404(seeded, client):
    created = (await client.post("/sales", json=SALE)).json()
    r = await client.delete(f"/sales/{created['id']}")
    assert r.status_code == 204
    r = await client.get(f"/sales/{created['id']}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_list_pagination_and_sort(seeded, client):
    for qty in (1, 3, 2):
        await client.post("/sales", json={**SALE, "items": [{"product_id": 3, "quantity": qty}]})

    r = await client.get("/sales", params={"limit": 2, "sort_by": "total_amount", "order": "asc"})
    assert r.status_code == 200
    body = r.json()
    assert body["total_count"] == 3
    assert body["total_pages"] == 2
    assert [t["total_amount"] for t in body["items"]] == [250.0, 500.0]

    r = await client.get("/sales", params={"sort_by": "rut"})
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_SORT"


@pytest.mark.asyncio
async def test_by_rut_and_date_range_routes(seeded, client):
    await client.post("/sales", json={**SALE, "transaction_date": "2024-05-10T10:00:00"})

    r = await client.get("/sales/person/33333333-3")
    assert r.status_code == 200
    assert r.json()["total_transactions"] == 0
    assert r.json()["transactions"] == []

    r = await client.get("/sales/person/99999999-9")
    assert r.status_code == 404

    r = await client.get("/sales/date-range")
    assert r.status_code == 400
    assert r.json()["code"] == "DATE_REQUIRED"

    r = await client.get("/sales/date-range", params={"start_date": "2024-05-01T00:00:00", "end_date": "2024-05-31T23:59:59"})
    assert r.status_code == 200
    assert r.json()["total_count"] == 1
    assert "formatted_date" in r.json()["items"][0]

    r = await client.get("/sales/date-range-rut", params={"start_date": "2024-05-01T00:00:00"})
    assert r.status_code == 400
    assert r.json()["code"] == "RUT_REQUIRED"

    r = await client.get("/sales/date-range-rut", params={"rut": "11111111-1", "start_date": "2024-05-01T00:00:00"})
    assert r.status_code == 200
    assert r.json()["person_name"] == "Ana Pérez"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(seeded, client):
    r = await client.get("/sales", headers={"X-Correlation-Id": "abc-123"})
    assert r.headers["X-Correlation-Id"] == "abc-123"
    r = await client.get("/sales")
    assert r.headers["X-Correlation-Id"].startswith("req-")
