# NG-HEADER: Nombre de archivo: serializers.py
# NG-HEADER: Ubicación: services/transactions/serializers.py
# NG-HEADER: Descripción: Conversión de transacciones ORM a dicts planos.
# NG-HEADER: Lineamientos: Ver AGENTS.md
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from db.models import KIND_SALE, Person, Product, Transaction, TransactionLine


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def format_local(dt: Optional[datetime], tz_name: str) -> Optional[str]:
    """Fecha UTC naive -> ISO en la zona de visualización."""
    if dt is None:
        return None
    aware = dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt
    return aware.astimezone(ZoneInfo(tz_name)).isoformat()


def serialize_person(p: Optional[Person]) -> Optional[dict]:
    if p is None:
        return None
    return {"rut": p.rut, "name": p.name, "lastname": p.lastname, "beneficiary_id": p.beneficiary_id}


def serialize_product(p: Optional[Product]) -> Optional[dict]:
    if p is None:
        return None
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "measure": p.measure,
        "type": p.type,
        "price": p.price,
    }


def serialize_line(line: TransactionLine) -> dict:
    unit = float(line.unit_price or 0)
    return {
        "id": line.id,
        "product_id": line.product_id,
        "quantity": line.quantity,
        "unit_price": unit,
        "subtotal": round(unit * line.quantity, 2),
        "product": serialize_product(line.product),
    }


def serialize_transaction(t: Transaction, *, tz_name: Optional[str] = None) -> dict:
    out = {
        "id": t.id,
        "kind": t.kind,
        "transaction_type": "Venta" if t.kind == KIND_SALE else "Compra",
        "transaction_date": _iso(t.transaction_date),
        "rut": t.rut,
        "payment_method": t.payment_method,
        "total_amount": float(t.total_amount or 0),
        "notes": t.notes,
        "counterparty_id": t.counterparty_id,
        "created_at": _iso(t.created_at),
        "updated_at": _iso(t.updated_at),
        "person": serialize_person(t.person),
        "lines": [serialize_line(l) for l in t.lines],
    }
    if tz_name:
        out["formatted_date"] = format_local(t.transaction_date, tz_name)
    return out
