# NG-HEADER: Nombre de archivo: validator.py
# NG-HEADER: Ubicación: services/transactions/validator.py
# NG-HEADER: Descripción: Verificación de persona y productos referenciados por una transacción.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Validación de referencias antes de escribir.

Se invoca con la misma sesión (y por ende la misma transacción de base) que la
escritura posterior. Las lecturas piden ``FOR SHARE`` donde el motor lo
soporta, así un producto no puede desaparecer entre la validación y el insert
de la línea; en SQLite la cláusula se omite y la FK cubre el caso.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Person, Product
from .errors import (
    InvalidProductIdError,
    InvalidQuantityError,
    ItemsRequiredError,
    PersonNotFoundError,
    ProductNotFoundError,
)


@dataclass(frozen=True)
class ItemRequest:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class ResolvedItem:
    product_id: int
    quantity: int
    unit_price: Decimal


def coerce_items(items: Iterable[Any]) -> List[ItemRequest]:
    """Normaliza dicts o modelos pydantic a ``ItemRequest``."""
    out: List[ItemRequest] = []
    for it in items:
        if isinstance(it, ItemRequest):
            out.append(it)
            continue
        if isinstance(it, dict):
            pid, qty = it.get("product_id"), it.get("quantity")
        else:
            pid, qty = getattr(it, "product_id", None), getattr(it, "quantity", None)
        if pid is None:
            raise ItemsRequiredError("Cada producto requiere product_id")
        if isinstance(pid, bool) or (isinstance(pid, float) and not pid.is_integer()):
            raise InvalidProductIdError(pid)
        try:
            pid = int(pid)
        except (TypeError, ValueError):
            raise InvalidProductIdError(pid) from None
        if not isinstance(qty, int) or isinstance(qty, bool) or qty <= 0:
            raise InvalidQuantityError(pid, qty)
        out.append(ItemRequest(product_id=pid, quantity=qty))
    return out


async def get_person(db: AsyncSession, rut: str | None) -> Person:
    if not rut:
        raise PersonNotFoundError(rut)
    person = (
        await db.execute(select(Person).where(Person.rut == rut).with_for_update(read=True))
    ).scalar_one_or_none()
    if person is None:
        raise PersonNotFoundError(rut)
    return person


async def resolve_products(db: AsyncSession, items: Iterable[ItemRequest]) -> List[ResolvedItem]:
    """Resuelve cada producto en orden; corta en el primero inexistente."""
    resolved: List[ResolvedItem] = []
    for it in items:
        product = (
            await db.execute(select(Product).where(Product.id == it.product_id).with_for_update(read=True))
        ).scalar_one_or_none()
        if product is None:
            raise ProductNotFoundError(it.product_id)
        resolved.append(
            ResolvedItem(product_id=product.id, quantity=it.quantity, unit_price=Decimal(str(product.price)))
        )
    return resolved


async def validate_references(db: AsyncSession, rut: str | None, items: Iterable[Any]) -> List[ResolvedItem]:
    """Confirma persona y productos; devuelve las líneas con el precio vigente."""
    requests = coerce_items(items)
    await get_person(db, rut)
    return await resolve_products(db, requests)
