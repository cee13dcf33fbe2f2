# NG-HEADER: Nombre de archivo: totals.py
# NG-HEADER: Ubicación: services/transactions/totals.py
# NG-HEADER: Descripción: Cálculo del monto total de una transacción.
# NG-HEADER: Lineamientos: Ver AGENTS.md
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from .errors import InvalidTotalError


def _field(item: Any, name: str):
    if isinstance(item, dict):
        return item[name]
    return getattr(item, name)


def compute_total(items: Iterable[Any]) -> Decimal:
    """Suma ``quantity * unit_price`` sobre las líneas (dicts u objetos)."""
    total = Decimal("0")
    for it in items:
        qty = Decimal(str(_field(it, "quantity")))
        unit = Decimal(str(_field(it, "unit_price")))
        total += qty * unit
    return total.quantize(Decimal("0.01"))


def resolve_total(explicit: Optional[Decimal | float | int | str], items: Iterable[Any]) -> Decimal:
    """Devuelve el total explícito del llamador o, si no vino, el calculado.

    ``None`` significa "no informado". Un ``0`` explícito se respeta. Un valor
    negativo o no numérico levanta ``InvalidTotalError``.
    """
    if explicit is None:
        return compute_total(items)
    try:
        value = Decimal(str(explicit))
    except InvalidOperation:
        raise InvalidTotalError(explicit) from None
    if not value.is_finite() or value < 0:
        raise InvalidTotalError(explicit)
    return value.quantize(Decimal("0.01"))
