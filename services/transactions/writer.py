# NG-HEADER: Nombre de archivo: writer.py
# NG-HEADER: Ubicación: services/transactions/writer.py
# NG-HEADER: Descripción: Escrituras de transacciones y líneas dentro de una unidad atómica.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Pasos de escritura de transacciones.

Todas las funciones reciben la sesión con la transacción de base ya abierta
(la abre el servicio) y nunca hacen commit ni rollback: sólo ``flush`` para
obtener ids. Orden fijo: validar -> insertar cabecera -> insertar líneas ->
completar total.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import KIND_PURCHASE, Transaction, TransactionLine
from .errors import ItemsRequiredError, TransactionNotFoundError
from .totals import resolve_total
from .validator import ResolvedItem, coerce_items, get_person, resolve_products, validate_references

# Campos escalares que el llamador puede informar en la cabecera
SCALAR_FIELDS = (
    "rut",
    "payment_method",
    "transaction_date",
    "total_amount",
    "notes",
    "counterparty_id",
    "kind",
)
# Columnas NOT NULL: un ``None`` explícito en un update se ignora
_NON_NULLABLE = {"rut", "payment_method", "transaction_date"}


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Las fechas se guardan en UTC sin tzinfo."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _scalar_fields(fields: Mapping[str, Any]) -> dict:
    return {k: fields[k] for k in SCALAR_FIELDS if k in fields}


async def _insert_lines(db: AsyncSession, tx: Transaction, resolved: Iterable[ResolvedItem]) -> List[TransactionLine]:
    lines: List[TransactionLine] = []
    for it in resolved:
        line = TransactionLine(
            transaction_id=tx.id,
            product_id=it.product_id,
            quantity=it.quantity,
            unit_price=it.unit_price,
        )
        db.add(line)
        lines.append(line)
    await db.flush()
    return lines


async def _delete_lines(db: AsyncSession, tx: Transaction) -> None:
    await db.execute(
        delete(TransactionLine)
        .where(TransactionLine.transaction_id == tx.id)
        .execution_options(synchronize_session=False)
    )
    # La colección en memoria quedó vieja; se recarga en la relectura
    db.expire(tx, ["lines"])


async def load_for_write(db: AsyncSession, transaction_id: int, kind: Optional[str] = None) -> Transaction:
    """Busca la cabecera (bloqueándola) respetando el tipo; un tipo distinto cuenta como inexistente."""
    stmt = select(Transaction).where(Transaction.id == transaction_id)
    if kind is not None:
        stmt = stmt.where(Transaction.kind == kind)
    tx = (await db.execute(stmt.with_for_update())).scalar_one_or_none()
    if tx is None:
        raise TransactionNotFoundError(transaction_id, kind)
    return tx


async def insert_transaction(
    db: AsyncSession,
    fields: Mapping[str, Any],
    items: Iterable[Any],
    *,
    kind: Optional[str] = None,
) -> Transaction:
    """Crea cabecera y líneas. ``kind`` fuerza el tipo e ignora el del payload."""
    items = list(items or [])
    if not items:
        raise ItemsRequiredError()
    data = _scalar_fields(fields)
    explicit_total = data.pop("total_amount", None)
    # Valida el total informado antes de tocar la base; 0 provisorio si no vino
    initial_total = resolve_total(explicit_total, [])
    resolved = await validate_references(db, data.get("rut"), items)

    requested_kind = data.pop("kind", None)
    tx = Transaction(
        **data,
        kind=kind or requested_kind or KIND_PURCHASE,
        total_amount=initial_total,
    )
    tx.transaction_date = to_naive_utc(data.get("transaction_date")) or datetime.utcnow()
    db.add(tx)
    await db.flush()

    lines = await _insert_lines(db, tx, resolved)
    if explicit_total is None:
        tx.total_amount = resolve_total(None, lines)
        await db.flush()
    return tx


async def update_transaction(
    db: AsyncSession,
    transaction_id: int,
    fields: Mapping[str, Any],
    items: Optional[Iterable[Any]] = None,
    *,
    kind: Optional[str] = None,
) -> Transaction:
    """Merge de la cabecera y, si ``items`` no es ``None``, reemplazo total de líneas.

    ``items=[]`` borra todas las líneas (total recalculado a 0 salvo override).
    """
    tx = await load_for_write(db, transaction_id, kind)
    data = _scalar_fields(fields)
    # El tipo no cambia por update
    data.pop("kind", None)
    if kind is not None:
        tx.kind = kind

    explicit_total = data.pop("total_amount", None)
    validated_total = resolve_total(explicit_total, [])

    # Un RUT vacío también pasa por get_person
    if "rut" in data and data["rut"] is not None and data["rut"] != tx.rut:
        await get_person(db, data["rut"])

    if "transaction_date" in data:
        data["transaction_date"] = to_naive_utc(data["transaction_date"])
    for key, value in data.items():
        if value is None and key in _NON_NULLABLE:
            continue
        setattr(tx, key, value)

    if items is not None:
        requests = coerce_items(items)
        await _delete_lines(db, tx)
        resolved = await resolve_products(db, requests)
        lines = await _insert_lines(db, tx, resolved)
        tx.total_amount = resolve_total(explicit_total, lines)
    elif explicit_total is not None:
        tx.total_amount = validated_total

    tx.updated_at = datetime.utcnow()
    await db.flush()
    return tx


async def delete_transaction(db: AsyncSession, transaction_id: int, *, kind: Optional[str] = None) -> None:
    """Borra líneas y cabecera. No depende del ON DELETE CASCADE del motor."""
    tx = await load_for_write(db, transaction_id, kind)
    await _delete_lines(db, tx)
    await db.delete(tx)
    await db.flush()
