# NG-HEADER: Nombre de archivo: reader.py
# NG-HEADER: Ubicación: services/transactions/reader.py
# NG-HEADER: Descripción: Consultas de transacciones con filtros, paginación y relaciones.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Lecturas de transacciones.

Cada resultado viene con sus líneas (y el producto de cada línea) y la persona
ya cargadas, para que la serialización no dispare lazy loads fuera de la
sesión.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.config import settings
from db.models import Transaction, TransactionLine
from .errors import InvalidSortError, TransactionNotFoundError
from .writer import to_naive_utc

SORTABLE_FIELDS = {
    "transaction_date": Transaction.transaction_date,
    "total_amount": Transaction.total_amount,
    "created_at": Transaction.created_at,
    "id": Transaction.id,
}


@dataclass
class TransactionFilters:
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    rut: Optional[str] = None
    payment_method: Optional[str] = None
    kind: Optional[str] = None
    counterparty_id: Optional[str] = None


@dataclass
class PageRequest:
    page: Optional[int] = 1
    limit: Optional[int] = None
    sort_by: Optional[str] = "transaction_date"
    order: Optional[str] = "desc"

    def normalized(self) -> "PageRequest":
        page = max(1, int(self.page or 1))
        limit = int(self.limit or settings.default_page_size)
        limit = min(settings.max_page_size, max(1, limit))
        sort_by = self.sort_by or "transaction_date"
        if sort_by not in SORTABLE_FIELDS:
            raise InvalidSortError(sort_by)
        order = "asc" if (self.order or "").lower() == "asc" else "desc"
        return PageRequest(page=page, limit=limit, sort_by=sort_by, order=order)

    @property
    def offset(self) -> int:
        return (int(self.page) - 1) * int(self.limit)


@dataclass
class Page:
    items: List[Transaction] = field(default_factory=list)
    total_count: int = 0
    current_page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return (self.total_count + self.limit - 1) // self.limit if self.total_count else 0


def _with_relations(stmt: Select) -> Select:
    return stmt.options(
        selectinload(Transaction.lines).selectinload(TransactionLine.product),
        selectinload(Transaction.person),
    ).execution_options(populate_existing=True)


def apply_filters(stmt: Select, filters: TransactionFilters) -> Select:
    if filters.start_date:
        stmt = stmt.where(Transaction.transaction_date >= to_naive_utc(filters.start_date))
    if filters.end_date:
        stmt = stmt.where(Transaction.transaction_date <= to_naive_utc(filters.end_date))
    if filters.rut:
        stmt = stmt.where(Transaction.rut == filters.rut)
    if filters.payment_method:
        stmt = stmt.where(Transaction.payment_method == filters.payment_method)
    if filters.kind:
        stmt = stmt.where(Transaction.kind == filters.kind)
    if filters.counterparty_id:
        stmt = stmt.where(Transaction.counterparty_id == filters.counterparty_id)
    return stmt


async def fetch_one(db: AsyncSession, transaction_id: int, kind: Optional[str] = None) -> Transaction:
    stmt = select(Transaction).where(Transaction.id == transaction_id)
    if kind is not None:
        stmt = stmt.where(Transaction.kind == kind)
    tx = (await db.execute(_with_relations(stmt))).scalar_one_or_none()
    if tx is None:
        raise TransactionNotFoundError(transaction_id, kind)
    return tx


async def fetch_page(db: AsyncSession, filters: TransactionFilters, page: PageRequest) -> Page:
    page = page.normalized()
    stmt = apply_filters(select(Transaction), filters)
    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    column = SORTABLE_FIELDS[page.sort_by]
    if page.order == "asc":
        stmt = stmt.order_by(column.asc(), Transaction.id.asc())
    else:
        stmt = stmt.order_by(column.desc(), Transaction.id.desc())
    stmt = stmt.limit(page.limit).offset(page.offset)
    rows = (await db.execute(_with_relations(stmt))).scalars().all()
    return Page(items=list(rows), total_count=int(total or 0), current_page=page.page, limit=page.limit)


async def fetch_all(db: AsyncSession, filters: TransactionFilters) -> List[Transaction]:
    """Sin paginar, más recientes primero (listado por RUT)."""
    stmt = apply_filters(select(Transaction), filters).order_by(
        Transaction.transaction_date.desc(), Transaction.id.desc()
    )
    return list((await db.execute(_with_relations(stmt))).scalars().all())
