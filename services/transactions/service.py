# NG-HEADER: Nombre de archivo: service.py
# NG-HEADER: Ubicación: services/transactions/service.py
# NG-HEADER: Descripción: Fachada de operaciones sobre transacciones, ventas y compras.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Fachada consumida por la capa HTTP (y la CLI).

Un ``TransactionService`` por tipo: ``kind=None`` opera sobre todas las
transacciones, ``"sale"``/``"purchase"`` filtran y estampan ese tipo. Cada
operación recibe la sesión explícitamente y abre su propia unidad de trabajo;
si el llamador ya tiene una transacción abierta, la operación corre en un
SAVEPOINT y el commit final queda de su lado.

Devuelve dicts planos; los errores de dominio salen como ``TransactionError``
y cualquier falla de la base como ``StoreFailureError`` (con rollback previo).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Iterable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.models import KIND_PURCHASE, KIND_SALE
from . import reader, writer
from .errors import DateRequiredError, RutRequiredError, StoreFailureError, TransactionError
from .reader import PageRequest, TransactionFilters
from .serializers import serialize_transaction
from .validator import get_person

logger = logging.getLogger("inventario.transactions")


class TransactionService:
    def __init__(self, kind: Optional[str] = None) -> None:
        self.kind = kind
        self.label = {KIND_SALE: "venta", KIND_PURCHASE: "compra"}.get(kind, "transacción")

    @asynccontextmanager
    async def _unit_of_work(self, db: AsyncSession, op: str) -> AsyncIterator[None]:
        ctx = db.begin_nested() if db.in_transaction() else db.begin()
        try:
            async with ctx:
                yield
        except TransactionError as exc:
            logger.warning("%s %s rechazada: %s", op, self.label, exc.code)
            raise
        except SQLAlchemyError as exc:
            logger.exception("%s %s: falla de base, rollback aplicado", op, self.label)
            raise StoreFailureError() from exc

    def _filters(self, **kwargs: Any) -> TransactionFilters:
        filters = TransactionFilters(**kwargs)
        if self.kind is not None:
            filters.kind = self.kind
        return filters

    def _page_payload(self, page: reader.Page, *, tz_name: Optional[str] = None) -> dict:
        return {
            "items": [serialize_transaction(t, tz_name=tz_name) for t in page.items],
            "total_count": page.total_count,
            "current_page": page.current_page,
            "total_pages": page.total_pages,
            "limit": page.limit,
        }

    async def _read_back(self, db: AsyncSession, transaction_id: int) -> dict:
        async with self._unit_of_work(db, "read"):
            tx = await reader.fetch_one(db, transaction_id, self.kind)
            return serialize_transaction(tx)

    # --- Escrituras ---

    async def create(self, db: AsyncSession, fields: Mapping[str, Any], items: Iterable[Any]) -> dict:
        async with self._unit_of_work(db, "create"):
            tx = await writer.insert_transaction(db, fields, items, kind=self.kind)
            tx_id, total, kind = tx.id, tx.total_amount, tx.kind
        logger.info("%s creada id=%s kind=%s total=%s", self.label, tx_id, kind, total)
        return await self._read_back(db, tx_id)

    async def update(
        self,
        db: AsyncSession,
        transaction_id: int,
        fields: Mapping[str, Any],
        items: Optional[Iterable[Any]] = None,
    ) -> dict:
        async with self._unit_of_work(db, "update"):
            tx = await writer.update_transaction(db, transaction_id, fields, items, kind=self.kind)
            total = tx.total_amount
        logger.info(
            "%s actualizada id=%s total=%s lines_replaced=%s",
            self.label, transaction_id, total, items is not None,
        )
        return await self._read_back(db, transaction_id)

    async def delete(self, db: AsyncSession, transaction_id: int) -> None:
        async with self._unit_of_work(db, "delete"):
            await writer.delete_transaction(db, transaction_id, kind=self.kind)
        logger.info("%s eliminada id=%s", self.label, transaction_id)

    # --- Lecturas ---

    async def get_by_id(self, db: AsyncSession, transaction_id: int) -> dict:
        return await self._read_back(db, transaction_id)

    async def list(
        self,
        db: AsyncSession,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        rut: Optional[str] = None,
        payment_method: Optional[str] = None,
        kind: Optional[str] = None,
        counterparty_id: Optional[str] = None,
        page: Optional[PageRequest] = None,
    ) -> dict:
        filters = self._filters(
            start_date=start_date,
            end_date=end_date,
            rut=rut,
            payment_method=payment_method,
            kind=kind,
            counterparty_id=counterparty_id,
        )
        async with self._unit_of_work(db, "list"):
            result = await reader.fetch_page(db, filters, page or PageRequest())
            return self._page_payload(result)

    async def get_by_rut(self, db: AsyncSession, rut: str) -> dict:
        """Todas las transacciones de la persona, sin paginar."""
        async with self._unit_of_work(db, "by_rut"):
            person = await get_person(db, rut)
            rows = await reader.fetch_all(db, self._filters(rut=rut))
            return {
                "total_transactions": len(rows),
                "rut": rut,
                "person_name": person.display_name,
                "transactions": [serialize_transaction(t) for t in rows],
            }

    async def get_by_date_range(
        self,
        db: AsyncSession,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        page: Optional[PageRequest] = None,
    ) -> dict:
        if not start_date and not end_date:
            raise DateRequiredError()
        filters = self._filters(start_date=start_date, end_date=end_date)
        async with self._unit_of_work(db, "by_date_range"):
            result = await reader.fetch_page(db, filters, page or PageRequest())
            payload = self._page_payload(result, tz_name=settings.display_timezone)
        payload.update({"start_date": _iso(start_date), "end_date": _iso(end_date)})
        return payload

    async def get_by_date_range_and_rut(
        self,
        db: AsyncSession,
        rut: Optional[str],
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        page: Optional[PageRequest] = None,
    ) -> dict:
        if not rut:
            raise RutRequiredError()
        filters = self._filters(rut=rut, start_date=start_date, end_date=end_date)
        async with self._unit_of_work(db, "by_date_range_rut"):
            person = await get_person(db, rut)
            result = await reader.fetch_page(db, filters, page or PageRequest())
            payload = self._page_payload(result, tz_name=settings.display_timezone)
        payload.update({
            "rut": rut,
            "person_name": person.display_name,
            "start_date": _iso(start_date),
            "end_date": _iso(end_date),
        })
        return payload


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


transactions_service = TransactionService()
sales_service = TransactionService(KIND_SALE)
purchases_service = TransactionService(KIND_PURCHASE)
