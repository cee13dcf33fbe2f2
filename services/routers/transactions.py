# NG-HEADER: Nombre de archivo: transactions.py
# NG-HEADER: Ubicación: services/routers/transactions.py
# NG-HEADER: Descripción: Endpoints CRUD y consultas de transacciones (genérico, ventas, compras)
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Fábrica de routers sobre ``TransactionService``.

``/transactions``, ``/sales`` y ``/purchases`` comparten rutas y forma de
respuesta; cambian el servicio (tipo forzado) y los esquemas de entrada.
Los errores de dominio se traducen a HTTP en ``services.api``.
"""
from datetime import datetime
from typing import Optional, Type

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_session
from services.auth import require_api_token
from services.transactions import PageRequest, TransactionService, transactions_service
from services.transactions.schemas import Kind, TransactionCreate, TransactionUpdate


def make_router(
    prefix: str,
    service: TransactionService,
    create_schema: Type[TransactionCreate],
    update_schema: Type[TransactionUpdate],
    tag: str,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag], dependencies=[Depends(require_api_token)])

    def _page(page: int, limit: Optional[int], sort_by: str, order: str) -> PageRequest:
        return PageRequest(page=page, limit=limit, sort_by=sort_by, order=order)

    @router.post("", status_code=201)
    async def create_transaction(payload: create_schema, db: AsyncSession = Depends(get_session)):
        fields = payload.header_fields()
        if service.kind is not None:
            fields.pop("kind", None)
        return await service.create(db, fields, payload.items)

    @router.get("")
    async def list_transactions(
        start_date: Optional[datetime] = Query(None, description="Fecha/hora ISO inicio (inclusive)"),
        end_date: Optional[datetime] = Query(None, description="Fecha/hora ISO fin (inclusive)"),
        rut: Optional[str] = Query(None),
        payment_method: Optional[str] = Query(None),
        counterparty_id: Optional[str] = Query(None),
        kind: Optional[Kind] = Query(None, description="Sólo aplica en /transactions"),
        page: int = Query(1, ge=1),
        limit: Optional[int] = Query(None, ge=1),
        sort_by: str = Query("transaction_date"),
        order: str = Query("desc"),
        db: AsyncSession = Depends(get_session),
    ):
        return await service.list(
            db,
            start_date=start_date,
            end_date=end_date,
            rut=rut,
            payment_method=payment_method,
            kind=kind,
            counterparty_id=counterparty_id,
            page=_page(page, limit, sort_by, order),
        )

    @router.get("/person/{rut}")
    async def get_by_rut(rut: str, db: AsyncSession = Depends(get_session)):
        return await service.get_by_rut(db, rut)

    @router.get("/date-range")
    async def get_by_date_range(
        start_date: Optional[datetime] = Query(None),
        end_date: Optional[datetime] = Query(None),
        page: int = Query(1, ge=1),
        limit: Optional[int] = Query(None, ge=1),
        sort_by: str = Query("transaction_date"),
        order: str = Query("desc"),
        db: AsyncSession = Depends(get_session),
    ):
        return await service.get_by_date_range(
            db, start_date, end_date, _page(page, limit, sort_by, order)
        )

    @router.get("/date-range-rut")
    async def get_by_date_range_and_rut(
        rut: Optional[str] = Query(None),
        start_date: Optional[datetime] = Query(None),
        end_date: Optional[datetime] = Query(None),
        page: int = Query(1, ge=1),
        limit: Optional[int] = Query(None, ge=1),
        sort_by: str = Query("transaction_date"),
        order: str = Query("desc"),
        db: AsyncSession = Depends(get_session),
    ):
        return await service.get_by_date_range_and_rut(
            db, rut, start_date, end_date, _page(page, limit, sort_by, order)
        )

    @router.get("/{transaction_id}")
    async def get_transaction(transaction_id: int, db: AsyncSession = Depends(get_session)):
        return await service.get_by_id(db, transaction_id)

    @router.put("/{transaction_id}")
    async def update_transaction(
        transaction_id: int, payload: update_schema, db: AsyncSession = Depends(get_session)
    ):
        return await service.update(db, transaction_id, payload.header_fields(), payload.items_or_none())

    @router.delete("/{transaction_id}", status_code=204)
    async def delete_transaction(transaction_id: int, db: AsyncSession = Depends(get_session)):
        await service.delete(db, transaction_id)
        return Response(status_code=204)

    return router


router = make_router(
    "/transactions", transactions_service, TransactionCreate, TransactionUpdate, "transactions"
)
