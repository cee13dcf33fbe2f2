# NG-HEADER: Nombre de archivo: manage.py
# NG-HEADER: Ubicación: cli/manage.py
# NG-HEADER: Descripción: CLI de mantenimiento (esquema y datos de ejemplo)
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""CLI del servicio de transacciones usando Typer."""
from __future__ import annotations

import asyncio

import typer
from sqlalchemy import select

from db.models import Person, Product
from db.session import SessionLocal, engine, init_schema
from services.logging_setup import setup_logging
from services.transactions import TransactionError, purchases_service, sales_service

app = typer.Typer(help="Herramientas de línea de comandos del servicio de transacciones")

SAMPLE_PERSONS = [
    {"rut": "11111111-1", "name": "Ana", "lastname": "Pérez"},
    {"rut": "22222222-2", "name": "Bruno", "lastname": "Soto"},
]
SAMPLE_PRODUCTS = [
    {"id": 1, "name": "Harina", "measure": "kg", "type": "insumo", "price": 1200},
    {"id": 2, "name": "Azúcar", "measure": "kg", "type": "insumo", "price": 900},
    {"id": 3, "name": "Pan amasado", "measure": "unidad", "type": "producto", "price": 250},
]


@app.command()
def db_init() -> None:
    """Crea las tablas si no existen (en Postgres usar ``alembic upgrade head``)."""

    async def _run() -> None:
        await init_schema()
        await engine.dispose()

    asyncio.run(_run())
    typer.echo("Esquema creado")


async def _seed() -> list[dict]:
    await init_schema()
    async with SessionLocal() as session:
        async with session.begin():
            for data in SAMPLE_PERSONS:
                if await session.get(Person, data["rut"]) is None:
                    session.add(Person(**data))
            existing = set((await session.execute(select(Product.id))).scalars())
            for data in SAMPLE_PRODUCTS:
                if data["id"] not in existing:
                    session.add(Product(**data))
        sale = await sales_service.create(
            session,
            {"rut": "11111111-1", "payment_method": "debit_card", "notes": "venta de ejemplo"},
            [{"product_id": 3, "quantity": 12}],
        )
        purchase = await purchases_service.create(
            session,
            {"rut": "22222222-2", "payment_method": "bank_transfer", "notes": "compra de ejemplo"},
            [{"product_id": 1, "quantity": 10}, {"product_id": 2, "quantity": 5}],
        )
    await engine.dispose()
    return [sale, purchase]


@app.command()
def seed() -> None:
    """Carga personas y productos de ejemplo y registra una venta y una compra."""
    setup_logging()
    try:
        created = asyncio.run(_seed())
    except TransactionError as exc:
        typer.echo(f"Error: {exc.code} {exc.detail}", err=True)
        raise typer.Exit(code=1)
    for tx in created:
        typer.echo(f"{tx['transaction_type']} #{tx['id']} total={tx['total_amount']}")


if __name__ == "__main__":
    app()
