#!/usr/bin/env python
# NG-HEADER: Nombre de archivo: conftest.py
# NG-HEADER: Ubicación: tests/conftest.py
# NG-HEADER: Descripción: Fixtures y configuración compartida de Pytest.
# NG-HEADER: Lineamientos: Ver AGENTS.md
import os
import sys
import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

# Asegurar path del proyecto antes de importar módulos internos
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

# -------- Entorno base de tests --------
# DB en memoria, auth apagada (los tests de auth la encienden) y logs fuera del repo
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENV"] = "dev"
os.environ["AUTH_ENABLED"] = "false"
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "inventario-tests-logs"))

import db.session as _session  # noqa: E402
import db.base as _base  # noqa: E402
import db.models  # noqa: F401,E402
from db.models import Person, Product  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

Base = _base.Base

PERSONS = [
    {"rut": "11111111-1", "name": "Ana", "lastname": "Pérez"},
    {"rut": "22222222-2", "name": "Bruno", "lastname": None},
    # Sin transacciones en ningún test
    {"rut": "33333333-3", "name": "Carla", "lastname": "Rojas"},
]
PRODUCTS = [
    {"id": 1, "name": "Harina", "measure": "kg", "type": "insumo", "price": 500},
    {"id": 2, "name": "Azúcar", "measure": "kg", "type": "insumo", "price": 1200},
    {"id": 3, "name": "Pan amasado", "measure": "unidad", "type": "producto", "price": 250},
]


@pytest_asyncio.fixture(scope="function", autouse=True)
async def db_session():
    """DB limpia por test (SQLite memoria compartida). Retorna sesión para usar en fixtures/tests."""
    engine = _session.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with _session.SessionLocal() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def seeded(db_session: AsyncSession) -> None:
    """Personas y productos de referencia (los crea/edita un sistema externo)."""
    db_session.add_all([Person(**p) for p in PERSONS])
    db_session.add_all([Product(**p) for p in PRODUCTS])
    await db_session.commit()


@pytest_asyncio.fixture
async def db(db_session) -> AsyncGenerator[AsyncSession, None]:
    """Sesión nueva, sin transacción abierta, para invocar los servicios."""
    async with _session.SessionLocal() as session:
        yield session


@pytest.fixture
def session_factory():
    """Para verificar el estado de la base desde una sesión independiente."""
    return _session.SessionLocal


# -------- Cliente HTTP asíncrono --------
@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    from services.api import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
