# NG-HEADER: Nombre de archivo: health.py
# NG-HEADER: Ubicación: services/routers/health.py
# NG-HEADER: Descripción: Endpoints de healthcheck del servicio y de la base.
# NG-HEADER: Lineamientos: Ver AGENTS.md
from __future__ import annotations

"""Endpoints de health.

- Liveness básico (`/health`)
- Conectividad con la base (`/health/db`)

Ambos devuelven ``status``, ``timestamp`` (ISO UTC), ``version`` y el estado
por componente en ``components``.
"""

import logging
import time
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_db

router = APIRouter(prefix="/health", tags=["health"])
START_TIME = time.monotonic()
logger = logging.getLogger("inventario.health")


def _version() -> str:
    try:
        return version("inventario-transacciones")
    except PackageNotFoundError:
        # Corriendo desde el árbol sin instalar
        return "0.0.0+local"


APP_VERSION = _version()


def _payload(status: str, components: Dict[str, Dict[str, str]]) -> Dict[str, Any]:
    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
        "uptime_s": round(time.monotonic() - START_TIME, 1),
        "components": components,
    }


@router.get("")
async def health_root() -> Dict[str, Any]:
    """Liveness simple del backend (si responde, está vivo)."""
    return _payload("ok", {"server": {"status": "up"}})


@router.get("/db")
async def health_db(db: AsyncSession = Depends(get_db)):
    """Ejecuta ``SELECT 1``; 503 si la base no responde."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("health/db: %s", exc)
        return JSONResponse(
            status_code=503,
            content=_payload("degraded", {"database": {"status": "down"}, "server": {"status": "up"}}),
        )
    return _payload("up", {"database": {"status": "up"}, "server": {"status": "up"}})
