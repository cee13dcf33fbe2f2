# NG-HEADER: Nombre de archivo: runserver.py
# NG-HEADER: Ubicación: services/runserver.py
# NG-HEADER: Descripción: Arranque local del servicio con uvicorn
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Servidor de desarrollo local.

Fija la política Selector del event loop en Windows antes de levantar Uvicorn
(psycopg async la necesita).
"""

from __future__ import annotations

import asyncio
import os
import sys

import uvicorn


def _apply_windows_loop_policy() -> None:
    if sys.platform.startswith("win"):
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


def main() -> None:
    _apply_windows_loop_policy()
    host = os.getenv("INVENTARIO_HOST", "127.0.0.1")
    port = int(os.getenv("INVENTARIO_PORT", "8000"))
    log_level = os.getenv("LOG_LEVEL", "info").lower()
    uvicorn.run(
        "services.api:app",
        host=host,
        port=port,
        reload=os.getenv("INVENTARIO_RELOAD", "1") == "1",
        log_level=log_level,
        access_log=True,
    )


if __name__ == "__main__":
    main()
