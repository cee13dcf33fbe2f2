# NG-HEADER: Nombre de archivo: api.py
# NG-HEADER: Ubicación: services/api.py
# NG-HEADER: Descripción: Aplicación FastAPI del microservicio de transacciones
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Aplicación FastAPI principal del servicio de transacciones."""

# --- Windows psycopg async fix (no-op en otros SO) ---
import sys, asyncio
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
# --- end fix ---

import os
import time

from fastapi import FastAPI, Request
from fastapi import HTTPException as FastHTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from core.config import settings
from db.session import engine, init_schema
from services.logging_setup import setup_logging
from services.transactions import TransactionError
from .routers import health, purchases, sales, transactions

logger = setup_logging()

# `redirect_slashes=False` evita redirecciones 307 entre `/ruta` y `/ruta/`,
# lo que rompe las solicitudes *preflight* de CORS.
app = FastAPI(title="Inventario - Transacciones", redirect_slashes=False)

logger.info("DB effective URL: %s", engine.url.render_as_string(hide_password=True))


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Registra cada solicitud y captura excepciones con un correlation-id."""
    start = time.perf_counter()
    corr = request.headers.get("x-correlation-id") or request.headers.get("x-request-id")
    if not corr:
        # epoch-ms + pid
        corr = f"req-{int(time.time() * 1000):x}-{os.getpid():x}"
    try:
        resp = await call_next(request)
    except (FastHTTPException, StarletteHTTPException):
        raise
    except Exception:
        dur = (time.perf_counter() - start) * 1000
        logger.exception("EXC %s %s cid=%s (%.2fms)", request.method, request.url.path, corr, dur)
        return JSONResponse(
            {"detail": "Error interno del servidor", "code": "INTERNAL_ERROR"},
            status_code=500,
            headers={"X-Correlation-Id": corr},
        )
    dur = (time.perf_counter() - start) * 1000
    resp.headers["X-Correlation-Id"] = corr
    logger.info("%s %s -> %s cid=%s (%.2fms)", request.method, request.url.path, resp.status_code, corr, dur)
    return resp


# --- Exception Handlers Específicos ---
@app.exception_handler(TransactionError)
async def transaction_error_handler(request: Request, exc: TransactionError):  # type: ignore[override]
    """Errores de dominio -> ``{"detail", "code"}`` con su status."""
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
    """Loguea los campos inválidos y mantiene el contrato 422 por defecto de FastAPI."""
    flat = [
        {
            "loc": ".".join(str(p) for p in e.get("loc", [])),
            "msg": e.get("msg", ""),
            "type": e.get("type", ""),
        }
        for e in exc.errors()
    ]
    logger.warning("Validación fallida 422 %s %s: %s", request.method, request.url.path, flat)
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(transactions.router)
app.include_router(sales.router)
app.include_router(purchases.router)


@app.on_event("startup")
async def _ensure_schema() -> None:
    # En Postgres el esquema lo gestiona Alembic
    if engine.dialect.name == "sqlite":
        await init_schema()
        logger.info("Esquema SQLite verificado")
