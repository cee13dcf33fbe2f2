# NG-HEADER: Nombre de archivo: logging_setup.py
# NG-HEADER: Ubicación: services/logging_setup.py
# NG-HEADER: Descripción: Configura el logger del servicio con consola y archivo rotativo
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Logger ``inventario`` del servicio.

Consola + ``logs/backend.log`` (RotatingFileHandler, 10MB x 5). Con
``LOG_JSON=1`` ambos handlers emiten JSON compacto en lugar de texto plano.
Los módulos usan hijos (``inventario.transactions``, ``inventario.auth``...)
que propagan hasta acá.
"""
from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from core.config import settings

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}
_INITIALIZED = False


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        meta = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS and not k.startswith("_")}
        if meta:
            base["extra"] = meta
        return json.dumps(base, ensure_ascii=False, default=str)


def _level_name(raw: str | None) -> str:
    name = (raw or "INFO").strip().upper()
    return name if name in logging._nameToLevel else "INFO"


def setup_logging() -> logging.Logger:
    """Configura ``inventario`` una sola vez; devuelve el logger raíz del servicio."""
    global _INITIALIZED
    logger = logging.getLogger("inventario")
    if _INITIALIZED:
        return logger
    level = _level_name(settings.log_level)
    logger.setLevel(level)
    fmt: logging.Formatter = JsonFormatter() if settings.log_json else logging.Formatter(TEXT_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(fmt)
    handlers: list[logging.Handler] = [stream_handler]

    log_path = Path(settings.log_dir) / "backend.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        # delay=True evita abrir el archivo hasta el primer log
        file_handler = RotatingFileHandler(
            str(log_path), maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8", delay=True
        )
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)
    except OSError:
        # Sin permisos de escritura: sólo consola
        logger.warning("No se pudo abrir %s; se loguea sólo a consola", log_path)

    for handler in handlers:
        logger.addHandler(handler)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = list(handlers)
        logging.getLogger(name).setLevel(level)
    _INITIALIZED = True
    return logger
