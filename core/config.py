# NG-HEADER: Nombre de archivo: config.py
# NG-HEADER: Ubicación: core/config.py
# NG-HEADER: Descripción: Configuración central del microservicio de transacciones.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Configuración central del servicio."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Carga automática de variables definidas en .env
load_dotenv()


def _expand_local(origins: list[str]) -> list[str]:
    """Duplica ``localhost``/``127.0.0.1`` para evitar errores de CORS en desarrollo."""
    out: set[str] = set()
    for o in origins:
        o = o.strip()
        if not o:
            continue
        out.add(o)
        if o.startswith("http://localhost:"):
            out.add(o.replace("http://localhost:", "http://127.0.0.1:"))
        if o.startswith("http://127.0.0.1:"):
            out.add(o.replace("http://127.0.0.1:", "http://localhost:"))
    return sorted(out)


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """Parámetros de configuración leídos de variables de entorno."""

    env: str = os.getenv("ENV", "dev")
    db_url: str = os.getenv("DB_URL", "")
    # Soporte para componer la URL si no se pasa DB_URL directamente
    db_host: str = os.getenv("DB_HOST", "localhost")
    db_port: str = os.getenv("DB_PORT", "5432")
    db_name: str = os.getenv("DB_NAME", "inventario")
    db_user: str = os.getenv("DB_USER", "")
    db_pass: str = os.getenv("DB_PASS", "")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: str = os.getenv("LOG_DIR", "logs")
    log_json: bool = _flag("LOG_JSON", "0")

    auth_enabled: bool = _flag("AUTH_ENABLED")
    api_token: str = os.getenv("API_TOKEN", "")
    # Token secreto para llamadas entre servicios internos
    internal_service_token: str = os.getenv("INTERNAL_SERVICE_TOKEN", "")
    # Secreto compartido con el servicio de autenticación (JWT HS256)
    jwt_secret: str = os.getenv("JWT_SECRET", "")

    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))
    # Zona usada para ``formatted_date`` en los listados por rango de fechas
    display_timezone: str = os.getenv("DISPLAY_TIMEZONE", "America/Santiago")
    allowed_origins: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.db_url:
            # Intentar construir desde variables sueltas
            if self.db_pass:
                from urllib.parse import quote_plus as _qp
                pw_enc = _qp(self.db_pass)
            else:
                pw_enc = ""
            if self.db_user and pw_enc:
                self.db_url = f"postgresql+psycopg://{self.db_user}:{pw_enc}@{self.db_host}:{self.db_port}/{self.db_name}"
            elif self.db_user:
                self.db_url = f"postgresql+psycopg://{self.db_user}@{self.db_host}:{self.db_port}/{self.db_name}"
        if not self.db_url:
            if self.env == "dev":
                # Fallback para no bloquear el arranque local sin Postgres
                self.db_url = "sqlite+aiosqlite:///./dev.db"
            else:
                raise RuntimeError("DB_URL debe definirse en el entorno")

        if self.auth_enabled and not (self.api_token or self.internal_service_token or self.jwt_secret):
            if self.env == "dev":
                self.api_token = "dev-token"
            else:
                raise RuntimeError("AUTH_ENABLED requiere JWT_SECRET, API_TOKEN o INTERNAL_SERVICE_TOKEN")

        if self.default_page_size < 1:
            self.default_page_size = 10
        if self.max_page_size < self.default_page_size:
            self.max_page_size = self.default_page_size

        raw = os.getenv("ALLOWED_ORIGINS", "").split(",")
        origins = [o.strip() for o in raw if o.strip()]
        if self.env == "dev":
            if not origins:
                origins = ["http://localhost:5173"]
            origins = _expand_local(origins)
        self.allowed_origins = origins


settings = Settings()
