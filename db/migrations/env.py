# NG-HEADER: Nombre de archivo: env.py
# NG-HEADER: Ubicación: db/migrations/env.py
# NG-HEADER: Descripción: Script de entorno Alembic: carga .env, prepara logging y ejecuta migraciones
# NG-HEADER: Lineamientos: Ver AGENTS.md
import logging
import os
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import String, engine_from_config
from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool

logger = logging.getLogger("alembic.env")

config = context.config

# Logging (si alembic.ini tiene secciones de logging)
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Cargar .env desde la raíz del repo (dos niveles hacia arriba)
REPO_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(REPO_ROOT / ".env")

from core.config import settings  # noqa: E402  (después de load_dotenv)
from db.base import Base  # noqa: E402
import db.models  # noqa: E402,F401

target_metadata = Base.metadata


def _sync_url() -> str:
    """URL síncrona equivalente a la del servicio (Alembic corre sin asyncio)."""
    url = make_url(os.getenv("DB_URL") or settings.db_url)
    if url.drivername == "sqlite+aiosqlite":
        url = url.set(drivername="sqlite")
    return url.render_as_string(hide_password=False)


db_url = _sync_url()
logger.info("DB_URL: %s", make_url(db_url).render_as_string(hide_password=True))


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        version_table_column_type=String(255),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = db_url
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
            version_table_column_type=String(255),
        )
        with context.begin_transaction():
            context.run_migrations()
        logger.info("Migraciones aplicadas con éxito")


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
