# NG-HEADER: Nombre de archivo: base.py
# NG-HEADER: Ubicación: db/base.py
# NG-HEADER: Descripción: Base declarativa compartida por personas, productos y transacciones.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Declarative base para los modelos."""
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Nombres de constraints estables para que las migraciones no dependan del motor
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
