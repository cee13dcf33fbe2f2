# NG-HEADER: Nombre de archivo: models.py
# NG-HEADER: Ubicación: db/models.py
# NG-HEADER: Descripción: Modelos ORM de personas, productos, transacciones y sus líneas.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Modelos principales de la base de datos."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


# Métodos de pago admitidos. Las ventas suman débito y billeteras digitales.
BASE_PAYMENT_METHODS = ("cash", "credit_card", "bank_transfer", "check", "credit_line")
SALE_PAYMENT_METHODS = BASE_PAYMENT_METHODS + ("debit_card", "digital_wallet")

KIND_SALE = "sale"
KIND_PURCHASE = "purchase"
TRANSACTION_KINDS = (KIND_SALE, KIND_PURCHASE)

NOTES_MAX_LENGTH = 1000


def _in_list(column: str, values: tuple[str, ...]) -> str:
    return f"{column} IN (" + ",".join(f"'{v}'" for v in values) + ")"


class Person(Base):
    __tablename__ = "persons"

    rut: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str] = mapped_column(String(120))
    lastname: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    beneficiary_id: Mapped[Optional[int]] = mapped_column("beneficiaryid", Integer, nullable=True)

    transactions: Mapped[list["Transaction"]] = relationship(back_populates="person")

    @property
    def display_name(self) -> str:
        return f"{self.name} {self.lastname or ''}".strip()


class Product(Base):
    __tablename__ = "product"

    id: Mapped[int] = mapped_column("productid", Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    measure: Mapped[str] = mapped_column(String(50))
    type: Mapped[str] = mapped_column(String(80))
    # Precio vivo en unidades enteras de moneda; las líneas guardan su propia copia
    price: Mapped[int] = mapped_column(Integer)


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint(_in_list("payment_method", SALE_PAYMENT_METHODS), name="payment_method"),
        CheckConstraint(_in_list("kind", TRANSACTION_KINDS), name="kind"),
        CheckConstraint("total_amount >= 0", name="total_amount_non_negative"),
        Index("ix_transactions_kind_date", "kind", "transaction_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    rut: Mapped[str] = mapped_column(ForeignKey("persons.rut"), index=True)
    payment_method: Mapped[str] = mapped_column(String(20))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    notes: Mapped[Optional[str]] = mapped_column(String(NOTES_MAX_LENGTH), nullable=True)
    kind: Mapped[str] = mapped_column(String(10), default=KIND_PURCHASE)
    # Cliente (ventas) o proveedor (compras); referencia libre
    counterparty_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    person: Mapped["Person"] = relationship(back_populates="transactions")
    lines: Mapped[list["TransactionLine"]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TransactionLine.id",
    )


class TransactionLine(Base):
    __tablename__ = "transaction_lines"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("transactions.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[int] = mapped_column(ForeignKey("product.productid"))
    quantity: Mapped[int] = mapped_column(Integer)
    # Precio unitario vigente al crear la línea
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    transaction: Mapped["Transaction"] = relationship(back_populates="lines")
    product: Mapped["Product"] = relationship()
