# NG-HEADER: Nombre de archivo: schemas.py
# NG-HEADER: Ubicación: services/transactions/schemas.py
# NG-HEADER: Descripción: Modelos pydantic de entrada para transacciones, ventas y compras.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Validación de forma/tipo de los payloads (antes de llegar al núcleo)."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from db.models import NOTES_MAX_LENGTH

PaymentMethod = Literal["cash", "credit_card", "bank_transfer", "check", "credit_line"]
SalePaymentMethod = Literal[
    "cash", "credit_card", "bank_transfer", "check", "credit_line", "debit_card", "digital_wallet"
]
Kind = Literal["sale", "purchase"]


class LineItemIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_id: int
    quantity: int = Field(gt=0)


class _TransactionBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transaction_date: Optional[datetime] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)
    counterparty_id: Optional[str] = Field(default=None, max_length=64)

    def header_fields(self) -> dict:
        """Campos de cabecera informados por el cliente (sin ``items``)."""
        return self.model_dump(exclude={"items"}, exclude_unset=True)

    def items_or_none(self) -> Optional[List[LineItemIn]]:
        """``None`` si ``items`` no vino o vino ``null``; ``[]`` es un reemplazo por lista vacía."""
        if "items" not in self.model_fields_set or self.items is None:
            return None
        return list(self.items)


class TransactionCreate(_TransactionBase):
    rut: str = Field(min_length=1)
    payment_method: PaymentMethod
    items: List[LineItemIn] = Field(min_length=1)
    # Sólo lo respeta el servicio genérico; ventas/compras lo fuerzan
    kind: Optional[Kind] = None


class TransactionUpdate(_TransactionBase):
    rut: Optional[str] = Field(default=None, min_length=1)
    payment_method: Optional[PaymentMethod] = None
    items: Optional[List[LineItemIn]] = None
    kind: Optional[Kind] = None


class SaleCreate(TransactionCreate):
    payment_method: SalePaymentMethod


class SaleUpdate(TransactionUpdate):
    payment_method: Optional[SalePaymentMethod] = None


class PurchaseCreate(TransactionCreate):
    pass


class PurchaseUpdate(TransactionUpdate):
    pass
