# NG-HEADER: Nombre de archivo: errors.py
# NG-HEADER: Ubicación: services/transactions/errors.py
# NG-HEADER: Descripción: Errores tipados del núcleo de transacciones.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Errores de dominio de transacciones.

Cada error lleva un ``code`` estable (el que usaban los clientes históricos,
p. ej. ``PRODUCT_NOT_FOUND:7``), el ``status_code`` HTTP sugerido y un
``detail`` en español apto para mostrar. La capa HTTP sólo traduce; la
decisión de qué error corresponde vive en el núcleo.
"""
from __future__ import annotations

from typing import Optional


class TransactionError(Exception):
    code = "TRANSACTION_ERROR"
    status_code = 400
    detail = "Error de transacción"

    def __init__(self, detail: Optional[str] = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.code)

    def to_dict(self) -> dict:
        return {"detail": self.detail, "code": self.code}


class PersonNotFoundError(TransactionError):
    code = "PERSON_NOT_FOUND"
    status_code = 404

    def __init__(self, rut: Optional[str] = None) -> None:
        self.rut = rut
        super().__init__("Persona con el RUT proporcionado no encontrada")


class ProductNotFoundError(TransactionError):
    status_code = 404

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        self.code = f"PRODUCT_NOT_FOUND:{product_id}"
        super().__init__(f"Producto con ID {product_id} no encontrado")


class TransactionNotFoundError(TransactionError):
    status_code = 404
    _LABELS = {
        None: ("TRANSACTION_NOT_FOUND", "Transacción no encontrada"),
        "sale": ("SALE_NOT_FOUND", "Venta no encontrada"),
        "purchase": ("PURCHASE_NOT_FOUND", "Compra no encontrada"),
    }

    def __init__(self, transaction_id: int, kind: Optional[str] = None) -> None:
        self.transaction_id = transaction_id
        self.kind = kind
        self.code, detail = self._LABELS.get(kind, self._LABELS[None])
        super().__init__(detail)


class DateRequiredError(TransactionError):
    code = "DATE_REQUIRED"
    detail = "Se requiere al menos un parámetro de fecha (start_date o end_date)"


class RutRequiredError(TransactionError):
    code = "RUT_REQUIRED"
    detail = "El parámetro RUT es requerido"


class ItemsRequiredError(TransactionError):
    code = "ITEMS_REQUIRED"
    detail = "Se requiere al menos un producto"


class InvalidQuantityError(TransactionError):
    code = "INVALID_QUANTITY"

    def __init__(self, product_id: int, quantity) -> None:
        self.product_id = product_id
        self.quantity = quantity
        super().__init__(f"La cantidad del producto {product_id} debe ser un entero positivo")


class InvalidTotalError(TransactionError):
    code = "INVALID_TOTAL"

    def __init__(self, value) -> None:
        self.value = value
        super().__init__("El monto total debe ser un número mayor o igual a 0")


class InvalidProductIdError(TransactionError):
    code = "INVALID_PRODUCT_ID"

    def __init__(self, value) -> None:
        self.value = value
        super().__init__(f"ID de producto inválido: {value!r}")


class InvalidSortError(TransactionError):
    code = "INVALID_SORT"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"No se puede ordenar por '{field}'")


class StoreFailureError(TransactionError):
    """Falla de la base (I/O, constraint, timeout). Nunca expone el detalle interno."""

    code = "STORE_FAILURE"
    status_code = 500
    detail = "Error interno del servidor"
