# NG-HEADER: Nombre de archivo: __init__.py
# NG-HEADER: Ubicación: services/transactions/__init__.py
# NG-HEADER: Descripción: Núcleo de consistencia y totales de transacciones.
# NG-HEADER: Lineamientos: Ver AGENTS.md
from .errors import (  # noqa: F401
    DateRequiredError,
    InvalidProductIdError,
    InvalidQuantityError,
    InvalidSortError,
    InvalidTotalError,
    ItemsRequiredError,
    PersonNotFoundError,
    ProductNotFoundError,
    RutRequiredError,
    StoreFailureError,
    TransactionError,
    TransactionNotFoundError,
)
from .reader import PageRequest, TransactionFilters  # noqa: F401
from .service import (  # noqa: F401
    TransactionService,
    purchases_service,
    sales_service,
    transactions_service,
)
from .totals import compute_total, resolve_total  # noqa: F401
