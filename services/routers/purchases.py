# NG-HEADER: Nombre de archivo: purchases.py
# NG-HEADER: Ubicación: services/routers/purchases.py
# NG-HEADER: Descripción: Endpoints de compras (CRUD y consultas por RUT y rango de fechas)
# NG-HEADER: Lineamientos: Ver AGENTS.md
from services.routers.transactions import make_router
from services.transactions import purchases_service
from services.transactions.schemas import PurchaseCreate, PurchaseUpdate

router = make_router("/purchases", purchases_service, PurchaseCreate, PurchaseUpdate, "purchases")
