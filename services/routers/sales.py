# NG-HEADER: Nombre de archivo: sales.py
# NG-HEADER: Ubicación: services/routers/sales.py
# NG-HEADER: Descripción: Endpoints de ventas (CRUD y consultas por RUT y rango de fechas)
# NG-HEADER: Lineamientos: Ver AGENTS.md
from services.routers.transactions import make_router
from services.transactions import sales_service
from services.transactions.schemas import SaleCreate, SaleUpdate

router = make_router("/sales", sales_service, SaleCreate, SaleUpdate, "sales")
