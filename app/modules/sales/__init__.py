# app/modules/sales/__init__.py
"""
Módulo de Ventas y Comisiones

- Registro de ventas con comisión calculada a la tasa vigente
- Consultas por agente, por rango de fechas y agrupadas por agente
- Marcado masivo de comisiones pagadas
- Reportes por correo (bajo demanda y mensual)

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio (motor de comisiones y reportes)
- repository.py: Acceso a datos
- reports.py: Plantillas HTML de los correos
- tasks.py: Tarea mensual de comisiones pendientes
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]
