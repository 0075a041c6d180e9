"""
Catálogo de Productos

- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as products_router
from .service import ProductService
from .repository import ProductRepository

__all__ = [
    "products_router",
    "ProductService",
    "ProductRepository"
]
