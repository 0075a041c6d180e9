# app/api/v1/router.py
from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.config.settings import settings

# ✅ IMPORTAR MÓDULOS
from app.modules.products import products_router
from app.modules.sales import sales_router
from app.modules.users import users_router

# Router principal de la API
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])
api_router.include_router(products_router)
api_router.include_router(users_router)
api_router.include_router(sales_router)

@api_router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version
    }
