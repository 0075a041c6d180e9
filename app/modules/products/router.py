from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import User
from .schemas import ProductCreate, ProductResponse, ProductUpdate
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    service = ProductService(db)
    return await service.create(product_data)

@router.get("", response_model=List[ProductResponse])
async def list_products(db: Session = Depends(get_db)):
    service = ProductService(db)
    return await service.find_all()

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: Session = Depends(get_db)):
    service = ProductService(db)
    return await service.find_one(product_id)

@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    update_data: ProductUpdate,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    service = ProductService(db)
    return await service.update(product_id, update_data)

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    service = ProductService(db)
    await service.remove(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
