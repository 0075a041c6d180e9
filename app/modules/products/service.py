import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.shared.database.models import Product
from .repository import ProductRepository
from .schemas import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)

class ProductService:
    """
    Catálogo de productos. Un cambio de precio solo afecta ventas futuras:
    las comisiones ya registradas no se recalculan.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductRepository(db)

    async def create(self, product_data: ProductCreate) -> ProductResponse:
        product = self.repository.create(product_data.model_dump())
        logger.info(f"Producto creado: {product.id} - {product.name}")
        return ProductResponse.model_validate(product)

    async def find_all(self) -> List[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_all()]

    async def find_one(self, product_id: int) -> ProductResponse:
        return ProductResponse.model_validate(self.get_or_404(product_id))

    async def update(self, product_id: int, update_data: ProductUpdate) -> ProductResponse:
        product = self.get_or_404(product_id)
        changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
        updated = self.repository.update(product, changes)
        return ProductResponse.model_validate(updated)

    async def remove(self, product_id: int) -> None:
        product = self.get_or_404(product_id)
        self.repository.delete(product)
        logger.info(f"Producto eliminado: {product_id}")

    def get_or_404(self, product_id: int) -> Product:
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Producto no encontrado")
        return product
