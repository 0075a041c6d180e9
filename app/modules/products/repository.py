from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.shared.database.models import Product

class ProductRepository:
    """
    Repositorio del catálogo de productos
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.id).all()

    def create(self, product_data: dict) -> Product:
        try:
            product = Product(**product_data)
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
            return product
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def update(self, product: Product, update_data: dict) -> Product:
        try:
            for key, value in update_data.items():
                setattr(product, key, value)
            self.db.commit()
            self.db.refresh(product)
            return product
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def delete(self, product: Product) -> None:
        try:
            self.db.delete(product)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e
