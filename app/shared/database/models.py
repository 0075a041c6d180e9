from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Numeric
from sqlalchemy.sql import func
from app.config.database import Base

class TimestampMixin:
    """Mixin para timestamps automáticos (UTC sin zona horaria)"""
    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, server_default=func.now(), nullable=False)

# ===== USUARIOS =====

class User(Base, TimestampMixin):
    """Modelo de Usuario (agentes y administradores)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), default='agent', nullable=False)

# ===== PRODUCTOS =====

class Product(Base, TimestampMixin):
    """Modelo de Producto del catálogo"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

# ===== VENTAS =====

class Sale(Base, TimestampMixin):
    """
    Modelo de Venta.

    commission guarda el producto exacto amount × tasa: amount tiene 2 decimales
    y la tasa hasta 4, por eso la escala 6.

    agent_id y product_id son referencias sin llave foránea: el catálogo y el
    directorio de usuarios se gestionan por separado y los datos de display se
    resuelven con un join explícito en el repositorio.
    """
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    commission = Column(Numeric(16, 6), nullable=False)
    is_commission_paid = Column(Boolean, default=False, nullable=False, index=True)
    agent_id = Column(Integer, nullable=False, index=True)
    product_id = Column(Integer, nullable=False, index=True)
