from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.shared.schemas import ResponseBaseModel

# ===== ENUMS =====

class UserRole(str, Enum):
    AGENT = "agent"
    ADMIN = "admin"

# ===== REQUEST SCHEMAS =====

class UserCreate(BaseModel):
    """Registro público de usuario; el rol asignado es siempre agent"""
    name: str = Field(..., min_length=1, max_length=255, description="Nombre completo")
    email: EmailStr = Field(..., description="Email único del usuario")
    password: str = Field(..., min_length=6, max_length=72, description="Contraseña en texto plano")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str):
        return v.lower()

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: Optional[str]):
        return v.lower() if v else v

# ===== RESPONSE SCHEMAS =====

class UserResponse(ResponseBaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime
