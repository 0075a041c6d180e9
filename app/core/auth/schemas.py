from pydantic import BaseModel, EmailStr, Field

from app.modules.users.schemas import UserResponse

class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Email registrado")
    password: str = Field(..., min_length=1, description="Contraseña")

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

__all__ = ["LoginRequest", "TokenResponse", "UserResponse"]
