from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user
from app.core.auth.schemas import LoginRequest, TokenResponse, UserResponse
from app.core.auth.service import AuthService
from app.modules.users.schemas import UserCreate
from app.shared.database.models import User

router = APIRouter()

@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Iniciar sesión con email y contraseña

    - 404 si el email no está registrado
    - 401 si la contraseña no coincide
    """
    service = AuthService(db)
    return await service.sign_in(credentials.email, credentials.password)

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """Registrar usuario nuevo (409 si el email ya existe)"""
    service = AuthService(db)
    return await service.sign_up(user_data)

@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
