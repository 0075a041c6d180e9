from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user, require_roles
from app.core.exceptions import ForbiddenError
from app.shared.database.models import User
from .schemas import UserResponse, UserUpdate
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("", response_model=List[UserResponse])
async def list_users(
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    service = UserService(db)
    return await service.find_all()

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = UserService(db)
    return await service.find_one(user_id)

@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    update_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Actualizar usuario: el propio usuario o un administrador.
    Solo un administrador puede cambiar roles.
    """
    is_admin = current_user.role == "admin"
    if current_user.id != user_id and not is_admin:
        raise ForbiddenError("Solo puedes modificar tu propio usuario")
    if update_data.role is not None and not is_admin:
        raise ForbiddenError("Solo un administrador puede cambiar roles")

    service = UserService(db)
    return await service.update(user_id, update_data)

@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(
    user_id: int,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    service = UserService(db)
    return await service.remove(user_id)
