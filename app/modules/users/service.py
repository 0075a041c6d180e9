import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.shared.database.models import User
from .repository import UserRepository
from .schemas import UserResponse, UserUpdate

logger = logging.getLogger(__name__)

class UserService:
    """
    Directorio de usuarios: consulta, actualización y baja
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = UserRepository(db)

    async def find_all(self) -> List[UserResponse]:
        return [UserResponse.model_validate(u) for u in self.repository.get_all()]

    async def find_one(self, user_id: int) -> UserResponse:
        return UserResponse.model_validate(self._get_or_404(user_id))

    async def find_by_email(self, email: str) -> Optional[User]:
        """Retorna None si no existe (el llamador decide si es un error)"""
        return self.repository.get_by_email(email)

    async def update(self, user_id: int, update_data: UserUpdate) -> UserResponse:
        user = self._get_or_404(user_id)
        changes = update_data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes and changes["email"] != user.email:
            if self.repository.get_by_email(changes["email"]):
                raise ConflictError("Ya existe un usuario con este email")

        if "role" in changes:
            changes["role"] = changes["role"].value

        updated = self.repository.update(user, changes)
        logger.info(f"Usuario {user_id} actualizado: {sorted(changes)}")
        return UserResponse.model_validate(updated)

    async def remove(self, user_id: int) -> UserResponse:
        user = self._get_or_404(user_id)
        removed = UserResponse.model_validate(user)
        self.repository.delete(user)
        logger.info(f"Usuario {user_id} eliminado")
        return removed

    def _get_or_404(self, user_id: int) -> User:
        user = self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("Usuario no encontrado")
        return user
