import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.modules.users.repository import UserRepository
from app.modules.users.schemas import UserCreate, UserResponse, UserRole
from .schemas import TokenResponse
from .security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

class AuthService:
    """
    Registro e inicio de sesión
    """

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    async def sign_up(self, user_data: UserCreate) -> UserResponse:
        """
        Registrar usuario nuevo.

        Raises:
            ConflictError: si el email ya está registrado
        """
        return self._create_user(user_data, UserRole.AGENT)

    async def create_admin(self, user_data: UserCreate) -> UserResponse:
        """Alta de administrador; solo desde la CLI, nunca por HTTP"""
        return self._create_user(user_data, UserRole.ADMIN)

    def _create_user(self, user_data: UserCreate, role: UserRole) -> UserResponse:
        if self.users.get_by_email(user_data.email):
            raise ConflictError("Ya existe un usuario con este email")

        user_dict = user_data.model_dump()
        user_dict["role"] = role.value
        user_dict["password_hash"] = hash_password(user_dict.pop("password"))

        user = self.users.create(user_dict)
        logger.info(f"Usuario registrado: {user.email} ({user.role})")
        return UserResponse.model_validate(user)

    async def sign_in(self, email: str, password: str) -> TokenResponse:
        """
        Validar credenciales y emitir token de acceso.

        Raises:
            NotFoundError: si el email no existe
            UnauthorizedError: si la contraseña no coincide
        """
        user = self.users.get_by_email(email)
        if not user:
            raise NotFoundError("Usuario no encontrado")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Intento de login fallido para {email}")
            raise UnauthorizedError("Credenciales inválidas")

        token = create_access_token({"sub": str(user.id), "email": user.email})
        return TokenResponse(access_token=token)
