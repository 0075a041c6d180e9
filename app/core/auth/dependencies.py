from typing import List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.shared.database.models import User
from .security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Usuario autenticado a partir del Bearer token; falla cerrado con 401"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Token de acceso requerido")

    payload = decode_access_token(credentials.credentials)

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Token inválido o expirado")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthorizedError("Usuario del token no existe")
    return user

def require_roles(allowed_roles: List[str]):
    """Dependencia que restringe el endpoint a ciertos roles"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise ForbiddenError(f"Rol '{current_user.role}' no autorizado para esta operación")
        return current_user
    return role_checker
