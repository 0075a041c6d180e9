"""Excepciones de la aplicación, traducidas a respuestas JSON en app.main."""


class AppError(Exception):
    """Base de todos los errores de negocio."""
    status_code = 500

    def __init__(self, message="Ocurrió un error interno", status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class NotFoundError(AppError):
    """Recurso referenciado inexistente."""
    status_code = 404

    def __init__(self, message="Recurso no encontrado", payload=None):
        super().__init__(message, payload=payload)


class ConflictError(AppError):
    status_code = 409

    def __init__(self, message="El recurso ya existe", payload=None):
        super().__init__(message, payload=payload)


class UnauthorizedError(AppError):
    """Credenciales inválidas o token inválido/expirado."""
    status_code = 401

    def __init__(self, message="No autorizado", payload=None):
        super().__init__(message, payload=payload)


class ForbiddenError(AppError):
    status_code = 403

    def __init__(self, message="No tienes permisos para esta operación", payload=None):
        super().__init__(message, payload=payload)


class ValidationError(AppError):
    status_code = 400

    def __init__(self, message="Datos inválidos", payload=None):
        super().__init__(message, payload=payload)


class InternalError(AppError):
    status_code = 500


class NotificationDispatchError(InternalError):
    """Uno o más correos no pudieron encolarse."""
    status_code = 502

    def __init__(self, failed, total):
        super().__init__(
            f"No se pudieron encolar {failed} de {total} correos",
            payload={"failed": failed, "total": total}
        )
        self.failed = failed
        self.total = total
