from fastapi import Request

from app.core.exceptions import InternalError
from .queue import NotificationQueue

def get_notification_queue(request: Request) -> NotificationQueue:
    """Cola creada en el lifespan de la aplicación"""
    queue = getattr(request.app.state, "notification_queue", None)
    if queue is None:
        raise InternalError("Cola de notificaciones no inicializada")
    return queue
