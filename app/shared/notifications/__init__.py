from .mailer import EmailService
from .queue import NotificationQueue, NotificationQueueClosedError
from .schemas import EmailJob

__all__ = [
    "EmailJob",
    "EmailService",
    "NotificationQueue",
    "NotificationQueueClosedError"
]
