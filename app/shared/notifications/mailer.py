"""
Transporte SMTP para la cola de notificaciones.
"""
import asyncio
import logging
import re
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.config.settings import Settings
from .schemas import EmailJob

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


class EmailService:

    def __init__(
        self,
        sender: str,
        host: Optional[str],
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        suppress_send: bool = False,
        timeout: int = 30
    ):
        self.sender = sender
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.suppress_send = suppress_send
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            sender=settings.mail_from,
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            suppress_send=settings.mail_suppress_send
        )

    @property
    def enabled(self) -> bool:
        return not self.suppress_send and bool(self.host)

    async def send(self, job: EmailJob) -> None:
        """Enviar un correo; los errores SMTP se propagan para que el worker reintente"""
        if not self.enabled:
            logger.warning(f"[MAIL DISABLED] Correo omitido para {job.recipient}: {job.subject}")
            return

        message = self.build_message(job)
        # smtplib es bloqueante: fuera del event loop
        await asyncio.to_thread(self._send_sync, message)

    def build_message(self, job: EmailJob) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = job.subject
        msg["From"] = self.sender
        msg["To"] = job.recipient

        # Texto plano como alternativa para clientes sin HTML
        msg.set_content(_TAG_RE.sub("", job.html_body).strip(), charset="utf-8")
        msg.add_alternative(job.html_body, subtype="html", charset="utf-8")
        return msg

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)
        logger.info(f"SMTP: mensaje enviado a {message['To']}")
