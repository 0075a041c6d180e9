"""
Cola de notificaciones en memoria.

Los productores (reportes de ventas, tarea mensual) solo esperan a que el
trabajo sea aceptado en la cola; la entrega la hace un worker asíncrono que
consume en orden FIFO y reintenta ante fallos del transporte. Garantía hacia
el transporte: al menos un intento por trabajo, sin orden garantizado entre
reintentos.
"""
import asyncio
import logging
from typing import Awaitable, Callable

from app.core.exceptions import InternalError
from .schemas import EmailJob

logger = logging.getLogger(__name__)

Transport = Callable[[EmailJob], Awaitable[None]]


class NotificationQueueClosedError(InternalError):
    def __init__(self):
        super().__init__("La cola de notificaciones está cerrada")


class NotificationQueue:

    def __init__(self, maxsize: int = 0):
        # maxsize=0: cola sin límite
        self._queue: "asyncio.Queue[EmailJob]" = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self.delivered = 0
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        return self._queue.qsize()

    async def enqueue(self, job: EmailJob) -> None:
        """Aceptar un trabajo; retorna al encolar, no al entregar"""
        if self._closed:
            raise NotificationQueueClosedError()
        await self._queue.put(job)
        logger.info(f"📨 Correo encolado para {job.recipient}: {job.subject} (pendientes: {self.qsize()})")

    def close(self) -> None:
        """Dejar de aceptar trabajos; los ya aceptados siguen en la cola"""
        self._closed = True

    async def drain(self) -> None:
        """Esperar a que todos los trabajos aceptados sean procesados"""
        await self._queue.join()

    async def consume(
        self,
        transport: Transport,
        max_attempts: int = 3,
        retry_delay: float = 5.0
    ) -> None:
        """Worker: consume la cola indefinidamente (cancelar la tarea para detenerlo)"""
        logger.info("Worker de notificaciones iniciado")
        while True:
            job = await self._queue.get()
            try:
                await self._deliver(job, transport, max_attempts, retry_delay)
            finally:
                self._queue.task_done()

    async def _deliver(
        self,
        job: EmailJob,
        transport: Transport,
        max_attempts: int,
        retry_delay: float
    ) -> bool:
        for attempt in range(1, max_attempts + 1):
            try:
                await transport(job)
                self.delivered += 1
                logger.info(f"✅ Correo entregado a {job.recipient} (intento {attempt})")
                return True
            except Exception as e:
                logger.warning(
                    f"Fallo entregando correo a {job.recipient} "
                    f"(intento {attempt}/{max_attempts}): {e}"
                )
                if attempt < max_attempts:
                    await asyncio.sleep(retry_delay * attempt)

        self.dropped += 1
        logger.error(f"❌ Correo descartado tras {max_attempts} intentos: {job.recipient} - {job.subject}")
        return False
