"""
Disparador mensual: ejecuta un job el día `day` de cada mes a la hora indicada
(hora local del servidor). Se registra en el lifespan de la aplicación.
"""
import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


def next_run_after(now: datetime, day: int, hour: int, minute: int = 0) -> datetime:
    """Próxima fecha estrictamente posterior a `now` que cae en day/hour/minute"""
    if not 1 <= day <= 28:
        raise ValueError("day debe estar entre 1 y 28 para existir en todos los meses")

    candidate = now.replace(day=day, hour=hour, minute=minute, second=0, microsecond=0)
    if candidate > now:
        return candidate

    if now.month == 12:
        return candidate.replace(year=now.year + 1, month=1)
    return candidate.replace(month=now.month + 1)


class MonthlyTrigger:

    def __init__(
        self,
        job: Callable[[], Awaitable[object]],
        day: int = 15,
        hour: int = 12,
        minute: int = 0,
        name: str = "monthly-job",
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.job = job
        self.day = day
        self.hour = hour
        self.minute = minute
        self.name = name
        self.clock = clock
        self.sleep = sleep
        self._task: Optional[asyncio.Task] = None

    def next_run(self) -> datetime:
        return next_run_after(self.clock(), self.day, self.hour, self.minute)

    async def run_once(self) -> None:
        """Ejecutar el job; un fallo se registra y no detiene el disparador"""
        started = datetime.now()
        try:
            result = await self.job()
            elapsed = (datetime.now() - started).total_seconds()
            logger.info(f"⏰ {self.name} completado en {elapsed:.2f}s: {result}")
        except Exception:
            logger.exception(f"❌ {self.name} falló")

    async def run_forever(self) -> None:
        target = self.next_run()
        while True:
            delay = max((target - self.clock()).total_seconds(), 0)
            logger.info(f"⏰ {self.name} programado para {target.isoformat()}")
            await self.sleep(delay)
            await self.run_once()
            # Siempre posterior al objetivo ya ejecutado
            target = next_run_after(
                max(target, self.clock()), self.day, self.hour, self.minute
            )

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever(), name=self.name)
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
