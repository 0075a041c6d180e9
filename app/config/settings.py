from decimal import Decimal
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # App Info
    app_name: str = "Sales Commission API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str

    # Security
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 día
    allowed_origins: List[str] = ["http://localhost:3000"]

    # Correo saliente
    mail_from: str = "no-reply@localhost"
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    mail_suppress_send: bool = False
    mail_max_attempts: int = Field(default=3, ge=1, description="Intentos de entrega por correo")
    mail_retry_delay_seconds: float = Field(default=5.0, ge=0, description="Espera base entre reintentos")

    # Comisiones
    sales_commission_percentage: Decimal = Field(
        default=Decimal("0.05"),
        ge=0,
        le=1,
        decimal_places=4,
        description="Fracción de la venta que se paga como comisión"
    )

    # Reporte mensual de comisiones pendientes
    scheduler_enabled: bool = True
    commission_report_day: int = Field(default=15, ge=1, le=28)
    commission_report_hour: int = Field(default=12, ge=0, le=23)

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
