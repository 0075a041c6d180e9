from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

# Montos: Decimal en Python, número en JSON
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]

class ResponseBaseModel(BaseModel):
    """
    Clase base para los esquemas de respuesta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(from_attributes=True)
