from pydantic import BaseModel, Field

class EmailJob(BaseModel):
    """Trabajo de correo pendiente de entrega"""
    subject: str = Field(..., min_length=1, description="Asunto")
    recipient: str = Field(..., min_length=3, description="Destinatario")
    html_body: str = Field(..., description="Cuerpo HTML")
