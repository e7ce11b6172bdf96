"""
Esquemas Pydantic para operaciones de autenticación.

Los campos son opcionales a propósito: la obligatoriedad la resuelve el
servicio, que responde 400 con el mensaje del campo faltante.
"""
from typing import Optional

from app.api.schemas.common import CamelModel, Envelope


class RegisterPayload(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginPayload(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisteredUser(CamelModel):
    full_name: str
    email: str


# === Response models ===

class RegisterOut(Envelope):
    user: Optional[RegisteredUser] = None
    access_token: Optional[str] = None


class LoginOut(Envelope):
    email: str
    access_token: str
