"""
Esquemas Pydantic para la colección `user` (salida pública, sin secretos).
"""
from datetime import datetime
from typing import Any, Dict

from app.api.schemas.common import CamelModel, Envelope


class UserOut(CamelModel):
    full_name: str
    email: str
    id: str
    created_on: datetime

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "UserOut":
        return cls(full_name=doc["full_name"], email=doc["email"], id=doc["id"], created_on=doc["created_at"])


class UserEnvelope(Envelope):
    user: UserOut
