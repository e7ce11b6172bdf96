"""
Esquemas Pydantic para `note`.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from app.api.schemas.common import CamelModel, Envelope


class NoteCreate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None


class NoteUpdate(CamelModel):
    """Parche parcial: sólo se aplican los campos enviados (no null)."""
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    is_pinned: Optional[bool] = None


class NotePinUpdate(CamelModel):
    is_pinned: Optional[bool] = None


class NoteOut(CamelModel):
    id: str
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    is_pinned: bool = False
    user_id: str
    created_on: datetime

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "NoteOut":
        return cls(
            id=doc["id"],
            title=doc["title"],
            content=doc["content"],
            tags=doc.get("tags") or [],
            is_pinned=bool(doc.get("is_pinned", False)),
            user_id=doc["user_id"],
            created_on=doc["created_at"],
        )


class NoteEnvelope(Envelope):
    note: NoteOut


class NoteListEnvelope(Envelope):
    notes: List[NoteOut]
