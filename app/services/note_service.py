"""
Service layer for notes.

Every operation receives the owner id bound by the auth dependency and passes
it to the repository together with the note id. A note owned by someone else
is reported exactly like a missing one.
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from app.core.exceptions import NotFound, ValidationError
from app.repositories.note_repo import NoteRepository

NOTE_NOT_FOUND = "Note not found"


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop blanks and duplicates (first occurrence wins)."""
    out: List[str] = []
    seen = set()
    for t in tags or []:
        tt = str(t).strip()
        if tt and tt not in seen:
            seen.add(tt)
            out.append(tt)
    return out


def _non_blank(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message)
    return value


class NoteService:
    def __init__(self, notes: NoteRepository) -> None:
        self.notes = notes

    async def create(
        self, subject_id: str, *, title: Optional[str], content: Optional[str], tags: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        title = _non_blank(title, "Title is required")
        content = _non_blank(content, "Content is required")
        return await self.notes.insert(user_id=subject_id, title=title, content=content, tags=normalize_tags(tags))

    async def get(self, subject_id: str, note_id: str) -> Dict[str, Any]:
        note = await self.notes.find_owned(note_id, subject_id)
        if not note:
            raise NotFound(NOTE_NOT_FOUND)
        return note

    async def update(
        self,
        subject_id: str,
        note_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[List[str]] = None,
        is_pinned: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Aplica sólo los campos presentes (no None)."""
        fields: Dict[str, Any] = {}
        if title is not None:
            fields["title"] = _non_blank(title, "Title cannot be empty")
        if content is not None:
            fields["content"] = _non_blank(content, "Content cannot be empty")
        if tags is not None:
            fields["tags"] = normalize_tags(tags)
        if is_pinned is not None:
            fields["is_pinned"] = bool(is_pinned)
        if not fields:
            raise ValidationError("No changes provided")
        return await self._update_owned(subject_id, note_id, fields)

    async def set_pinned(self, subject_id: str, note_id: str, is_pinned: Optional[bool]) -> Dict[str, Any]:
        if is_pinned is None:
            raise ValidationError("isPinned is required")
        return await self._update_owned(subject_id, note_id, {"is_pinned": bool(is_pinned)})

    async def delete(self, subject_id: str, note_id: str) -> None:
        if not await self.notes.delete_owned(note_id, subject_id):
            raise NotFound(NOTE_NOT_FOUND)

    async def list_all(self, subject_id: str) -> List[Dict[str, Any]]:
        return await self.notes.list_by_owner(subject_id)

    async def search(self, subject_id: str, query: Optional[str]) -> List[Dict[str, Any]]:
        """Substring case-insensitive; el texto del usuario se escapa (no es regex)."""
        q = (query or "").strip()
        if not q:
            raise ValidationError("Search query is required")
        return await self.notes.search_by_owner(subject_id, re.escape(q))

    async def _update_owned(self, subject_id: str, note_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        note = await self.notes.update_owned(note_id, subject_id, fields)
        if not note:
            raise NotFound(NOTE_NOT_FOUND)
        return note
