"""Repo de la colección `note`.

- Guarda `user_id` como string (ObjectId serializado) para consistencia.
- Toda lectura o escritura de una nota concreta filtra por `_id` y `user_id`
  en la misma consulta; no existe variante sin dueño.
"""
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.time import as_utc, now_utc

COLLECTION = "note"

# Fijadas primero; dentro de cada grupo, la más reciente primero
SORT_PINNED_FIRST = [("is_pinned", -1), ("created_at", -1), ("_id", -1)]


def _oid(note_id: str) -> Optional[ObjectId]:
    return ObjectId(note_id) if ObjectId.is_valid(note_id) else None


def _out(doc: Dict[str, Any]) -> Dict[str, Any]:
    d = dict(doc)
    d["id"] = str(d.pop("_id", ""))
    if d.get("created_at") is not None:
        d["created_at"] = as_utc(d["created_at"])
    return d


class NoteRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.coll = db[COLLECTION]

    async def insert(self, *, user_id: str, title: str, content: str, tags: List[str]) -> Dict[str, Any]:
        """Inserta nota con defaults y devuelve el documento creado."""
        data: Dict[str, Any] = {
            "title": title,
            "content": content,
            "tags": list(tags),
            "is_pinned": False,
            "user_id": str(user_id),
            "created_at": now_utc(),
        }
        res = await self.coll.insert_one(data)
        data["_id"] = res.inserted_id
        return _out(data)

    async def find_owned(self, note_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        oid = _oid(note_id)
        if oid is None:
            return None
        doc = await self.coll.find_one({"_id": oid, "user_id": str(user_id)})
        return _out(doc) if doc else None

    async def update_owned(self, note_id: str, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Aplica `$set` atómico sobre la nota del dueño; None si no coincide."""
        oid = _oid(note_id)
        if oid is None:
            return None
        doc = await self.coll.find_one_and_update(
            {"_id": oid, "user_id": str(user_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return _out(doc) if doc else None

    async def delete_owned(self, note_id: str, user_id: str) -> bool:
        oid = _oid(note_id)
        if oid is None:
            return False
        res = await self.coll.delete_one({"_id": oid, "user_id": str(user_id)})
        return res.deleted_count == 1

    async def list_by_owner(self, user_id: str) -> List[Dict[str, Any]]:
        docs = await self.coll.find({"user_id": str(user_id)}).sort(SORT_PINNED_FIRST).to_list(length=None)
        return [_out(d) for d in docs]

    async def search_by_owner(self, user_id: str, pattern: str) -> List[Dict[str, Any]]:
        """Coincidencia por regex (case-insensitive) en título o contenido.

        `pattern` debe venir escapado por el llamador.
        """
        regex = {"$regex": pattern, "$options": "i"}
        filtro = {"user_id": str(user_id), "$or": [{"title": regex}, {"content": regex}]}
        docs = await self.coll.find(filtro).sort(SORT_PINNED_FIRST).to_list(length=None)
        return [_out(d) for d in docs]
