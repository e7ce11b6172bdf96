"""Repo de la colección `user`.

- `email` se guarda tal como llegó; `email_key` (minúsculas, sin espacios)
  es la clave de búsqueda, con índice único `uniq_email`.
- Sólo se guarda `password_hash` (argon2id), nunca la contraseña.
"""
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.time import as_utc, now_utc

COLLECTION = "user"


def email_key(email: str) -> str:
    return email.strip().lower()


def _out(doc: Dict[str, Any]) -> Dict[str, Any]:
    d = dict(doc)
    d["id"] = str(d.pop("_id", ""))
    if d.get("created_at") is not None:
        d["created_at"] = as_utc(d["created_at"])
    return d


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.coll = db[COLLECTION]

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Busca usuario por email sin distinguir mayúsculas."""
        doc = await self.coll.find_one({"email_key": email_key(email)})
        return _out(doc) if doc else None

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene usuario por id (str); None si el id no es un ObjectId."""
        if not ObjectId.is_valid(user_id):
            return None
        doc = await self.coll.find_one({"_id": ObjectId(user_id)})
        return _out(doc) if doc else None

    async def insert(self, *, full_name: str, email: str, password_hash: str) -> Dict[str, Any]:
        """Inserta usuario y devuelve el documento. Propaga `DuplicateKeyError`."""
        data: Dict[str, Any] = {
            "full_name": full_name,
            "email": email,
            "email_key": email_key(email),
            "password_hash": password_hash,
            "created_at": now_utc(),
        }
        res = await self.coll.insert_one(data)
        data["_id"] = res.inserted_id
        return _out(data)

    async def set_password_hash(self, user_id: str, password_hash: str) -> None:
        """Reemplaza el hash (rehash al cambiar parámetros de argon2)."""
        await self.coll.update_one({"_id": ObjectId(user_id)}, {"$set": {"password_hash": password_hash}})
