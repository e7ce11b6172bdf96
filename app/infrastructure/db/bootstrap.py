"""
Bootstrap de la base Mongo: define y aplica validadores (JSON Schema) e índices.
Se ejecuta al inicio de la app para asegurar colecciones mínimas y consistencia.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.repositories.note_repo import COLLECTION as NOTE_COLL
from app.repositories.user_repo import COLLECTION as USER_COLL

_log = logging.getLogger("notes.mongo.bootstrap")


USER_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["full_name", "email", "email_key", "password_hash", "created_at"],
    "properties": {
        "full_name": {"bsonType": "string", "minLength": 1},
        "email": {"bsonType": "string", "minLength": 1},
        "email_key": {"bsonType": "string", "minLength": 1, "description": "lowercase"},
        "password_hash": {"bsonType": "string"},
        "created_at": {"bsonType": "date"},
    },
    "additionalProperties": True,
}

NOTE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["title", "content", "tags", "is_pinned", "user_id", "created_at"],
    "properties": {
        "title": {"bsonType": "string", "minLength": 1},
        "content": {"bsonType": "string", "minLength": 1},
        "tags": {"bsonType": "array", "items": {"bsonType": "string"}},
        "is_pinned": {"bsonType": "bool"},
        "user_id": {"bsonType": "string"},
        "created_at": {"bsonType": "date"},
    },
    "additionalProperties": True,
}

USER_INDEXES: List[Dict[str, Any]] = [
    {"keys": [("email_key", 1)], "unique": True, "name": "uniq_email"},
]

NOTE_INDEXES: List[Dict[str, Any]] = [
    {"keys": [("user_id", 1), ("is_pinned", -1), ("created_at", -1)], "name": "ix_owner_pinned_created"},
]


async def _collmod_or_create(db: AsyncIOMotorDatabase, name: str, validator: Dict[str, Any]) -> None:
    try:
        await db.command({
            "collMod": name,
            "validator": {"$jsonSchema": validator},
            "validationLevel": "moderate",
        })
    except PyMongoError:
        # collMod falla si la colección no existe: se crea con el validator
        try:
            if name not in await db.list_collection_names():
                await db.create_collection(name, validator={"$jsonSchema": validator})
        except PyMongoError as e:
            _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


async def _ensure_index_list(db: AsyncIOMotorDatabase, name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = db[name]
    for ix in indexes:
        opts = dict(ix)
        keys = opts.pop("keys")
        try:
            await coll.create_index(keys, **opts)
        except PyMongoError as e:
            # Ignora fallas de índice (p. ej. datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    await _ensure_index_list(db, USER_COLL, USER_INDEXES)
    await _ensure_index_list(db, NOTE_COLL, NOTE_INDEXES)


async def ensure_collections(db: AsyncIOMotorDatabase) -> None:
    """
    Garantiza colecciones, validadores e índices mínimos.
    """
    await _collmod_or_create(db, USER_COLL, USER_VALIDATOR)
    await _collmod_or_create(db, NOTE_COLL, NOTE_VALIDATOR)
    await ensure_indexes(db)
    _log.info("Colecciones e índices verificados")
