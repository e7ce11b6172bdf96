"""Cliente MongoDB asíncrono (Motor).

Un único cliente por proceso, construido a partir del `Settings` que recibe
`create_app()`. Los repositorios reciben la `AsyncIOMotorDatabase` ya resuelta.
"""
from __future__ import annotations

import logging

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import Settings

_log = logging.getLogger("notes.mongo")


def build_async_client(settings: Settings) -> AsyncIOMotorClient:
    """Crea el cliente (perezoso: no abre conexión hasta la primera operación)."""
    uri = settings.mongo_uri
    kwargs = dict(serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms)
    if uri.startswith("mongodb+srv://"):
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tlsCAFile"] = certifi.where()
    elif settings.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        if settings.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
            kwargs["tlsAllowInvalidHostnames"] = True
    return AsyncIOMotorClient(uri, **kwargs)


def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    return client[settings.mongo_db]


async def ping(db: AsyncIOMotorDatabase) -> bool:
    """True si el servidor responde; nunca lanza."""
    try:
        await db.command("ping")
        return True
    except Exception as e:
        _log.warning("Mongo no accesible: %s", e)
        return False
