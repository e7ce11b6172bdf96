"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from typing import Optional

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api.router import api_router
from app.core.config import Settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import add_middlewares
from app.infrastructure.db.bootstrap import ensure_collections
from app.infrastructure.db.mongo_async import build_async_client, get_database, ping
from app.repositories.note_repo import NoteRepository
from app.repositories.user_repo import UserRepository
from app.services.auth_service import AuthService
from app.services.note_service import NoteService
from app.services.token_service import TokenService

_log = logging.getLogger("notes.startup")


def create_app(settings: Optional[Settings] = None, database: Optional[AsyncIOMotorDatabase] = None) -> FastAPI:
    """Construye la app con su configuración, store y servicios explícitos.

    Sin `database` se abre un cliente Motor contra `settings.mongo_uri`.
    """
    settings = settings or Settings()
    setup_logging(settings.log_level)

    client = None
    if database is None:
        client = build_async_client(settings)
        database = get_database(client, settings)

    tokens = TokenService(settings)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.db = database
    app.state.token_service = tokens
    app.state.auth_service = AuthService(UserRepository(database), tokens)
    app.state.note_service = NoteService(NoteRepository(database))

    add_middlewares(app, settings)
    register_exception_handlers(app)

    @app.on_event("startup")
    async def on_startup():
        # Garantiza colecciones/índices/validadores mínimos si hay conexión
        if await ping(database):
            try:
                await ensure_collections(database)
            except Exception as e:
                # No impedir el arranque si fallan validadores/índices
                _log.warning("ensure_collections() falló: %s", e)
        else:
            _log.warning("Mongo no listo; omitiendo ensure_collections()")

    @app.on_event("shutdown")
    async def on_shutdown():
        if client is not None:
            client.close()

    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    return app


def run() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


app = create_app()
