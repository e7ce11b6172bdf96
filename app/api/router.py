"""Agregador de routers de la API."""
from fastapi import APIRouter

from app.api.routers import auth, health, note, user

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(user.router)
api_router.include_router(note.router)
