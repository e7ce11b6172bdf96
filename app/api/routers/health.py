"""Raíz y health (sin auth)."""
from fastapi import APIRouter, Request, status

from app.api.schemas.health import HealthOut, RootOut
from app.infrastructure.db.mongo_async import ping

router = APIRouter(tags=["Health"])  # no prefix to keep paths stable


@router.get("/", response_model=RootOut, summary="Hola mundo")
async def root() -> RootOut:
    return RootOut(data="Hello World")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
async def health(request: Request) -> HealthOut:
    return HealthOut(ok=True, db=await ping(request.app.state.db))
