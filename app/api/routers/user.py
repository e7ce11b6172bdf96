"""Perfil básico del usuario autenticado."""
from fastapi import APIRouter, Depends

from app.api.deps import Identity, get_auth_service, get_current_identity
from app.api.schemas.user import UserEnvelope, UserOut
from app.services.auth_service import AuthService

router = APIRouter(tags=["User"])


@router.get(
    "/get-user",
    response_model=UserEnvelope,
    summary="Usuario actual",
    description="Devuelve nombre, email, id y fecha de alta. 401 si la identidad del token ya no existe.",
)
async def get_user(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> UserEnvelope:
    user = await service.get_user(identity.subject_id)
    return UserEnvelope(user=UserOut.from_doc(user))
