"""
Dependencias reutilizables para routers (FastAPI Depends).

- Autenticación: extrae y valida el Bearer token y fija la identidad en
  `request.state.identity`. Es la única fuente de dueño para las notas.
- Servicios: se construyen en `create_app()` y viven en `app.state`.
- Mantener esta capa delgada: sin lógica de negocio.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from app.core.exceptions import AuthError, AuthReason
from app.services.auth_service import AuthService
from app.services.note_service import NoteService
from app.services.token_service import TokenService


@dataclass(frozen=True)
class Identity:
    subject_id: str
    subject_email: str


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Devuelve el token de un header `Bearer <token>`; None si no hay."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_note_service(request: Request) -> NoteService:
    return request.app.state.note_service


def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    token = bearer_token(authorization)
    if token is None:
        raise AuthError(AuthReason.MISSING_TOKEN)
    claims = tokens.verify(token)
    identity = Identity(subject_id=claims.subject_id, subject_email=claims.subject_email)
    request.state.identity = identity
    return identity
