"""
Creación y verificación de JWTs de acceso.

El token lleva la identidad (`sub`, `email`) y vence a las 10 horas de emitido.
No se consulta la base al verificar: un usuario borrado sigue autenticando
hasta que su token expira.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt as pyjwt

from app.core.config import Settings
from app.core.exceptions import AuthError, AuthReason, ConfigurationError

ACCESS_TOKEN_TTL = timedelta(hours=10)


@dataclass(frozen=True)
class Claims:
    subject_id: str
    subject_email: str


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(self, settings: Settings) -> None:
        if not settings.access_token_secret:
            raise ConfigurationError("ACCESS_TOKEN_SECRET is not set")
        self._secret = settings.access_token_secret
        self._algorithm = settings.jwt_algorithm

    def issue(self, subject_id: str, subject_email: str, *, now: datetime | None = None) -> str:
        """
        Genera un JWT firmado válido por ACCESS_TOKEN_TTL.
        Claims: sub(user_id), email, iat, exp, jti.
        """
        now = now or _now_utc()
        exp = now + ACCESS_TOKEN_TTL
        payload = {
            "sub": str(subject_id),
            "email": subject_email,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": str(uuid4()),
        }
        return pyjwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Claims:
        """
        Valida firma y expiración y devuelve los claims de identidad.
        """
        try:
            payload = pyjwt.decode(
                token,
                key=self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except pyjwt.ExpiredSignatureError:
            raise AuthError(AuthReason.EXPIRED)
        except pyjwt.InvalidTokenError:
            raise AuthError(AuthReason.INVALID)

        subject_id = payload.get("sub")
        subject_email = payload.get("email")
        if not isinstance(subject_id, str) or not subject_id or not isinstance(subject_email, str):
            raise AuthError(AuthReason.INVALID)
        return Claims(subject_id=subject_id, subject_email=subject_email)
