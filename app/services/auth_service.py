"""
Lógica de autenticación: registro, login y usuario actual.

Las contraseñas se guardan con argon2id; nunca se comparan en claro.
"""
import logging
from typing import Any, Dict, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type
from pymongo.errors import DuplicateKeyError
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import AuthError, AuthReason, InvalidCredentials, ValidationError
from app.repositories.user_repo import UserRepository
from app.services.token_service import TokenService

_log = logging.getLogger("notes.auth")

ph = PasswordHasher(time_cost=2, memory_cost=51200, parallelism=2, hash_len=32, salt_len=16, type=Type.ID)

# Hash de relleno: el login de un email inexistente cuesta lo mismo que uno real
_DUMMY_HASH = ph.hash("not-a-real-password")

USER_EXISTS_MESSAGE = "User Already Exists"


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def _require(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value)


class AuthService:
    def __init__(self, users: UserRepository, tokens: TokenService) -> None:
        self.users = users
        self.tokens = tokens

    async def register(self, *, full_name: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Registra un usuario local y emite su token.

        Si el email ya existe devuelve `{"error": True, ...}` sin crear nada.
        """
        full_name = _require(full_name, "Full Name is required").strip()
        email = _require(email, "Email is required")
        password = _require(password, "Password is required")

        # Se guarda y se firma el email tal cual; la unicidad ignora mayúsculas
        if await self.users.find_by_email(email):
            return {"error": True, "message": USER_EXISTS_MESSAGE}

        password_hash = await run_in_threadpool(hash_password, password)
        try:
            user = await self.users.insert(full_name=full_name, email=email, password_hash=password_hash)
        except DuplicateKeyError:
            # Registro concurrente con el mismo email: gana el primero
            return {"error": True, "message": USER_EXISTS_MESSAGE}

        _log.info("user registered id=%s", user["id"])
        return {
            "error": False,
            "user": user,
            "access_token": self.tokens.issue(user["id"], user["email"]),
        }

    async def login(self, *, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Email desconocido y contraseña incorrecta responden igual."""
        email = _require(email, "Email is required")
        password = _require(password, "Password is required")

        user = await self.users.find_by_email(email)
        stored = user.get("password_hash") if user else None
        ok = await run_in_threadpool(verify_password, password, stored or _DUMMY_HASH)
        if not user or not stored or not ok:
            raise InvalidCredentials()

        if ph.check_needs_rehash(stored):
            await self.users.set_password_hash(user["id"], await run_in_threadpool(hash_password, password))

        return {"email": user["email"], "access_token": self.tokens.issue(user["id"], user["email"])}

    async def get_user(self, subject_id: str) -> Dict[str, Any]:
        user = await self.users.get_by_id(subject_id)
        if not user:
            # La identidad del token ya no existe en la base
            raise AuthError(AuthReason.INVALID)
        return user
