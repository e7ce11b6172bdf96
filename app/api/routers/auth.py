"""Rutas de autenticación: registro y login."""
from fastapi import APIRouter, Depends

from app.api.deps import get_auth_service
from app.api.schemas.auth import LoginOut, LoginPayload, RegisteredUser, RegisterOut, RegisterPayload
from app.services.auth_service import AuthService

router = APIRouter(tags=["Auth"])


@router.post(
    "/create-account",
    response_model=RegisterOut,
    response_model_exclude_none=True,
    summary="Registrar usuario",
    description="Crea la cuenta y devuelve un access token. Si el email ya existe responde 200 con error=true.",
)
async def create_account(payload: RegisterPayload, service: AuthService = Depends(get_auth_service)) -> RegisterOut:
    res = await service.register(full_name=payload.full_name, email=payload.email, password=payload.password)
    if res["error"]:
        return RegisterOut(error=True, message=res["message"])
    user = res["user"]
    return RegisterOut(
        user=RegisteredUser(full_name=user["full_name"], email=user["email"]),
        access_token=res["access_token"],
        message="Registration Successful",
    )


@router.post(
    "/login",
    response_model=LoginOut,
    summary="Login con email y contraseña",
    description="Email inexistente y contraseña incorrecta responden con el mismo 400.",
)
async def login(payload: LoginPayload, service: AuthService = Depends(get_auth_service)) -> LoginOut:
    res = await service.login(email=payload.email, password=payload.password)
    return LoginOut(email=res["email"], access_token=res["access_token"], message="Login Successful")
