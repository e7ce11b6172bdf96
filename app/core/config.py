"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del backend.
- Agrupa ajustes por área: App, CORS, Mongo, Auth/JWT.
- No hay instancia global: `create_app()` construye un `Settings` y lo reparte.
"""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del backend (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Notes API"
    api_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # CORS (el cliente web original acepta cualquier origen)
    cors_origins: list[str] = ["*"]

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "notes_app"
    mongo_tls: bool = False
    # TLS relax options (dev only)
    mongo_tls_insecure: bool = False
    mongo_server_selection_timeout_ms: int = 15000

    # Auth / JWT
    access_token_secret: str | None = None
    jwt_algorithm: str = "HS256"

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final
        - Si está vacío (o es solo '/'), devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref or pref == "/":
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        return pref.rstrip('/')

    @property
    def cors_allow_any(self) -> bool:
        return "*" in self.cors_origins

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
    )
