"""Configuración del Core.

Por qué aquí:
- `AppSettings` centraliza variables de entorno (pydantic-settings) sin
  contaminar el motor HTTP con lógica de entorno.
- `ClientConfig` es el contrato explícito e inmutable que recibe el motor:
  varios clientes con configuraciones distintas pueden convivir (tests,
  múltiples backends) sin estado global.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "crm-core"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "crm-core"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "crm-core"
    return Path.home() / ".config" / "crm-core"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# crm-core user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


def normalize_base_url(value: str) -> str:
    """Quita espacios y barras finales (`https://api/` -> `https://api`)."""

    return (value or "").strip().rstrip("/")


class ClientConfig(BaseModel):
    """Configuración inmutable de una instancia del motor de requests.

    Se construye una vez (a mano o vía `from_settings`) y no se modifica:
    cada `ApiClient` captura la suya.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default="",
        description="URL base del backend (sin barra final). Vacía = paths absolutos.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout total por request (segundos).",
    )
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers enviados en cada request (sobrescribibles por llamada).",
    )
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Fuera de producción se emiten logs de depuración.",
    )
    language: Language = Field(
        default=Language.PORTUGUESE,
        description="Idioma de los mensajes de error para el usuario.",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slashes(cls, value: str) -> str:
        return normalize_base_url(value)

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    @classmethod
    def from_settings(cls, settings: "AppSettings | None" = None) -> "ClientConfig":
        """Adaptador fino entre variables de entorno y el contrato del motor."""

        settings = settings or AppSettings()
        headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/json, text/plain, */*",
        }
        return cls(
            base_url=settings.api_base_url,
            timeout_seconds=settings.timeout_seconds,
            default_headers=headers,
            environment=settings.environment,
            language=settings.language,
        )


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    api_base_url: str = Field(
        default="",
        validation_alias="API_BASE_URL",
        description="URL base del backend REST.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        validation_alias="API_TIMEOUT_SECONDS",
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="crm-core/0.1",
        min_length=1,
        validation_alias="API_USER_AGENT",
        description="User-Agent enviado al backend.",
    )
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        validation_alias="APP_ENV",
        description="development | test | production.",
    )
    language: Language = Field(
        default=Language.PORTUGUESE,
        validation_alias="API_LANGUAGE",
        description="Idioma de los mensajes de error (pt-BR/en).",
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slashes(cls, value: str) -> str:
        return normalize_base_url(value)
