"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Toda la configuración es estática: ramas, documentos, claves de búsqueda y
  fuentes candidatas se leen una vez al arrancar y se pasan como parámetros.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Mapping

import typer
from dotenv import dotenv_values
from pydantic import Field, StringConstraints
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import CandidateSource
from core.errors import ConfigurationError

ENV_PREFIX = "VS_PROVENANCE_"
APP_NAME = "vs-provenance"

BranchName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (convención de click por plataforma)."""

    return Path(typer.get_app_dir(APP_NAME))


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: Mapping[str, str], *, env_path: Path | None = None) -> Path:
    """Fusiona `values` en el .env global del usuario y lo reescribe ordenado.

    Solo acepta claves `VS_PROVENANCE_*`: el archivo lo lee `AppSettings`, que
    ignora cualquier otra cosa. Los valores vacíos no pisan los existentes.
    """

    foreign = sorted(k for k in values if not k.upper().startswith(ENV_PREFIX))
    if foreign:
        raise ConfigurationError(f"Not a {ENV_PREFIX}* setting: {', '.join(foreign)}")

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged = {k: v for k, v in dotenv_values(env_path).items() if v} if env_path.exists() else {}
    merged.update({k.upper(): v.strip() for k, v in values.items() if v and v.strip()})

    lines = [f"# {APP_NAME} user config (.env)"]
    lines += [f"{key}={merged[key]}" for key in sorted(merged)]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


DEFAULT_CANDIDATE_SOURCES: tuple[CandidateSource, ...] = (
    CandidateSource(
        organization="https://devdiv.visualstudio.com/DefaultCollection",
        project="DevDiv",
        definition="Roslyn-Signed",
    ),
    # Los builds de forks/mirrors ocurren en dnceng, no en devdiv.
    CandidateSource(
        organization="https://dev.azure.com/dnceng",
        project="internal",
        definition="dotnet-roslyn-official",
    ),
)


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Las listas (ramas, fuentes candidatas) se pueden sobreescribir como JSON
      en variables de entorno, p.ej. `VS_PROVENANCE_BRANCHES='["main"]'`.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    branches: list[BranchName] = Field(
        default_factory=lambda: ["rel/d16.9", "rel/d16.10", "main"],
        min_length=1,
        description="Ramas del repositorio de VS a inspeccionar, en orden de reporte.",
    )

    organization_url: str = Field(
        default="https://devdiv.visualstudio.com/DefaultCollection",
        min_length=8,
        description="Organización que aloja el repositorio inspeccionado.",
    )
    project: str = Field(default="DevDiv", min_length=1)
    repository: str = Field(default="VS", min_length=1)

    components_json_path: str = Field(
        default=".corext/Configs/dotnetcodeanalysis-components.json",
        description="Path del components manifest JSON dentro del repositorio.",
    )
    package_config_path: str = Field(
        default=".corext/Configs/default.config",
        description="Path del package-config XML dentro del repositorio.",
    )
    component_name: str = Field(
        default="Microsoft.CodeAnalysis.LanguageServices",
        min_length=1,
        description="Clave bajo `Components` en el components JSON.",
    )
    package_id: str = Field(
        default="VS.ExternalAPIs.Roslyn",
        min_length=1,
        description="Atributo `id` del <package> cuya versión se reporta.",
    )
    manifest_extension: str = Field(default=".vsman", min_length=1)

    candidate_sources: list[CandidateSource] = Field(
        default_factory=lambda: list(DEFAULT_CANDIDATE_SOURCES),
        min_length=1,
        description="Fuentes de builds en orden de prioridad (fallback).",
    )

    access_token: str | None = Field(
        default=None,
        description="PAT de Azure DevOps explícito (tiene prioridad sobre archivo y Key Vault).",
    )
    token_file: Path | None = Field(
        default=None,
        description="Archivo local con el PAT de Azure DevOps.",
    )
    key_vault_url: str | None = Field(
        default="https://roslyninfra.vault.azure.net",
        description="Key Vault que guarda el PAT.",
    )
    secret_name: str = Field(default="vslsnap-vso-auth-token", min_length=1)
    username: str = Field(
        default="vslsnap",
        description="Usuario para basic auth (Azure DevOps ignora el valor con PATs).",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="vs-provenance/0.1",
        min_length=1,
        description="User-Agent para peticiones a Azure DevOps.",
    )
    log_level: str = Field(default="WARNING", min_length=1)
