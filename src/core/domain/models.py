"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en el borde: los payloads de Azure DevOps llegan en
  camelCase y se normalizan aquí vía alias, sin que el Core vea JSON crudo.
- Serialización directa para el export JSON del reporte.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
- Todo es efímero: vive dentro de la resolución de una sola rama.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class ComponentManifestRef(BaseModel):
    """Par (URL del artefacto, manifest) declarado para un componente."""

    model_config = ConfigDict(frozen=True)

    artifact_url: str = Field(
        ...,
        min_length=1,
        description="URL del drop del artefacto; su último segmento es el build number.",
    )
    manifest_file_name: str = Field(
        ...,
        min_length=1,
        description="Nombre del manifest de empaquetado (p.ej. 'RoslynDev.vsman').",
    )


class CandidateSource(BaseModel):
    """Una (organización, proyecto, definición) donde buscar el build.

    El orden de la lista de candidatas define la prioridad de fallback.
    """

    model_config = ConfigDict(frozen=True)

    organization: str = Field(
        ...,
        min_length=1,
        description="URL base de la organización (p.ej. 'https://dev.azure.com/dnceng').",
    )
    project: str = Field(
        ...,
        min_length=1,
        description="Proyecto (nombre o id) que contiene la definición.",
    )
    definition: str = Field(
        ...,
        min_length=1,
        description="Nombre exacto de la definición de pipeline.",
    )

    def label(self) -> str:
        return f"{self.organization}/{self.project}:{self.definition}"


def _flatten_project_id(data: Any) -> Any:
    # La API anida el proyecto: {"project": {"id": ...}}.
    if isinstance(data, dict) and "projectId" not in data:
        project = data.get("project")
        if isinstance(project, dict) and project.get("id"):
            return {**data, "projectId": project["id"]}
    return data


class BuildDefinition(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    name: str
    project_id: str | None = Field(default=None, alias="projectId")

    @model_validator(mode="before")
    @classmethod
    def _flatten_project(cls, data: Any) -> Any:
        return _flatten_project_id(data)


class BuildRecord(BaseModel):
    """Build concreto del sistema de builds (solo lectura)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int = Field(..., description="Id numérico del build.")
    project_id: str | None = Field(
        default=None,
        alias="projectId",
        description="Id del proyecto que ejecutó el build.",
    )
    source_version: str = Field(
        ...,
        alias="sourceVersion",
        description="Commit (SHA) construido.",
    )
    source_branch: str = Field(
        default="",
        alias="sourceBranch",
        description="Ref construida, típicamente 'refs/heads/<rama>'.",
    )
    build_number: str = Field(
        ...,
        alias="buildNumber",
        description="Build number según el esquema de numeración del pipeline.",
    )

    @model_validator(mode="before")
    @classmethod
    def _flatten_project(cls, data: Any) -> Any:
        return _flatten_project_id(data)


class ReportEntry(BaseModel):
    """Una línea del reporte: un build encontrado para la rama."""

    package_version: str | None = Field(
        default=None,
        description="Versión declarada en el package-config (None si no estaba).",
    )
    commit: str = Field(..., description="SHA del commit construido.")
    source_branch: str = Field(..., description="Rama origen sin prefijo 'refs/'.")
    build_number: str
    build_id: int


class BranchReport(BaseModel):
    """Resultado de una rama: entradas o un error capturado, nunca ambos."""

    branch: str = Field(..., description="Nombre de rama tal como se pidió (sin validar).")
    package_version: str | None = None
    build_number: str | None = None
    entries: list[ReportEntry] = Field(default_factory=list)
    error: str | None = Field(
        default=None,
        description="Mensaje de la excepción que abortó la rama.",
    )

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.entries)
