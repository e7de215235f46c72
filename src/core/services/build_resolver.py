"""Resolución de build number -> builds, con fallback entre organizaciones.

La organización primaria no siempre contiene el build: los builds de
forks/mirrors se ejecutan en una organización secundaria. Por eso las fuentes
candidatas se prueban en orden y gana la primera que devuelva algún build.

Política de fallos:
- Un fallo en una fuente que no es la última se registra y se salta.
- Un fallo en la última fuente se propaga tal cual.
- Un resultado vacío siempre avanza; si todas quedan vacías -> `BuildNotFound`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from core.domain.models import BuildRecord, CandidateSource
from core.errors import (
    AmbiguousDefinition,
    BuildNotFound,
    ConfigurationError,
    DefinitionNotFound,
)
from core.interfaces.sources import BuildSystemClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceLookup:
    """Resultado explícito de consultar una fuente: builds o el error capturado."""

    source: CandidateSource
    builds: list[BuildRecord] = field(default_factory=list)
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def normalize_organization(url: str) -> str:
    return url.strip().rstrip("/").lower()


def client_for(
    clients: Mapping[str, BuildSystemClient],
    source: CandidateSource,
) -> BuildSystemClient:
    wanted = normalize_organization(source.organization)
    for organization, client in clients.items():
        if normalize_organization(organization) == wanted:
            return client
    raise ConfigurationError(f"No build client configured for organization {source.organization}")


async def find_builds(
    client: BuildSystemClient,
    source: CandidateSource,
    build_number: str,
) -> list[BuildRecord]:
    """Busca la definición (exactamente una) y sus builds con ese build number."""

    definitions = await client.list_definitions(source.project, source.definition)
    if not definitions:
        raise DefinitionNotFound(
            f"No build definition named {source.definition!r} in {source.organization}/{source.project}"
        )
    if len(definitions) > 1:
        ids = ", ".join(str(d.id) for d in definitions)
        raise AmbiguousDefinition(
            f"{len(definitions)} build definitions named {source.definition!r} "
            f"in {source.organization}/{source.project} (ids: {ids})"
        )

    definition = definitions[0]
    # La definición puede vivir en un proyecto referenciado por id.
    project = definition.project_id or source.project
    return await client.list_builds(project, [definition.id], build_number)


async def lookup_source(
    clients: Mapping[str, BuildSystemClient],
    source: CandidateSource,
    build_number: str,
) -> SourceLookup:
    try:
        client = client_for(clients, source)
        builds = await find_builds(client, source, build_number)
    except Exception as exc:
        return SourceLookup(source=source, error=exc)
    return SourceLookup(source=source, builds=builds)


async def resolve_build(
    candidate_sources: Sequence[CandidateSource],
    build_number: str,
    *,
    clients: Mapping[str, BuildSystemClient],
    package_version: str | None = None,
) -> list[BuildRecord]:
    """Devuelve los builds de la primera fuente que tenga alguno.

    Los builds se devuelven en el orden de la API (puede haber varios con el
    mismo build number si hubo re-ejecuciones).
    """

    if not candidate_sources:
        raise ConfigurationError("No candidate build sources configured")

    last_index = len(candidate_sources) - 1
    for index, source in enumerate(candidate_sources):
        lookup = await lookup_source(clients, source, build_number)

        if lookup.error is not None:
            if index == last_index:
                raise lookup.error
            logger.warning(
                "Build lookup failed in %s, trying next source: %s",
                source.label(),
                lookup.error,
            )
            continue

        if lookup.builds:
            logger.info(
                "Found %d build(s) for %s in %s",
                len(lookup.builds),
                build_number,
                source.label(),
            )
            return lookup.builds

        logger.info("No builds for %s in %s", build_number, source.label())

    raise BuildNotFound(package_version, build_number)
