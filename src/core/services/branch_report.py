"""Orquestación por rama: documentos -> manifest/versión -> token -> builds.

El driver es el único punto de recuperación: cualquier excepción de una rama
se convierte en un `BranchReport` con `error` y se continúa con la siguiente.
Los efectos de presentación (Rich, logs) quedan fuera y se enganchan vía
`ReportHooks`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from core.config import AppSettings
from core.domain.models import BranchReport, BuildRecord, CandidateSource, ReportEntry
from core.errors import ConfigurationError
from core.interfaces.sources import BuildSystemClient, ContentFetcher
from core.services.build_resolver import resolve_build
from core.services.extractors import (
    MANIFEST_EXTENSION,
    derive_build_number,
    extract_manifest_ref,
    extract_package_version,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportOptions:
    """Rutas, claves de búsqueda y fuentes candidatas (configuración estática)."""

    components_json_path: str
    package_config_path: str
    component_name: str
    package_id: str
    candidate_sources: Sequence[CandidateSource]
    manifest_extension: str = MANIFEST_EXTENSION

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "ReportOptions":
        return cls(
            components_json_path=settings.components_json_path,
            package_config_path=settings.package_config_path,
            component_name=settings.component_name,
            package_id=settings.package_id,
            candidate_sources=tuple(settings.candidate_sources),
            manifest_extension=settings.manifest_extension,
        )


@dataclass
class ReportHooks:
    """Callbacks opcionales para la capa de UI (sink de presentación)."""

    branch_started: Callable[[str], None] | None = None
    entry_emitted: Callable[[str, ReportEntry], None] | None = None
    branch_failed: Callable[[str, str], None] | None = None
    branch_finished: Callable[[BranchReport], None] | None = None


def normalize_source_branch(ref: str) -> str:
    """`refs/heads/main` -> `main`; otras refs pierden solo `refs/`."""

    if ref.startswith("refs/heads/"):
        return ref.removeprefix("refs/heads/")
    return ref.removeprefix("refs/")


def build_entries(builds: Iterable[BuildRecord], package_version: str | None) -> list[ReportEntry]:
    return [
        ReportEntry(
            package_version=package_version,
            commit=build.source_version,
            source_branch=normalize_source_branch(build.source_branch),
            build_number=build.build_number,
            build_id=build.id,
        )
        for build in builds
    ]


async def resolve_branch(
    branch: str,
    *,
    fetcher: ContentFetcher,
    clients: Mapping[str, BuildSystemClient],
    options: ReportOptions,
) -> BranchReport:
    """Pipeline completo de una rama. Propaga cualquier error."""

    if not branch.strip():
        raise ConfigurationError("Branch name is empty")

    components_json = await fetcher.fetch_text(options.components_json_path, branch)
    manifest_ref = extract_manifest_ref(
        components_json,
        options.component_name,
        manifest_extension=options.manifest_extension,
    )

    package_config = await fetcher.fetch_text(options.package_config_path, branch)
    package_version = extract_package_version(package_config, options.package_id)
    if package_version is None:
        logger.warning("Package %s not declared on %s", options.package_id, branch)

    build_number = derive_build_number(manifest_ref.artifact_url)
    logger.debug(
        "%s: manifest=%s build_number=%s package_version=%s",
        branch,
        manifest_ref.manifest_file_name,
        build_number,
        package_version,
    )

    builds = await resolve_build(
        options.candidate_sources,
        build_number,
        clients=clients,
        package_version=package_version,
    )
    return BranchReport(
        branch=branch,
        package_version=package_version,
        build_number=build_number,
        entries=build_entries(builds, package_version),
    )


async def run_all(
    branches: Sequence[str],
    *,
    fetcher: ContentFetcher,
    clients: Mapping[str, BuildSystemClient],
    options: ReportOptions,
    hooks: ReportHooks | None = None,
) -> list[BranchReport]:
    """Procesa las ramas en orden, una a la vez, sin abortar por fallos."""

    hooks = hooks or ReportHooks()
    reports: list[BranchReport] = []

    for branch in branches:
        if hooks.branch_started:
            hooks.branch_started(branch)
        try:
            report = await resolve_branch(
                branch,
                fetcher=fetcher,
                clients=clients,
                options=options,
            )
        except Exception as exc:
            logger.debug("Branch %s failed", branch, exc_info=True)
            report = BranchReport(branch=branch, error=str(exc) or exc.__class__.__name__)
            if hooks.branch_failed:
                hooks.branch_failed(branch, report.error)
        else:
            if hooks.entry_emitted:
                for entry in report.entries:
                    hooks.entry_emitted(branch, entry)

        reports.append(report)
        if hooks.branch_finished:
            hooks.branch_finished(report)

    return reports
