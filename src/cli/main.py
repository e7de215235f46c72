"""CLI principal (Typer).

Comandos:
- `report`: resuelve el build de Roslyn insertado en cada rama de VS.
- `doctor`: diagnóstico de configuración/credenciales/conectividad.

Aquí se construyen los colaboradores (credencial, clientes HTTP) una sola vez
y se inyectan al driver; el Core no conoce httpx ni Rich.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from pathlib import Path
from typing import List, Optional, Sequence

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from adapters.azure_devops import AzureBuildClient, AzureGitContentFetcher
from adapters.credentials import build_credential_provider
from adapters.http_client import build_async_client
from adapters.json_exporter import export_reports_json
from cli.doctor import app as doctor_app
from cli.ui_components import print_banner, print_branch_header, print_branch_report
from core.config import AppSettings
from core.domain.models import BranchReport
from core.errors import CredentialUnavailable
from core.interfaces.sources import BuildSystemClient
from core.services.branch_report import ReportHooks, ReportOptions, run_all
from core.services.build_resolver import normalize_organization

app = typer.Typer(
    no_args_is_help=True,
    help="Find which Roslyn build each Visual Studio branch inserted.",
)
app.add_typer(doctor_app, name="doctor")

_console = Console()


def _validate_branches(values: Optional[List[str]]) -> Optional[List[str]]:
    if values and any(not v.strip() for v in values):
        raise typer.BadParameter("branch names cannot be blank")
    return values


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


async def run_report(
    settings: AppSettings,
    *,
    branches: Sequence[str],
    hooks: ReportHooks | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[BranchReport]:
    """Obtiene el token, abre un cliente por organización y corre el driver."""

    token = await build_credential_provider(settings).get_token()

    async with AsyncExitStack() as stack:
        git_http = await stack.enter_async_context(
            build_async_client(
                settings,
                base_url=settings.organization_url,
                token=token,
                transport=transport,
            )
        )
        fetcher = AzureGitContentFetcher(
            git_http,
            project=settings.project,
            repository=settings.repository,
        )

        clients: dict[str, BuildSystemClient] = {}
        for source in settings.candidate_sources:
            key = normalize_organization(source.organization)
            if key in clients:
                continue
            http = await stack.enter_async_context(
                build_async_client(
                    settings,
                    base_url=source.organization,
                    token=token,
                    transport=transport,
                )
            )
            clients[key] = AzureBuildClient(http, organization=source.organization)

        return await run_all(
            branches,
            fetcher=fetcher,
            clients=clients,
            options=ReportOptions.from_settings(settings),
            hooks=hooks,
        )


@app.command()
def report(
    branch: Optional[List[str]] = typer.Option(
        None,
        "--branch",
        "-b",
        help="Branch to inspect (repeatable). Defaults to the configured list.",
        callback=_validate_branches,
    ),
    json_path: Optional[Path] = typer.Option(
        None,
        "--json",
        help="Also write the report as JSON to this path.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with code 1 if any branch failed.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    """Report package version and source commit per branch."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    branches = list(branch) if branch else list(settings.branches)

    if not no_banner:
        print_banner(_console)

    hooks = ReportHooks(
        branch_started=lambda name: print_branch_header(_console, name),
        branch_finished=lambda result: print_branch_report(_console, result),
    )

    try:
        reports = asyncio.run(run_report(settings, branches=branches, hooks=hooks))
    except CredentialUnavailable as exc:
        _console.print(Text.assemble(("Credential unavailable: ", "red"), str(exc)))
        raise typer.Exit(code=2) from exc

    if json_path is not None:
        out = export_reports_json(reports=reports, output_path=json_path)
        _console.print(f"[green]JSON report written to:[/green] {out}")

    failed = [r.branch for r in reports if not r.ok]
    if strict and failed:
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
