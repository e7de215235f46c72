"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.credentials import build_credential_provider
from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.errors import ProvenanceError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_credential(settings: AppSettings) -> tuple[bool, str, str | None]:
    try:
        provider = build_credential_provider(settings)
        token = await provider.get_token()
    except ProvenanceError as exc:
        return False, str(exc), None
    return True, type(provider).__name__, token


async def _check_organization(settings: AppSettings, url: str, token: str | None) -> tuple[bool, str]:
    try:
        async with build_async_client(settings, base_url=url, token=token) as client:
            response = await client.get("_apis/connectionData")
        if response.status_code != 200:
            return False, f"HTTP {response.status_code}"
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


async def _diagnose(settings: AppSettings) -> list[tuple[str, bool, str]]:
    rows: list[tuple[str, bool, str]] = []
    ok_cred, detail_cred, token = await _check_credential(settings)
    rows.append(("Credential", ok_cred, detail_cred))

    organizations = [settings.organization_url]
    organizations += [s.organization for s in settings.candidate_sources]
    for url in dict.fromkeys(organizations):
        ok, detail = await _check_organization(settings, url, token)
        rows.append((url, ok, detail))
    return rows


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="vs-provenance Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Repository", "OK", f"{settings.organization_url} {settings.project}/{settings.repository}")
    table.add_row("Branches", "OK", ", ".join(settings.branches))
    for index, source in enumerate(settings.candidate_sources, start=1):
        table.add_row(f"Build source #{index}", "OK", source.label())

    # Credenciales + conectividad (best-effort)
    rows = asyncio.run(_diagnose(settings))
    for check, ok, detail in rows:
        table.add_row(check, "OK" if ok else "FAIL", detail)

    _console.print(table)

    if not rows[0][1]:
        _console.print(
            "\n[yellow]Note:[/yellow] Run `vs-provenance doctor setup` to point at a token file."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    token_file = typer.prompt(
        "Azure DevOps PAT file",
        default=str(settings.token_file or Path.home() / ".vs-provenance-token"),
        show_default=True,
    ).strip()
    organization = typer.prompt(
        "Organization URL",
        default=settings.organization_url,
        show_default=True,
    ).strip()

    if not token_file or not organization:
        raise typer.BadParameter("token file and organization are required")

    env_path = write_user_env_vars(
        {
            "VS_PROVENANCE_TOKEN_FILE": token_file,
            "VS_PROVENANCE_ORGANIZATION_URL": organization,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
