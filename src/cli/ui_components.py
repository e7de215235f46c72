"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- El driver solo emite `BranchReport`; aquí se decide cómo se ven.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import BranchReport


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("vs-provenance", style="bold cyan")
    subtitle = Text("Rama de VS • Manifest • Build de Roslyn", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def print_branch_header(console: Console, branch: str) -> None:
    console.print(Text(f"{branch}:", style="bold white"))


def build_report_table(report: BranchReport) -> Table:
    """Tabla Rich con una fila por build encontrado."""

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Package Version", style="cyan", no_wrap=True)
    table.add_column("Commit Sha", style="green", no_wrap=True)
    table.add_column("Source Branch", style="magenta")
    table.add_column("Build", style="dim")
    for entry in report.entries:
        table.add_row(
            entry.package_version or "-",
            entry.commit,
            entry.source_branch,
            f"{entry.build_number} (#{entry.build_id})",
        )
    return table


def print_branch_report(console: Console, report: BranchReport) -> None:
    if report.error is not None:
        console.print(Text(f"Error: {report.error}", style="red"))
    else:
        console.print(build_report_table(report))
    console.print()
