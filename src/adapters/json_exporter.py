"""Exportación JSON del reporte por ramas.

Por qué JSON:
- Permite consumir el resultado desde scripts de release (tags, notas).
- No hay persistencia propia: el archivo es solo una salida opcional.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.domain.models import BranchReport


def export_reports_json(*, reports: Sequence[BranchReport], output_path: Path) -> Path:
    """Exporta los `BranchReport` a JSON UTF-8 con formato estable (orden de ramas)."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"branches": [report.model_dump(mode="json") for report in reports]}
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
