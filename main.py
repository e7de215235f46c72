"""Entry point de desarrollo (sin instalar el paquete).

Uso:
- `python main.py report -b main`

El código vive en `src/` y los paquetes (`cli`, `core`, `adapters`) no están en
el path hasta hacer `pip install -e .`; aquí se agrega `src/` a mano.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
