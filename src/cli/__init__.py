"""CLI (Typer + Rich): comandos `report` y `doctor`."""
