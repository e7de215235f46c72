"""Contratos de los colaboradores externos.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El resolver y el driver reciben estos objetos inyectados, así que los tests
  pueden pasar fakes en memoria en lugar de clientes HTTP.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import BuildDefinition, BuildRecord


@runtime_checkable
class CredentialProvider(Protocol):
    """Entrega el token de acceso o falla con `CredentialUnavailable`."""

    async def get_token(self) -> str:
        ...


@runtime_checkable
class ContentFetcher(Protocol):
    """Lee archivos del repositorio inspeccionado en una rama dada."""

    async def fetch_text(self, path: str, branch: str) -> str:
        """Devuelve el contenido de `path` en la punta de `branch`.

        Falla con `FileNotFound` o `RepositoryNotFound`.
        """

        ...


@runtime_checkable
class BuildSystemClient(Protocol):
    """Consultas de solo lectura contra el sistema de builds de una organización."""

    async def list_definitions(self, project: str, name: str) -> list[BuildDefinition]:
        ...

    async def list_builds(
        self,
        project: str,
        definition_ids: Sequence[int],
        build_number: str,
    ) -> list[BuildRecord]:
        ...
