"""Consultas de definiciones y builds (Azure DevOps Build REST API)."""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from adapters.http_client import get_json
from core.domain.models import BuildDefinition, BuildRecord
from core.errors import ServiceRequestError
from core.interfaces.sources import BuildSystemClient

logger = logging.getLogger(__name__)


def _values(payload: Any, url: str) -> list[dict[str, Any]]:
    # Las listas vienen envueltas: {"count": N, "value": [...]}.
    if not isinstance(payload, dict) or not isinstance(payload.get("value"), list):
        raise ServiceRequestError(f"Unexpected payload from {url}")
    return [item for item in payload["value"] if isinstance(item, dict)]


class AzureBuildClient(BuildSystemClient):
    """Cliente de builds para una organización.

    El `httpx.AsyncClient` inyectado ya tiene `base_url` (la organización) y auth.
    """

    def __init__(self, client: httpx.AsyncClient, *, organization: str) -> None:
        self._client = client
        self.organization = organization

    async def list_definitions(self, project: str, name: str) -> list[BuildDefinition]:
        url = f"{quote(project, safe='')}/_apis/build/definitions"
        payload = await get_json(self._client, url, name=name)
        definitions = [BuildDefinition.model_validate(item) for item in _values(payload, url)]
        logger.debug("%s: %d definition(s) named %r", self.organization, len(definitions), name)
        return definitions

    async def list_builds(
        self,
        project: str,
        definition_ids: Sequence[int],
        build_number: str,
    ) -> list[BuildRecord]:
        url = f"{quote(project, safe='')}/_apis/build/builds"
        payload = await get_json(
            self._client,
            url,
            definitions=",".join(str(i) for i in definition_ids),
            buildNumber=build_number,
        )
        return [BuildRecord.model_validate(item) for item in _values(payload, url)]
