"""Lectura de archivos del repositorio de VS en una rama.

Usa `GET {org}/{project}/_apis/git/repositories/{repo}/items` con
`versionDescriptor` de tipo branch, equivalente a leer el blob en la punta de
la rama.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from adapters.http_client import AZURE_DEVOPS_API_VERSION, error_type_key
from core.errors import FileNotFound, RepositoryNotFound, ServiceRequestError
from core.interfaces.sources import ContentFetcher

logger = logging.getLogger(__name__)


class AzureGitContentFetcher(ContentFetcher):
    """Lee blobs de un repositorio fijo (organización/proyecto/repo)."""

    def __init__(self, client: httpx.AsyncClient, *, project: str, repository: str) -> None:
        self._client = client
        self._project = project
        self._repository = repository

    @property
    def items_url(self) -> str:
        return (
            f"{quote(self._project, safe='')}/_apis/git/repositories/"
            f"{quote(self._repository, safe='')}/items"
        )

    async def fetch_text(self, path: str, branch: str) -> str:
        # Los paths del repo se guardan con `\` en la config original.
        normalized = "/" + path.replace("\\", "/").lstrip("/")
        params = {
            "path": normalized,
            "versionDescriptor.version": branch,
            "versionDescriptor.versionType": "branch",
            "download": "true",
            "api-version": AZURE_DEVOPS_API_VERSION,
        }
        logger.debug("Fetching %s@%s from %s/%s", normalized, branch, self._project, self._repository)
        try:
            response = await self._client.get(
                self.items_url,
                params=params,
                headers={"Accept": "application/octet-stream, text/plain, */*"},
            )
        except httpx.HTTPError as exc:
            raise ServiceRequestError(f"Failed to fetch {normalized} at {branch}: {exc}") from exc

        if response.status_code == 404:
            if "Repository" in error_type_key(response):
                raise RepositoryNotFound(
                    f"Repository {self._project}/{self._repository} not found"
                )
            raise FileNotFound(f"{normalized} not found on branch {branch}")
        if response.status_code != 200:
            raise ServiceRequestError(
                f"Failed to fetch {normalized} at {branch}", response.status_code
            )

        # utf-8-sig: los .json de .corext suelen llevar BOM.
        return response.content.decode("utf-8-sig")
