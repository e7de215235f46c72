"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y auth para todas las organizaciones.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.config import AppSettings
from core.errors import ServiceRequestError

AZURE_DEVOPS_API_VERSION = "7.0"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str = "",
    token: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Con `token`, usa basic auth `(settings.username, token)`, que es lo que
    acepta Azure DevOps para PATs.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }

    auth = httpx.BasicAuth(settings.username, token) if token else None
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/") + "/" if base_url else "",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        auth=auth,
        transport=transport,
    )


def error_type_key(response: httpx.Response) -> str:
    """`typeKey` del cuerpo de error de Azure DevOps (vacío si no hay JSON)."""

    try:
        payload = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict):
        return str(payload.get("typeKey") or "")
    return ""


async def get_json(client: httpx.AsyncClient, url: str, **params: Any) -> Any:
    """GET que traduce fallos de red y HTTP a `ServiceRequestError`."""

    params.setdefault("api-version", AZURE_DEVOPS_API_VERSION)
    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        raise ServiceRequestError(f"Request to {url} failed: {exc}") from exc

    if response.status_code != 200:
        raise ServiceRequestError(f"Request to {response.request.url} failed", response.status_code)
    try:
        return response.json()
    except ValueError as exc:
        # Un 203 / página de login HTML es el síntoma típico de un PAT inválido.
        raise ServiceRequestError(
            f"Non-JSON response from {response.request.url}", response.status_code
        ) from exc
