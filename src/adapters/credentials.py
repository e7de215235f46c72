"""Proveedores del token de acceso a Azure DevOps.

Orden de resolución (`build_credential_provider`):
1) token explícito (`VS_PROVENANCE_ACCESS_TOKEN`)
2) archivo local (`VS_PROVENANCE_TOKEN_FILE`)
3) secreto en Azure Key Vault (`key_vault_url` + `secret_name`)

Todos fallan con `CredentialUnavailable`; la CLI lo trata como error fatal
antes de procesar cualquier rama.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable

from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from core.config import AppSettings
from core.errors import CredentialUnavailable
from core.interfaces.sources import CredentialProvider

logger = logging.getLogger(__name__)


class StaticTokenProvider(CredentialProvider):
    def __init__(self, token: str) -> None:
        self._token = token

    async def get_token(self) -> str:
        token = self._token.strip()
        if not token:
            raise CredentialUnavailable("Configured access token is empty")
        return token


class TokenFileProvider(CredentialProvider):
    """Lee el PAT de un archivo local (primera línea no vacía)."""

    def __init__(self, path: Path) -> None:
        self.path = path.expanduser()

    async def get_token(self) -> str:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CredentialUnavailable(f"Cannot read token file {self.path}: {exc}") from exc
        token = next((line.strip() for line in text.splitlines() if line.strip()), "")
        if not token:
            raise CredentialUnavailable(f"Token file {self.path} is empty")
        return token


def default_key_vault_credential() -> DefaultAzureCredential:
    """Cadena estándar de Azure (env, managed identity, CLI, login interactivo)."""

    return DefaultAzureCredential(exclude_interactive_browser_credential=False)


class KeyVaultSecretProvider(CredentialProvider):
    """Lee un secreto de Azure Key Vault con el SDK oficial.

    Por qué en un hilo:
    - `SecretClient` síncrono admite el login interactivo de `DefaultAzureCredential`
      (la variante `.aio` no lo trae) y no exige aiohttp.
    - `asyncio.to_thread` evita bloquear el event loop mientras tanto.
    """

    def __init__(
        self,
        *,
        vault_url: str,
        secret_name: str,
        credential: Any | None = None,
        client_factory: Callable[..., SecretClient] = SecretClient,
    ) -> None:
        self.vault_url = vault_url.rstrip("/")
        self.secret_name = secret_name
        self._credential = credential
        self._client_factory = client_factory

    def _read_secret(self) -> str | None:
        credential = self._credential or default_key_vault_credential()
        with self._client_factory(vault_url=self.vault_url, credential=credential) as client:
            return client.get_secret(self.secret_name).value

    async def get_token(self) -> str:
        try:
            value = await asyncio.to_thread(self._read_secret)
        except AzureError as exc:
            raise CredentialUnavailable(
                f"Secret {self.secret_name!r} unavailable in {self.vault_url}: {exc.message or exc}"
            ) from exc
        if not value:
            raise CredentialUnavailable(f"Secret {self.secret_name!r} has no value")
        logger.debug("Loaded secret %s from %s", self.secret_name, self.vault_url)
        return value


def build_credential_provider(settings: AppSettings) -> CredentialProvider:
    if settings.access_token:
        return StaticTokenProvider(settings.access_token)
    if settings.token_file is not None:
        return TokenFileProvider(settings.token_file)
    if settings.key_vault_url:
        return KeyVaultSecretProvider(
            vault_url=settings.key_vault_url,
            secret_name=settings.secret_name,
        )
    raise CredentialUnavailable(
        "No credential configured: set VS_PROVENANCE_ACCESS_TOKEN, "
        "VS_PROVENANCE_TOKEN_FILE or VS_PROVENANCE_KEY_VAULT_URL"
    )
