"""Clientes REST de Azure DevOps (git items y builds).

Cada módulo implementa un contrato de `core.interfaces.sources`.
"""

from adapters.azure_devops.build import AzureBuildClient
from adapters.azure_devops.git import AzureGitContentFetcher

__all__ = [
    "AzureBuildClient",
    "AzureGitContentFetcher",
]
