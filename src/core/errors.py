"""Jerarquía de errores del Core.

Por qué un módulo propio:
- Los extractores, el resolver y los adaptadores levantan tipos concretos.
- El driver por rama captura `Exception` y muestra el mensaje, así que cada
  error tiene que llevar el valor que lo provocó.
"""

from __future__ import annotations


class ProvenanceError(Exception):
    """Base de todos los errores de vs-provenance."""


class ConfigurationError(ProvenanceError):
    """Configuración incompleta o inconsistente (p.ej. organización sin cliente)."""


class MalformedReference(ProvenanceError):
    """El campo `url` del components JSON no tiene la forma `<url>;<manifest>.vsman`."""


class MalformedDocument(ProvenanceError):
    """El package-config no es XML bien formado."""


class InvalidUrl(ProvenanceError):
    """La URL del artefacto no se puede parsear o no tiene segmentos de path."""


class AmbiguousDefinition(ProvenanceError):
    """Más de una definición de pipeline coincide con el nombre pedido."""


class DefinitionNotFound(ProvenanceError):
    """Ninguna definición de pipeline coincide con el nombre pedido."""


class BuildNotFound(ProvenanceError):
    """Ninguna fuente candidata devolvió builds para el build number.

    Attributes:
        package_version: Versión de paquete extraída (puede ser None).
        build_number: Token derivado de la URL del artefacto.
    """

    def __init__(self, package_version: str | None, build_number: str) -> None:
        self.package_version = package_version
        self.build_number = build_number
        super().__init__(
            f"Couldn't find build for package version: {package_version} "
            f"(build number {build_number})"
        )


class CredentialUnavailable(ProvenanceError):
    """No se pudo obtener el token de acceso (archivo, env o Key Vault)."""


class FileNotFound(ProvenanceError):
    """El archivo no existe en la rama pedida."""


class RepositoryNotFound(ProvenanceError):
    """El repositorio no existe (o no es visible con la credencial actual)."""


class ServiceRequestError(ProvenanceError):
    """Fallo de transporte o respuesta HTTP no exitosa de un servicio remoto.

    Attributes:
        status_code: Código HTTP, o None si el fallo fue de red.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)
