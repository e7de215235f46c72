"""Extractores puros sobre los documentos de configuración de una rama.

- components JSON -> `ComponentManifestRef`
- package-config XML -> versión del paquete (o None)
- URL del artefacto -> build number

Sin I/O: reciben texto ya descargado y propagan sus errores sin recuperarse.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from urllib.parse import urlsplit

from core.domain.models import ComponentManifestRef
from core.errors import InvalidUrl, MalformedDocument, MalformedReference

MANIFEST_EXTENSION = ".vsman"


def extract_manifest_ref(
    json_document: str,
    component_name: str,
    *,
    manifest_extension: str = MANIFEST_EXTENSION,
) -> ComponentManifestRef:
    """Lee `Components.<component_name>.url` y lo separa en (url, manifest).

    El valor tiene la forma `<artifact-url>;<manifest>.vsman`.
    """

    try:
        document = json.loads(json_document)
    except json.JSONDecodeError as exc:
        raise MalformedReference(f"Components JSON is not valid JSON: {exc}") from exc

    components = document.get("Components") if isinstance(document, dict) else None
    component = components.get(component_name) if isinstance(components, dict) else None
    raw = component.get("url") if isinstance(component, dict) else None
    if not isinstance(raw, str):
        raise MalformedReference(
            f"Couldn't get URL and manifest for {component_name!r}. Got: {raw!r}"
        )

    parts = raw.split(";")
    if len(parts) != 2:
        raise MalformedReference(f"Couldn't get URL and manifest. Got: {raw!r}")

    artifact_url, manifest_file_name = parts
    if not manifest_file_name.endswith(manifest_extension):
        raise MalformedReference(
            f"Couldn't get URL and manifest. Not a {manifest_extension} file? Got: {raw!r}"
        )
    if not artifact_url:
        raise MalformedReference(f"Couldn't get URL and manifest. Empty URL in: {raw!r}")

    return ComponentManifestRef(artifact_url=artifact_url, manifest_file_name=manifest_file_name)


def extract_package_version(xml_document: str, package_id: str) -> str | None:
    """Versión del primer `<package id=...>` (orden de documento), o None."""

    try:
        root = ET.fromstring(xml_document)
    except ET.ParseError as exc:
        raise MalformedDocument(f"Package config is not well-formed XML: {exc}") from exc

    # iter() incluye la raíz y recorre en orden de documento.
    for element in root.iter("package"):
        if element.get("id") == package_id:
            return element.get("version")
    return None


def derive_build_number(artifact_url: str) -> str:
    """Último segmento del path de la URL (sin query ni fragment).

    >>> derive_build_number("https://host/a/b/12345.67.8")
    '12345.67.8'
    """

    try:
        parts = urlsplit(artifact_url.strip())
    except ValueError as exc:
        raise InvalidUrl(f"Invalid artifact URL: {artifact_url!r} ({exc})") from exc

    if not parts.scheme or not parts.netloc:
        raise InvalidUrl(f"Invalid artifact URL: {artifact_url!r}")

    segments = [segment for segment in parts.path.split("/") if segment]
    if not segments:
        raise InvalidUrl(f"Artifact URL has no path segments: {artifact_url!r}")
    return segments[-1]
