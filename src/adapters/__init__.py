"""Adaptadores: Azure DevOps REST, credenciales, httpx y export JSON."""
