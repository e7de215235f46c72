"""Servicios del Core: extractores, resolver de builds y driver por rama."""
