"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) para credenciales, contenido de git y builds.
- El resolver y el driver dependen de estos contratos, no de httpx.
"""
