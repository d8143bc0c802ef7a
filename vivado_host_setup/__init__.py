"""Vivado host setup for Apple Silicon / Intel Macs (Python-first, state-driven).

Core design goals:
- Sequential, resumable steps
- Idempotent edits to Docker Desktop settings
- Installer accepted only by known checksum
- Centralized logging
"""

__all__ = []
