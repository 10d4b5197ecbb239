"""CLI package exports for top-level command entry points."""

from __future__ import annotations

from .main import BuildModalCLI, main

__all__ = ['BuildModalCLI', 'main']
