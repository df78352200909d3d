"""Shared API dependencies.

Provides settings and the technology registry as injectable
FastAPI dependencies so tests can override them.
"""

from __future__ import annotations

from app.config import Settings, get_settings
from services.tech_registry import TechnologyRegistry, get_registry


def settings_dependency() -> Settings:
    return get_settings()


def registry_dependency() -> TechnologyRegistry:
    """Registry configured through ``RI_TECH_REGISTRY_PATH``."""
    return get_registry()
