"""Módulo de endpoints HTTP."""

from .health import router as health_router
from .report import router as report_router

__all__ = ["health_router", "report_router"]
