"""Estadísticas de procesamiento de reportes."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Stats:
    """Contadores de procesamiento, compartidos entre requests concurrentes."""

    reports: int = 0
    values: int = 0
    published: int = 0
    failed: int = 0
    discovery_documents: int = 0
    unknown_keys: int = 0
    last_report_at: float = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, **increments: int) -> None:
        """Suma los incrementos indicados bajo el lock."""
        with self._lock:
            for name, amount in increments.items():
                setattr(self, name, getattr(self, name) + amount)

    def mark_report(self, values: int, at: float) -> None:
        with self._lock:
            self.reports += 1
            self.values += values
            self.last_report_at = at

    def to_dict(self) -> dict:
        """Convierte a diccionario."""
        with self._lock:
            return {
                "reports": self.reports,
                "values": self.values,
                "published": self.published,
                "failed": self.failed,
                "discovery_documents": self.discovery_documents,
                "unknown_keys": self.unknown_keys,
                "last_report_at": self.last_report_at,
                "started_at": self.started_at.isoformat(),
                "success_rate": self._success_rate(),
            }

    def _success_rate(self) -> float:
        """Calcula tasa de éxito."""
        total = self.published + self.failed
        if total == 0:
            return 1.0
        return self.published / total
