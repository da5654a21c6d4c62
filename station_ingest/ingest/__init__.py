from .report_handler import (
    RESERVED_KEYS,
    ReportHandler,
    ReportResult,
    TelemetrySet,
    parse_query,
)

__all__ = ["RESERVED_KEYS", "ReportHandler", "ReportResult", "TelemetrySet", "parse_query"]
