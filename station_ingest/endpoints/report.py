"""Ingestion endpoint for Ambient Weather station reports.

The station firmware sends every field as a URL query parameter to `/`
or `/data/report/...`. The caller always gets 200 once the query is
parsed; publish failures only show up in the logs.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from ..ingest.report_handler import ReportHandler, parse_query
from ..schemas import ReportAccepted

logger = logging.getLogger(__name__)

router = APIRouter(tags=["report"])

# Every verb is a report.
REPORT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_report_handler(request: Request) -> ReportHandler:
    return request.app.state.report_handler


def _process(request: Request, handler: ReportHandler) -> ReportAccepted:
    client_host = request.client.host if request.client else "-"
    logger.info(
        "[REPORT] Request: host=%s, user-agent=%s url=%s",
        client_host,
        request.headers.get("user-agent", ""),
        request.url,
    )

    telemetry = parse_query(request.query_params.multi_items())
    result = handler.handle(telemetry)

    if result.failed_publishes:
        logger.warning(
            "[REPORT] Accepted with %d failed publishes (values=%d)",
            result.failed_publishes,
            result.num_values,
        )
    return ReportAccepted(num_values=result.num_values)


@router.api_route("/", methods=REPORT_METHODS, response_model=ReportAccepted)
def ingest_report(
    request: Request,
    handler: ReportHandler = Depends(get_report_handler),
) -> ReportAccepted:
    return _process(request, handler)


@router.api_route("/data/report", methods=REPORT_METHODS, response_model=ReportAccepted)
def ingest_data_report_bare(
    request: Request,
    handler: ReportHandler = Depends(get_report_handler),
) -> ReportAccepted:
    return _process(request, handler)


@router.api_route("/data/report/{rest:path}", methods=REPORT_METHODS, response_model=ReportAccepted)
def ingest_data_report(
    rest: str,
    request: Request,
    handler: ReportHandler = Depends(get_report_handler),
) -> ReportAccepted:
    """Path used by the station's "customized server" upload setting."""
    return _process(request, handler)
