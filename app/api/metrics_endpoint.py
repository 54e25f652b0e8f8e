"""Prometheus scrape endpoint.

Returns every registered metric in the text exposition format, e.g.::

  # TYPE oauth_tokens_issued_total counter
  oauth_tokens_issued_total 12.0
  oauth_errors_total{error="InvalidCode"} 3.0
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
