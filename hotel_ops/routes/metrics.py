"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP hotel_bookings_created_total Total number of bookings created
        # TYPE hotel_bookings_created_total counter
        hotel_bookings_created_total{source="Local"} 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """
    Return metrics in the Prometheus text exposition format.

    Returns:
        Response: Metrics with Content-Type text/plain
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
