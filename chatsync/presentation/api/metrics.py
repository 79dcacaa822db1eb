"""
Prometheus Metrics Endpoint.

    observability/metrics.py         This file
    ────────────────────────         ─────────
    Define & record metrics ──────►  /metrics endpoint ──────────► Prometheus scraper

Test with: curl http://localhost:5001/metrics
"""

from fastapi import APIRouter, Response

from chatsync.observability.metrics import get_metrics_content

router = APIRouter(prefix="/metrics", tags=["observability"])


@router.get("")
async def metrics():
    """Prometheus metrics in text exposition format."""
    content, content_type = get_metrics_content()
    return Response(content=content, media_type=content_type)
