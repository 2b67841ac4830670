"""Liveness endpoint for load balancers and the on-call dashboard."""

import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.core.models import EventStatus, OutboxEvent

logger = structlog.get_logger(__name__)


def _ping_database() -> None:
    with connections["default"].cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _ping_cache() -> None:
    cache.set("storefront:health", "ok", 10)
    if cache.get("storefront:health") != "ok":
        raise ConnectionError("cache round-trip returned a stale value")


def _probe(name: str, ping: Callable[[], None]) -> Dict[str, Any]:
    started = time.monotonic()
    try:
        ping()
    except (DatabaseError, ConnectionError, OSError) as exc:
        logger.error("health.probe_failed", probe=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - started) * 1000, 2),
    }


def _outbox_backlog() -> Dict[str, int]:
    return {
        "pending": OutboxEvent.objects.pending().count(),
        "failed": OutboxEvent.objects.filter(status=EventStatus.FAILED).count(),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    services = {
        "database": _probe("database", _ping_database),
        "cache": _probe("cache", _ping_cache),
    }
    healthy = all(probe["status"] == "up" for probe in services.values())

    # Backlog is informational only.
    if services["database"]["status"] == "up":
        services["outbox"] = _outbox_backlog()

    label = "healthy" if healthy else "unhealthy"
    logger.info("health.checked", status=label)
    return JsonResponse(
        {"status": label, "timestamp": timezone.now().isoformat(), "services": services},
        status=200 if healthy else 503,
    )
