from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from watcher.app.application.registration import register_watch
from watcher.app.core import SERVICE_NAME

register_router = APIRouter(tags=["Registration"])

REGISTER_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


@register_router.api_route(
    "/register/{key}",
    methods=REGISTER_METHODS,
    summary="Start watching a job",
    description="Writes a durable marker for the job key and starts polling it in the background. Returns immediately; the webhook fires once the job completes.",
    responses={
        200: {"description": "Marker written and watch started."},
        400: {"description": "Key cannot be used as a marker name."},
        500: {"description": "Marker could not be persisted; nothing is watched."},
    },
)
async def register(request: Request, key: str) -> Response:
    watch_set = getattr(request.app.state, "watch_set", None)
    supervisor = getattr(request.app.state, "supervisor", None)
    if watch_set is None or supervisor is None:
        _log("register_rejected", key=key, reason="dependencies_not_ready")
        return Response(status_code=500, content="ERROR", media_type="text/plain")

    outcome = await register_watch(key, watch_set, supervisor)
    if outcome.success:
        return Response(status_code=200, content="OK", media_type="text/plain")

    _log("register_failed", key=key, reason=outcome.error, invalid_key=outcome.invalid_key)
    status_code = 400 if outcome.invalid_key else 500
    return Response(status_code=status_code, content="ERROR", media_type="text/plain")
