from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from watcher.app.core import SERVICE_NAME
from watcher.app.schemas.watches import ActiveWatchesResponse

health_router = APIRouter(tags=["Health"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@health_router.get(
    "/health/live",
    summary="Liveness probe",
    description="Returns 200 if the watcher process is running.",
    responses={200: {"description": "Service is alive."}},
)
async def live() -> dict:
    return {"status": "ok"}


@health_router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Returns 200 once the watch set and supervisor are wired and pending watches have been recovered.",
    responses={
        200: {"description": "Watcher is ready."},
        503: {"description": "Dependencies missing or recovery has not run."},
    },
)
async def ready(request: Request) -> Response:
    watch_set = getattr(request.app.state, "watch_set", None)
    supervisor = getattr(request.app.state, "supervisor", None)
    if watch_set is None or supervisor is None:
        _log("components_not_initialized")
        return Response(status_code=503, content="Not ready")
    if not getattr(request.app.state, "recovered", False):
        _log("recovery_pending")
        return Response(status_code=503, content="Recovery pending")
    return Response(status_code=200, content="OK")


@health_router.get(
    "/watches",
    summary="Active watches",
    description="Lists job keys that currently have at least one running watch task.",
    response_model=ActiveWatchesResponse,
    responses={503: {"description": "Supervisor not initialized."}},
)
async def active_watches(request: Request) -> Response:
    supervisor = getattr(request.app.state, "supervisor", None)
    if supervisor is None:
        return Response(status_code=503, content="Not ready")
    return Response(
        status_code=200,
        media_type="application/json",
        content=ActiveWatchesResponse(
            count=supervisor.active_count,
            keys=supervisor.active_keys(),
            allow_duplicates=supervisor.allow_duplicates,
        ).model_dump_json(),
    )
