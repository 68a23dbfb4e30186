import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from loguru import logger

from watcher.app.composition import WatcherDependencies, create_watcher_dependencies
from watcher.app.config.settings import Settings, load_settings
from watcher.app.core import SERVICE_NAME
from watcher.app.core.logging import setup_logging
from watcher.app.errors import ConfigurationError
from watcher.app.routers.health import health_router
from watcher.app.routers.register import register_router


def create_app(settings: Settings, dependencies: WatcherDependencies | None = None) -> FastAPI:
    deps = dependencies or create_watcher_dependencies(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.bind(service_name=SERVICE_NAME, event="watcher_starting").info("")
        await deps.connect()
        try:
            app.state.settings = deps.settings
            app.state.watch_set = deps.watch_set
            app.state.supervisor = deps.supervisor
            # Pending markers are adopted before the server accepts registrations.
            await deps.recover()
            app.state.recovered = deps.recovered
            yield
        finally:
            logger.bind(service_name=SERVICE_NAME, event="watcher_stopping").info("")
            app.state.recovered = False
            await deps.close()

    app = FastAPI(
        title="Job Watcher",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health_router)
    app.include_router(register_router)
    return app


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.bind(service_name=SERVICE_NAME, event="configuration_invalid").error("{}", e)
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_format)
    logger.bind(
        service_name=SERVICE_NAME,
        event="configuration_loaded",
        remote_url=settings.remote_url,
        webhook_url=settings.webhook_url,
        poll_interval=settings.poll_interval_seconds,
        port=settings.port,
    ).info("")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
