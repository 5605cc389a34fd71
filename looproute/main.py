# looproute/main.py

from fastapi import FastAPI

from looproute.api.v1 import routes_health, routes_nodes, routes_planning, routes_search
from looproute.core.config import settings
from looproute.core.logger import logger
from looproute.core.logging_config import setup_logging


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Plans one continuous driving loop through a set of map waypoints, "
            "optionally in the order suggested by an external tour optimizer."
        ),
    )

    # Routers
    app.include_router(routes_health.router, prefix="", tags=["health"])
    app.include_router(routes_nodes.router, prefix="", tags=["nodes"])
    app.include_router(routes_planning.router, prefix="", tags=["planning"])
    app.include_router(routes_search.router, prefix="", tags=["search"])

    logger.info(
        "{} {} ready ({} environment)",
        settings.APP_NAME,
        settings.APP_VERSION,
        settings.ENVIRONMENT,
    )
    return app


app = create_app()
