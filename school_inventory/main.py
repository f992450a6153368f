# /school_inventory/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import ORJSONResponse

from school_inventory.app_logging import get_logger
from school_inventory.core.api import router as api_router
from school_inventory.core.config import settings
from school_inventory.core.exceptions import NotFoundError, StoreError, ValidationError
from school_inventory.core.models import db_helper

log = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    yield
    # shutdown
    await db_helper.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """
    Domain errors -> HTTP:
    - ValidationError -> 422 (with the offending field)
    - NotFoundError   -> 404
    - StoreError      -> 503 (the action failed, the process keeps running)
    """

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> ORJSONResponse:
        return ORJSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})

    @app.exception_handler(StoreError)
    async def _store_error(request: Request, exc: StoreError) -> ORJSONResponse:
        log.warning({"event": "store_unavailable", "path": request.url.path, "error": exc.message})
        return ORJSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": exc.message})


def create_app() -> FastAPI:
    app = FastAPI(
        title="School inventory",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


main_app = create_app()


if __name__ == "__main__":
    # uvicorn school_inventory.main:main_app --reload
    uvicorn.run(
        "school_inventory.main:main_app",
        host=settings.run.host,
        port=settings.run.port,
        reload=True,
    )
