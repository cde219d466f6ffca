from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from .config import get_settings
from .errors import AppError
from .resources import Resources
from .api.routers import health as health_router
from .api.routers import auth as auth_router
from .api.routers import contact as contact_router
from .api.routers import cancellations as cancellations_router
from .api.routers import bookings as bookings_router
from .api.routers import payments as payments_router
from .api.routers import calls as calls_router
from .api.routers import metrics as metrics_router
from .observability.logging import log_extra, setup_logging
from .middleware.request_context import RequestContextMiddleware
from .observability.metrics import MetricsHTTPMiddleware

settings = get_settings()
setup_logging()
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    owned = getattr(app.state, "resources", None) is None
    if owned:
        app.state.resources = await Resources.open(settings)
    try:
        yield
    finally:
        if owned:
            await app.state.resources.close()


def _fail(status_code: int, message: str, data=None, headers=None) -> JSONResponse:
    body = {"success": False, "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        log.warning("upstream_failure", extra=log_extra(path=request.url.path, error=exc.message))
    return _fail(exc.status_code, exc.message, exc.data)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _fail(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _fail(422, "Invalid request", {"errors": errors})


def create_app(resources: Optional[Resources] = None) -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)
    app.state.resources = resources

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.REQUEST_ID_HEADER],
    )

    # then our own middlewares
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(MetricsHTTPMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(contact_router.router)
    app.include_router(cancellations_router.router)
    app.include_router(bookings_router.router)
    app.include_router(payments_router.router)
    app.include_router(calls_router.router)
    app.include_router(metrics_router.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("tourism_api.main:app", host=settings.APP_HOST, port=settings.APP_PORT, reload=settings.ENV == "dev")
