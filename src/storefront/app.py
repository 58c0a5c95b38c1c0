from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from src.config import SESSION_BACKEND, STOREFRONT_HOST, STOREFRONT_PORT
from src.data.postgres.connection import db_connection
from src.data.postgres.schema import ensure_schema
from src.storefront import storefront_logger as logger
from src.storefront.routers import admin_router, auth_router, cart_router, catalog_router, order_router
from src.utils.logger import AppLogger, set_app_context
from src.utils.response_format import ResponseFormat
from src.utils.status import Status

HTTP_STATUS_MAP = {
    401: Status.UNAUTHORIZED,
    403: Status.FORBIDDEN,
    404: Status.NOT_FOUND,
}


class AppContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set app logger context for all requests."""

    async def dispatch(self, request, call_next):
        with set_app_context(AppLogger.STOREFRONT):
            response = await call_next(request)
        return response


@asynccontextmanager
async def lifespan(_: FastAPI):
    with set_app_context(AppLogger.STOREFRONT):
        logger.info(f"Storefront starting on {STOREFRONT_HOST}:{STOREFRONT_PORT}")
        await ensure_schema()

    yield

    with set_app_context(AppLogger.STOREFRONT):
        logger.info("Storefront shutting down...")
        if SESSION_BACKEND == "redis":
            from src.data.redis.connection import redis_connection
            await redis_connection.close()
        await db_connection.close()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ResponseFormat(
        status=HTTP_STATUS_MAP.get(exc.status_code, Status.FAILURE),
        message=str(exc.detail),
    ).to_response(exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return ResponseFormat(
        status=Status.INVALID_PARAMS,
        message="Invalid request parameters",
        data=errors,
    ).to_response(422)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return ResponseFormat(
        status=Status.UNKNOWN_ERROR,
        message="Internal server error",
    ).to_response(500)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Supermarket Storefront API",
        description="Catalog, cart, checkout, orders and admin for the online supermarket",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(AppContextMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router)
    app.include_router(catalog_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(admin_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting Storefront on {STOREFRONT_HOST}:{STOREFRONT_PORT}")
    uvicorn.run(app, host=STOREFRONT_HOST, port=STOREFRONT_PORT)
