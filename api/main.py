from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db, log, settings
from customers import router as customers_router
from products import router as products_router
from reports import router as reports_router

logger = logging.getLogger(__name__)

SERVER_ERROR_DETAIL = "Something went wrong. Try again later!"


def _validation_detail(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON."
    # Drop the "body"/"query"/"path" prefix so the message names the field.
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = str(first.get("msg") or "invalid value")
    if not field:
        return f"Invalid request: {message}."
    return f"Invalid value for '{field}': {message}."


async def _database_error_handler(request: Request, exc: db.DatabaseError) -> JSONResponse:
    # Full detail stays in the server log; the client gets a generic message.
    logger.exception("database_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": SERVER_ERROR_DETAIL},
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": SERVER_ERROR_DETAIL},
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = _validation_detail(exc)
    logger.info("request_rejected method=%s path=%s detail=%s", request.method, request.url.path, detail)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail},
    )


def create_app(database: db.Database | None = None) -> FastAPI:
    log.configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One storage handle per process: opened here, closed on shutdown.
        await app.state.db.connect()
        logger.info("database_connected")
        try:
            yield
        finally:
            await app.state.db.close()
            logger.info("database_closed")

    app = FastAPI(
        title="Techgear API",
        description="Products, categories, customers, orders and review statistics.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.db = database if database is not None else db.Database()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(db.DatabaseError, _database_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)

    app.include_router(products_router.router, tags=["products"])
    app.include_router(customers_router.router, tags=["customers"])
    app.include_router(reports_router.router, tags=["reports"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/health/db")
    async def health_db(request: Request) -> dict:
        ok = await request.app.state.db.ping()
        return {"database": "ok" if ok else "unreachable", "ok": ok}

    @app.get("/")
    def root() -> dict:
        return {"message": "techgear api"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    host, port = settings.api_host(), settings.api_port()
    logger.info("server_starting host=%s port=%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
