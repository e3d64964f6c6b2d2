"""FastAPI application entrypoint.

`create_app` composes the application: it builds the database engine,
creates tables, installs the request logging middleware and the error
handlers, and mounts one router per entity family. Route handlers are
intentionally thin: they bind requests, delegate to services, and wrap
results in the `{message, data}` envelope.
"""

import json
import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import Settings, settings as default_settings
from .database import create_db_and_tables, create_db_engine
from .routes import ROUTERS
from .services import ServiceError

logger = logging.getLogger("edumeta.api")


def _log_request(event: str, request: Request, started: float, status_code: Optional[int] = None):
    payload = {
        "request_id": getattr(request.state, "request_id", ""),
        "path": request.url.path,
        "method": request.method,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }
    if status_code is not None:
        payload["status_code"] = status_code
    if status_code is None:
        logger.exception("%s %s", event, json.dumps(payload, ensure_ascii=True))
    else:
        logger.info("%s %s", event, json.dumps(payload, ensure_ascii=True))


async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        _log_request("request_failed", request, started)
        raise
    response.headers["X-Request-ID"] = req_id
    _log_request("request_done", request, started, response.status_code)
    return response


async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"statusCode": exc.status_code, "message": exc.message, "error": exc.error},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as 400 Bad Request."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"statusCode": 400, "message": messages, "error": "Bad Request"}),
    )


def create_app(settings: Optional[Settings] = None, database_url: Optional[str] = None) -> FastAPI:
    """Build the application around an explicitly constructed engine.

    `database_url` overrides the configured URL, which tests use to run
    against an in-memory SQLite database.
    """
    settings = settings or default_settings
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title="Educational Platform Metadata API")
    app.state.settings = settings
    app.state.engine = create_db_engine(database_url or settings.DATABASE_URL, echo=settings.SQL_ECHO)
    create_db_and_tables(app.state.engine)

    # Wide-open CORS keeps local frontends working without extra config in dev.
    if settings.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.middleware("http")(request_context_middleware)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    for router in ROUTERS:
        app.include_router(router)
    return app


app = create_app()
