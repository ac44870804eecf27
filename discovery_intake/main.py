# discovery_intake/main.py
import time
import uuid

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from discovery_intake.core.errors import RATE_LIMITED_MESSAGE, IntakeError, error_response
from discovery_intake.core.logging_config import logger, setup_logging
from discovery_intake.core.rate_limit import limiter
from discovery_intake.core.settings import get_settings
from discovery_intake.routers import discovery_call

settings = get_settings()

setup_logging(settings.LOG_LEVEL)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        integrations=[FastApiIntegration()],
        send_default_pii=False,
    )

# ----------------------------------------------------
# App init
# ----------------------------------------------------
app = FastAPI(title="Discovery Call Intake", version="0.1.0")

logger.info("startup", service="discovery-intake", environment=settings.ENVIRONMENT)


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    client_ip = request.client.host if request.client else "unknown"

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        ip=client_ip,
        endpoint=str(request.url.path),
        method=request.method,
    )

    logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    logger.info("request_finished", status_code=response.status_code, latency_ms=latency_ms)
    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Middleware
# ----------------------------------------------------
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)


# ----------------------------------------------------
# Errors
# ----------------------------------------------------
@app.exception_handler(IntakeError)
def intake_error_handler(request: Request, exc: IntakeError):
    status, body = error_response(exc)
    log = logger.warning if status < 500 else logger.error
    # detail alleen in de server logs
    log(
        "intake_failed",
        error_type=type(exc).__name__,
        detail=exc.detail,
        upstream_status=exc.upstream_status,
        status_code=status,
    )
    return JSONResponse(status_code=status, content=body)


@app.exception_handler(RateLimitExceeded)
def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("rate_limited", limit=str(exc.detail))
    return JSONResponse(status_code=429, content={"success": False, "message": RATE_LIMITED_MESSAGE})


@app.exception_handler(StarletteHTTPException)
def http_error_handler(request: Request, exc: StarletteHTTPException):
    # 405 (incl. TRACE e.d.), multipart parse fouten, 404
    status, body = error_response(exc)
    logger.warning("http_error", status_code=status, detail=str(exc.detail))
    return JSONResponse(status_code=status, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", error_type=type(exc).__name__, exc_info=exc)
    status, body = error_response(exc)
    return JSONResponse(status_code=status, content=body)


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(discovery_call.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
