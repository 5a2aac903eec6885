import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from salonsuite.core.config import settings
from salonsuite.core.logging_config import get_logger
from salonsuite.services.checkout_service import CheckoutError
import salonsuite.models  # noqa: F401  register every mapper before the first query
from salonsuite.api.v1.api import api_router

logger = get_logger("main")

TENANT_HEADER = "X-Tenant-ID"
ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", TENANT_HEADER]

app = FastAPI(
    title="SalonSuite API",
    description="Multi-tenant salon & spa management",
    version="1.0.0",
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=ALLOWED_METHODS,
    allow_headers=ALLOWED_HEADERS,
)


@app.on_event("startup")
async def startup_event():
    """Schema is brought up to date by scripts/init_db.py before uvicorn starts."""
    logger.info(f"SalonSuite API started (sms_enabled={settings.SMS_ENABLED}, debug={settings.DEBUG})")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    tenant_id = request.headers.get(TENANT_HEADER, "-")
    logger.debug(f"{request.method} {request.url.path} tenant={tenant_id} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


def cors_headers_for(request: Request) -> dict:
    """Error responses bypass CORSMiddleware, so echo the allowed origin here."""
    origin = request.headers.get("origin")
    if not origin or origin not in settings.CORS_ORIGINS:
        return {}
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
        "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
    }


def error_response(request: Request, status_code: int, detail) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=cors_headers_for(request))


@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError):
    logger.warning(f"Checkout rejected on {request.url.path}: {exc}")
    return error_response(request, status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, jsonable_encoder(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    content = {"detail": "Internal server error"}
    if settings.DEBUG:
        content["error"] = str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=cors_headers_for(request),
    )


app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
