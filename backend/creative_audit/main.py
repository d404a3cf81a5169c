from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from creative_audit.config import get_settings, get_cors_origins
from creative_audit.routers import analyze
from creative_audit.services.creative_audit.errors import AuditError, FallbackExhaustedError


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


settings_for_cors = get_settings()
cors_allow_origins: List[str] = get_cors_origins(settings_for_cors)

if cors_allow_origins:
    logger.info("Allowing CORS origins: %s", cors_allow_origins)


app = FastAPI(title="Creative Audit API", version="0.1.0")


app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https?://localhost(:\d+)?$",
    allow_origins=cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuditError)
async def audit_error_handler(request: Request, exc: AuditError):
    """Typed audit failures -> { error, kind } with the error's HTTP status."""
    content = {"error": exc.user_message, "kind": exc.kind}
    source = exc
    if isinstance(exc, FallbackExhaustedError):
        content["original_kind"] = exc.original_kind
        # details describe the image-path failure, not the fallback's
        source = exc.original
    if get_settings().is_development():
        cause = getattr(source, "cause", None) or (source if source is not exc else None)
        if cause is not None:
            content["details"] = str(cause)
    return JSONResponse(status_code=exc.http_status, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Invalid submissions (including empty ones) are a 400, not a 422."""
    content = {"error": "Invalid input", "kind": "invalid_input"}
    if get_settings().is_development():
        content["details"] = "; ".join(str(err.get("msg", "")) for err in exc.errors())
    return JSONResponse(status_code=400, content=content)


@app.get("/api")
def api_info():
    """API information endpoint"""
    return {"message": "Creative Audit API", "version": "0.1.0"}


@app.get("/health")
def health_check():
    """Check that the API is up and whether Gemini is configured"""
    settings = get_settings()
    return {"status": "healthy", "gemini_configured": bool((settings.gemini_api_key or "").strip())}


app.include_router(analyze.router)
