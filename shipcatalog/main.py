import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from shipcatalog.api.routes import router
from shipcatalog.config import settings
from shipcatalog.database import init_db
from shipcatalog.schemas.error import ErrorResponse

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    logger.info("Ship catalogue ready (database=%s)", settings.DATABASE_URL.split("@")[-1])
    yield


app = FastAPI(
    title="Ship Catalogue",
    description="CRUD, filtering and paging for a catalogue of ships.",
    version=settings.VERSION,
    lifespan=lifespan,
)

# CORS — origins from settings (supports comma-separated env var)
cors_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


# ── Structured error handlers ─────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and query params are bad requests, same as out-of-range fields
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(detail=problems or "Invalid request", code="invalid_request").model_dump(),
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    return JSONResponse(
        status_code=409,
        content=ErrorResponse(detail=str(exc.orig) if exc.orig else str(exc), code="conflict").model_dump(),
    )


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s:\n%s", request.method, request.url.path, traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="An unexpected error occurred.", code="internal_error").model_dump(),
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "version": settings.VERSION}
