"""FastAPI application -- Document Q&A API.

Stateless: every query carries the document it is about, so any
instance can serve any request.

Run with::

    uvicorn services.api.app.main:app --port 5001
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import __version__
from core.query import QueryError
from core.upload import UploadError
from src.config.settings import get_settings

from .routers import documents, query

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# urllib3 logs full request URLs at DEBUG, and the Gemini URL carries the API key
logging.getLogger("urllib3").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Document Q&A API",
    version=__version__,
    description="Upload a PDF or spreadsheet, then ask questions about it",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request body ceiling
# ---------------------------------------------------------------------------
@app.middleware("http")
async def limit_json_body(request: Request, call_next):
    """Reject JSON bodies larger than the configured ceiling.

    Only the declared ``Content-Length`` is checked.  A chunked body
    (no ``Content-Length``) is not counted here and reaches the route
    whatever its size.
    """
    content_type = request.headers.get("content-type", "")
    content_length = request.headers.get("content-length", "")
    if (
        content_type.startswith("application/json")
        and content_length.isdigit()
        and int(content_length) > settings.max_json_body_bytes
    ):
        logger.warning("Rejected %s body of %s bytes", request.url.path, content_length)
        return JSONResponse(status_code=413, content={"message": "Request body too large."})
    return await call_next(request)


# ---------------------------------------------------------------------------
# Error handlers -- every failure becomes {"message": ...}
# ---------------------------------------------------------------------------
@app.exception_handler(UploadError)
async def upload_error_handler(request: Request, exc: UploadError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    if exc.status_code >= 500:
        logger.error("Query failed (%s): %s", exc.kind.value, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"message": f"Invalid request: {problems}" if problems else "Invalid request."},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error."})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(documents.router, tags=["documents"])
app.include_router(query.router, tags=["query"])


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@app.get("/")
async def root():
    return {"message": "Document Q&A API is running."}
