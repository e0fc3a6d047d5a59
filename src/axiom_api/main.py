"""aXiom API - Feedback triage backend."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from axiom_api.api.v1 import router as api_v1_router
from axiom_api.config import get_settings
from axiom_api.core.exceptions import AxiomException, ValidationError
from axiom_api.core.logging import LogEvent, generate_request_id, request_logger
from axiom_api.db.indexes import setup_feedback_indexes
from axiom_api.db.session import close_db, init_db
from axiom_api.schemas.base import ApiResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    logger.info("Starting aXiom API...")
    db = await init_db()
    index_result = await setup_feedback_indexes(db)
    if index_result.success:
        logger.info(f"Feedback indexes ready (created: {index_result.created_indexes})")
    else:
        logger.warning(f"Feedback index setup incomplete: {index_result.errors}")

    yield
    # Shutdown
    logger.info("Shutting down aXiom API...")
    await close_db()
    logger.info("Database connections closed")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
aXiom API - Feedback triage backend

Staff-facing API for feedback about aXiom's engineered cats:
- Feedback submission with AI classification (summary, sentiment, tags, priority, next action)
- Filtered, paginated feedback listing with full-text search
- Next action editing and single/bulk deletion
    """,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id"],
)


@app.middleware("http")
async def request_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Assign a request id, echo it in ``X-Request-Id`` and log the request."""
    start_time = time.time()
    request_id = generate_request_id()
    request.state.request_id = request_id

    request_logger.log(
        LogEvent.REQUEST_START,
        request_id=request_id,
        data={
            "method": request.method,
            "path": request.url.path,
            "user_agent": request.headers.get("user-agent"),
        },
    )

    # Unhandled errors escape call_next and become a 500 outside this middleware.
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers["X-Request-Id"] = request_id
        return response
    finally:
        request_logger.log_request(
            method=request.method,
            path=request.url.path,
            status=status_code,
            latency_ms=int((time.time() - start_time) * 1000),
            request_id=request_id,
            error=getattr(request.state, "error_message", None),
        )


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    fields: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the uniform error envelope."""
    request_id = getattr(request.state, "request_id", None)
    request.state.error_message = message
    body = ApiResponse.fail(code, message, fields=fields, request_id=request_id)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers={"X-Request-Id": request_id} if request_id else None,
    )


# Exception handlers
@app.exception_handler(AxiomException)
async def axiom_exception_handler(request: Request, exc: AxiomException) -> JSONResponse:
    """Handle custom aXiom exceptions."""
    fields = exc.fields if isinstance(exc, ValidationError) else None
    return error_response(request, exc.status_code, exc.code, exc.message, fields)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed query parameters or bodies as validation errors."""
    fields = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("query", "body", "path")]
        fields[".".join(location) or "request"] = error.get("msg", "Invalid value")
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Invalid request parameters",
        fields,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    return error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error occurred [{getattr(request.state, 'request_id', None)}]")
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred",
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
    }


# Root endpoint
@app.get("/", tags=["Root"])
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "aXiom Feedback Triage API",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "health": "/health",
    }


# Include API routers
# Mount at /api for frontend compatibility
app.include_router(api_v1_router, prefix="/api")

# Also mount without prefix for direct access
app.include_router(api_v1_router, prefix="")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "axiom_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
