"""
Placement Prep Portal - Main Application

FastAPI backend with:
- MongoDB for schema-flexible company records
- Moderated student submissions merged into companies
- Per-user notifications on new companies
- JWT identity from an external provider

Run: uvicorn prep_portal.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from prep_portal.api.routes import api_router
from prep_portal.core.config import get_settings
from prep_portal.core.errors import PortalError, ValidationError
from prep_portal.core.logging import setup_logging
from prep_portal.schemas.schemas import ErrorResponse
from prep_portal.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)
    yield


# Create FastAPI app
app = FastAPI(
    title="Placement Prep Portal",
    description="""
    Company hiring records with moderated student contributions.

    ## Features
    - **Companies**: Approved company records, helpful votes, difficulty ratings
    - **Submissions**: Students propose questions, processes and topics
    - **Admin**: Moderation queue; approvals merge content into companies
    - **Notifications**: Users are told about newly approved companies
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR HANDLERS
# ============================================================

def _error(message: str, details: dict = None) -> dict:
    return ErrorResponse(error=message, details=details).model_dump(exclude_none=True)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=_error(exc.message, exc.errors))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = {}
    for err in exc.errors():
        # drop the leading "body"/"query" segment
        loc = [str(part) for part in err["loc"][1:]] or [str(part) for part in err["loc"]]
        details.setdefault(".".join(loc), err["msg"])
    return JSONResponse(status_code=400, content=_error("Validation failed", details))


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=500, content=_error("Server error"))
    return JSONResponse(status_code=exc.status_code, content=_error(exc.message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error("Server error"))


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
