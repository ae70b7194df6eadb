"""
InternHub API - Main Application

FastAPI backend with:
- MongoDB for companies and their embedded internships
- Geocoding for radius search
- JWT authentication

Run: uvicorn internhub.main:app --reload
 or: internhub  (see internhub.server)
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from internhub import __version__
from internhub.api.responses import failure
from internhub.api.routes import api_router
from internhub.core.config import get_settings
from internhub.core.errors import ErrorResponse, InvalidQuery, UpstreamFailure
from internhub.db.mongodb import close_mongo_client, init_mongo_indexes, test_mongo_connection

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="InternHub API",
    description="""
    Companies and the internships they post.

    ## Features
    - **Internships**: list with filters, select, sort and pagination
    - **Radius search**: internships within a distance of an address
    - **Companies**: company profiles owning their internships
    - **Authentication**: JWT-based auth, publishers manage postings

    Every response is an envelope: `{success, count?, data}` or `{success: false, error}`.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


# ============================================================
# REQUEST LOGGING (development only)
# ============================================================

if settings.is_development:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s %d %.1f ms", request.method, request.url.path,
                    response.status_code, elapsed_ms)
        return response


# ============================================================
# ERROR HANDLERS
# Every failure leaves through the same envelope.
# ============================================================

def error_json(error: ErrorResponse) -> JSONResponse:
    status_code, body = failure(error)
    return JSONResponse(body, status_code=status_code)


@app.exception_handler(ErrorResponse)
async def error_response_handler(request: Request, exc: ErrorResponse):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_json(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return error_json(InvalidQuery("; ".join(messages) or "Invalid request"))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_json(ErrorResponse(str(exc.detail), exc.status_code))


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    return error_json(ErrorResponse("Duplicate field value entered", 400))


@app.exception_handler(PyMongoError)
async def mongo_error_handler(request: Request, exc: PyMongoError):
    logger.error("MongoDB error on %s %s: %s", request.method, request.url.path, exc)
    return error_json(UpstreamFailure("Database error"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_json(ErrorResponse("Server Error", 500))


# ============================================================
# LIFECYCLE
# ============================================================

@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.on_event("shutdown")
async def shutdown_event():
    close_mongo_client()


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "InternHub API", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
