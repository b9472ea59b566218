"""
Visa Document Analysis Platform - Main Application

FastAPI backend with:
- PostgreSQL (SQLAlchemy) for all persisted data
- OpenAI or Anthropic for structured document extraction
- PyPDF2 / Tesseract for PDF and image text extraction
- JWT authentication with per-user analysis quotas

Run: uvicorn visadocs.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from visadocs.api.routes import api_router
from visadocs.core.config import get_settings
from visadocs.core.errors import AppError
from visadocs.db.postgres import init_db, test_postgres_connection

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Visa Document Analysis Platform",
    description="""
    Study-abroad document processing with LLM-assisted extraction.

    ## Features
    - **Authentication**: JWT-based auth for students and admins
    - **Visa analyses**: Upload a visa decision letter, get a structured summary
    - **Offer letters / CoE**: Field-by-field extraction of admission documents
    - **Feedback**: Rate any analysis once
    - **Consultations**: Appointments, document templates and announcements
    - **Scholarships**: Catalog search and a personal watchlist
    - **Admin**: User management, quotas, statistics and exports
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR HANDLERS - every error body is {"error": "..."}
# ============================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Validation failed", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables that do not exist yet."""
    try:
        init_db()
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error("Database initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Visa Document Analysis Platform"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    database_ok = test_postgres_connection()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "disconnected",
        "llm_provider": settings.llm_provider,
    }
