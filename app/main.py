import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import create_tables, dispose_engine
from app.core.exceptions import PersistenceError
from app.api.v1.router import api_router
from app.api.web.router import web_router
from app.services.storage_service import storage_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting up Arcane Archives...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # Without a database there is nothing to serve
    try:
        await create_tables()
    except Exception as e:
        logger.critical(f"Database connection error: {e}")
        raise PersistenceError("Could not connect to the database") from e
    logger.info("Database tables created successfully")

    upload_dir = storage_service.ensure_directory()
    logger.info(f"Upload directory: {upload_dir}")

    logger.info(f"Arcane Archives ready on port {settings.API_PORT}")

    yield

    # Shutdown
    await dispose_engine()
    logger.info("Database connection closed, shutting down Arcane Archives...")


# Create FastAPI application
app = FastAPI(
    title="Arcane Archives",
    description="Upload, browse and read esoteric texts",
    version="1.0.0",
    lifespan=lifespan,
    # Optionally hide docs in production
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)


# Production-only security middleware
if settings.is_production:
    logger.info("Production environment detected - enabling security middleware")

    from app.middleware.rate_limit import setup_rate_limiting
    from app.middleware.headers import SecurityHeadersMiddleware

    # Setup rate limiting FIRST (must be before other middleware)
    setup_rate_limiting(app)
    logger.info("Rate limiting enabled")

    app.add_middleware(SecurityHeadersMiddleware)
    logger.info("Security headers middleware enabled")


# Configure CORS (always enabled)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include routes
app.include_router(web_router)
app.include_router(api_router, prefix="/api/v1")

# Uploaded files are also reachable under their public path
app.mount(
    settings.UPLOAD_URL_PREFIX.rstrip("/"),
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads"
)


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "message": "Arcane Archives is running successfully",
        "environment": settings.ENVIRONMENT
    }
