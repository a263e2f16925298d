"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from spirulina_tracker.config import settings
from spirulina_tracker.api.limiter import limiter
from spirulina_tracker.middleware.error_handler import ErrorHandlerMiddleware
from spirulina_tracker.api.v1.routers import advisor, dosage, harvests, ponds

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    
    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Data directory: {settings.data_dir}")
    logger.info(f"Advisor: model={settings.gemini_model}, "
                f"configured={bool(settings.gemini_api_key)}, "
                f"timeout={settings.advisor_timeout_seconds}s")
    logger.info(f"Advisor rate limit: {settings.rate_limit_requests} requests/minute")
    
    yield
    
    # Shutdown
    from spirulina_tracker.infrastructure.advisor_client import get_advisor_client
    logger.info("Shutting down application...")
    client = get_advisor_client()
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Record keeping and advice for small-scale Spirulina cultures.
    
    ## Features
    
    - **Ponds**: Register culture vessels and track their status
    - **Parameter Logs**: pH, temperature, optical density, salinity and
      added medium per pond, with chart-ready series and latest reading
    - **Harvest Ledger**: Wet/dry weights across all ponds with paging
    - **Dosage Calculator**: Nutrients for new medium (per liter) or for
      replenishment after a harvest (per gram of wet paste)
    - **Advisor**: Free-text questions answered by a generative-text service
      using a summary of your ponds and recent logs
    
    Deleting a pond keeps its logs and harvests.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(ponds.router, prefix="/api/v1")
app.include_router(harvests.router, prefix="/api/v1")
app.include_router(dosage.router, prefix="/api/v1")
app.include_router(advisor.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.
    
    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.
    
    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
