"""FastAPI application for the Credibility Checker service."""

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..infrastructure.dependencies import get_service_container
from .endpoints import analysis, health

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service container on startup and release it on shutdown."""
    container = get_service_container()
    try:
        await container.get_analysis_orchestrator()
        logger.info("🚀 Credibility Checker API ready")
    except Exception as e:
        logger.error(f"❌ Failed to initialize services: {e}")

    yield  # Application runs here

    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Credibility Checker API",
    description="Claim extraction, evidence gathering and credibility scoring",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_service_container().config.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(analysis.router)
