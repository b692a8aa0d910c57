"""
SOH Estimator FastAPI Application
Main entry point for the battery State of Health estimator
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from .config import get_settings
from .analysis import CHEMISTRY_PROFILES
from .api import estimates, health

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(
        f"Loaded {len(CHEMISTRY_PROFILES)} chemistry profiles: "
        f"{', '.join(k.value for k in CHEMISTRY_PROFILES)}"
    )

    yield

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Battery State of Health estimation from usage history",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(estimates.router, prefix=settings.api_prefix, tags=["Estimates"])

    # Static files
    static_path = Path(__file__).parent.parent / "static"
    if static_path.exists():
        app.mount("/static", StaticFiles(directory=str(static_path)), name="static")

        @app.get("/", include_in_schema=False)
        async def root():
            return FileResponse(str(static_path / "index.html"))
    else:
        @app.get("/")
        async def root():
            return {
                "name": settings.app_name,
                "version": "0.1.0",
                "description": "🔋 Battery State of Health Estimator",
                "docs": "/docs",
                "health": "/live",
                "endpoints": {
                    "chemistries": f"{settings.api_prefix}/chemistries",
                    "estimates": f"{settings.api_prefix}/estimates",
                    "report": f"{settings.api_prefix}/estimates/report",
                    "projection": f"{settings.api_prefix}/estimates/projection"
                }
            }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
