import logging

from dotenv import load_dotenv
load_dotenv()  # Load .env file before importing settings

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from core.config import settings
from core.rate_limiter import limiter, rate_limit_exceeded_handler, RateLimits
from src.trace_bc.query.workspace import TraceWorkspace

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="RAPTOR Trace Viewer API",
        description="Round-by-round reachability of a RAPTOR routing trace, ready for map rendering",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.DEBUG,
    )

    # One workspace per application; every load replaces its content
    app.state.workspace = TraceWorkspace.from_settings(settings)

    # CORS middleware - the map renderer runs on its own origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if not settings.is_production else [settings.FRONTEND_URL],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Register routers
    from adapters.http.api.raptor.routers import import_router, query_router
    app.include_router(import_router, prefix="/api/v1")
    app.include_router(query_router, prefix="/api/v1")

    @app.get("/health")
    @limiter.limit(RateLimits.HEALTH)
    async def health_check(request: Request):
        """Health check endpoint.

        Always 200; `ready` tells whether both the stops table and the
        trace are loaded.
        """
        summary = request.app.state.workspace.summary()
        return {
            "status": "healthy",
            "ready": summary["ready"],
            "stats": summary,
        }

    logger.info(f"RAPTOR trace viewer created ({settings.ENVIRONMENT})")
    return app


app = create_app()
