"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.api.errors import register_exception_handlers
from app.core.config import Settings, settings
from app.core.logging import setup_logging


def _cors_origins(cfg: Settings) -> list[str]:
    # Cookies are credentials, so a wildcard origin is only honoured in dev.
    origins = cfg.get_allowed_origins()
    if cfg.APP_ENV == "dev" and origins == ["*"]:
        return ["*"]
    return [o for o in origins if o != "*"]


def create_app(cfg: Settings = settings) -> FastAPI:
    """Build the API app; tests call this to get an isolated instance."""
    app = FastAPI(
        title="Issue Logger API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(cfg),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=cfg.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Issue Logger API"}

    return app


setup_logging(settings.LOG_LEVEL)
app = create_app()
