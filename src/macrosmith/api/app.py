"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..session import Session
from .routes import router

logger = logging.getLogger(__name__)

# Global session instance; the service is single-user
_session: Optional[Session] = None


def get_session() -> Session:
    """Get the global session instance."""
    global _session
    if _session is None:
        _session = Session()
        logger.info("Created new editing session")
    return _session


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="MacroSmith",
        description="Excel VBA macro generator for column-to-template mappings",
        version="0.1.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(router, prefix="/api")

    return app
