"""
FastAPI application factory for the fridge scanner.

Routes:
- /api/* -> REST API consumed by the mobile/web UI
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from runtime.context import RuntimeContext

from .routes import api


def create_app(ctx: RuntimeContext) -> FastAPI:
    """Create the FastAPI app bound to one runtime context."""
    app = FastAPI(
        title="Fridge Scanner",
        version="0.1.0",
        description="Camera-driven fridge inventory",
    )
    app.state.ctx = ctx

    # The UI runs on phones on the local network
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(api.router, prefix="/api")
    return app
