"""
FastAPI application, REST adapter for the Inventory AI Assistant.

Usage:
    python run_api.py

Or directly:
    uvicorn adapters.rest.app:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Ensure src/ is on sys.path when invoked via uvicorn directly
_src_dir = Path(__file__).resolve().parent.parent.parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from infrastructure.config import Settings
from factory import ServiceFactory
from adapters.rest.dependencies import set_factory
from adapters.rest.routers import chat, diagnostics

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize ServiceFactory on startup."""
    project_root = _src_dir.parent
    config = Settings.from_env(project_root=project_root)
    factory = ServiceFactory(config)
    await factory.initialize()
    set_factory(factory)
    yield
    # No teardown needed, aiosqlite connections are per-operation


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the application. Tests pass use_lifespan=False and call set_factory()."""
    application = FastAPI(
        title="Inventory AI Assistant",
        version=API_VERSION,
        description="Conversational inventory management powered by LLM tool calling.",
        lifespan=lifespan if use_lifespan else None,
    )

    # CORS, permissive for development; tighten allowed_origins in production
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(chat.router)
    application.include_router(diagnostics.router)

    @application.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": API_VERSION}

    return application


app = create_app()
