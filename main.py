import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Request

from routes.image_route import router as image_router
from routes.session_route import router as session_router
from services.gemini.config import GeminiSettings
from services.session_store import SessionStore
from services.transport.backoff_client import BackoffHttpClient

load_dotenv()  # Load environment variables from .env file if present


def _build_lifespan(session_store: Optional[SessionStore]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - logging, from LOG_LEVEL
          - one shared httpx client wrapped in the retrying BackoffHttpClient
          - the in-memory session store
        and attach them to `app.state`.
        """
        logging.basicConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if session_store is not None:
            app.state.session_store = session_store
            yield
            return

        settings = GeminiSettings.from_env()
        if not settings.api_key:
            logging.warning("GEMINI_API_KEY is not set; generation requests will be unauthenticated")

        http = httpx.AsyncClient(timeout=settings.timeout_seconds)
        app.state.http_client = BackoffHttpClient(http, headers=settings.headers(), timeout=settings.timeout_seconds)
        app.state.session_store = SessionStore(app.state.http_client, settings=settings)

        try:
            yield
        finally:
            await http.aclose()

    return lifespan


def create_app(session_store: Optional[SessionStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        session_store: Optional preconfigured store (used by tests); when
            omitted one is built from the environment at startup.
    """
    app = FastAPI(title="Image Generation Service", lifespan=_build_lifespan(session_store))

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies the session store is available.
        """
        store = getattr(request.app.state, "session_store", None)
        return {"ok": True, "sessions": len(store) if store is not None else 0}

    # Register application routers
    app.include_router(session_router)
    app.include_router(image_router)

    return app


app = create_app()
