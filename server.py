"""
REST API server entry point.

Run with:
    python server.py

Or directly with uvicorn:
    uvicorn server:app --host 0.0.0.0 --port 9000 --reload
"""
from __future__ import annotations

import uvicorn

from api.app import create_app
from config.logging import setup_logging
from config.settings import settings

setup_logging(settings.LOG_LEVEL)

# Module-level `app` so uvicorn can reference it as "server:app"
app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "server:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,   # set True during development
        log_level=settings.LOG_LEVEL.lower(),
    )
