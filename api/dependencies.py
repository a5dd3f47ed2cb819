"""
Shared dependencies and application state for the FastAPI server.
The job scheduler and queue are initialized once at startup and reused
across requests.
"""
from __future__ import annotations

import logging
from typing import Optional

from core.container import Components, get_components
from jobs.queue import BaseJobQueue
from jobs.scheduler import JobScheduler

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Global singletons - populated during lifespan startup
# ---------------------------------------------------------------------------

_components: Optional[Components] = None


def get_scheduler() -> JobScheduler:
    """FastAPI dependency: returns the initialized JobScheduler."""
    if _components is None:
        raise RuntimeError("JobScheduler not initialized. Server may still be starting.")
    return _components.scheduler


def get_queue() -> BaseJobQueue:
    """FastAPI dependency: returns the initialized job queue."""
    if _components is None:
        raise RuntimeError("Job queue not initialized. Server may still be starting.")
    return _components.queue


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

def initialize_components(components: Optional[Components] = None) -> None:
    """Store the components used by the routes.
    Called once during FastAPI lifespan startup.
    """
    global _components
    _components = components or get_components()
    logger.info(f"API bound to queue '{_components.queue.name}'")


def reset_components() -> None:
    global _components
    _components = None
