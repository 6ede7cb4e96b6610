"""keytree backend server.

Mounts the keytree router under a FastAPI application. The router is
imported lazily so that a broken import leaves the server up; the
health endpoint then reports the load error instead of the process
failing to start.

Usage::

    # Development (auto-reload)
    uvicorn keytree_server:app --reload --port 8430

    # Production
    uvicorn keytree_server:app --host 0.0.0.0 --port 8430

    # Or run directly
    python keytree_server.py
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger("keytree")

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="keytree API",
    description=(
        "Order-preserving hierarchical keys: generate sortable key segments "
        "and rebuild trees from flat keyed items."
    ),
    version="0.1.0",
)

# ---------------------------------------------------------------------------
# CORS -- allow local dev server origins
# ---------------------------------------------------------------------------

_ALLOWED_ORIGINS = [
    "http://localhost:5173",   # Vite dev server
    "http://localhost:8430",   # Self (for Swagger UI)
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8430",
    "app://obsidian.md",       # Note-taking host app
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_router_status: dict[str, Any] = {"loaded": False, "error": None}


def _mount_keytree() -> None:
    """Mount the keytree router at ``/api/``."""
    try:
        from keytree.server import router as keytree_router

        app.include_router(keytree_router, prefix="/api", tags=["keytree"])
        _router_status["loaded"] = True
        logger.info("keytree router mounted at /api/")
    except Exception as exc:
        _router_status["error"] = str(exc)
        logger.warning("keytree router failed to load: %s", exc)


@app.get("/health")
def unified_health() -> dict[str, Any]:
    """Report whether the router loaded."""
    return {
        "status": "ok" if _router_status["loaded"] else "error",
        "version": "0.1.0",
        "router": dict(_router_status),
    }


_mount_keytree()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run_server(host: str = "127.0.0.1", port: int = 8430) -> None:
    """Start the keytree server via uvicorn.

    Args:
        host: Bind address. Defaults to localhost.
        port: Port number. Defaults to 8430.
    """
    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    run_server()
