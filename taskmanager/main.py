"""
Task Manager API - command line entry point.

    taskmanager            # serve with settings from the environment / .env
"""

from __future__ import annotations

import uvicorn

from taskmanager.config import get_settings


def main():
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "taskmanager.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
