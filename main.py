"""
Main entry point for the Event Planning Service.
"""

import os

import uvicorn

from eventplanning.core.logging_config import setup_logging

logger = setup_logging(os.getenv("LOG_LEVEL", "INFO"), "eventplanning")


if __name__ == "__main__":
    # Get configuration from environment
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").lower() == "true"
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logger.info(f"Starting Event Planning Service on {host}:{port}")

    uvicorn.run(
        "eventplanning.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        access_log=True
    )
