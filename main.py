"""
Main entrypoint: serve the EigenTrust Lab API with uvicorn.

Host and port come from EIGENTRUST_API_HOST / EIGENTRUST_API_PORT (or .env).

Equivalent: uvicorn eigentrust_lab.api_server.app:app --host 127.0.0.1 --port 8000
"""

import sys

# Configure structured logging before other imports that may log
from eigentrust_lab.lab_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings and run the API server in the foreground."""
    import uvicorn

    from eigentrust_lab.config import get_settings
    from eigentrust_lab.core.exceptions import ValidationError

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error("main_config_error", error=str(e))
        sys.exit(1)

    logger.info(
        "main_api_starting",
        host=settings.api_host,
        port=settings.api_port,
        alpha=settings.alpha,
        fallback=settings.fallback,
        initial_state=settings.initial_state,
    )
    uvicorn.run(
        "eigentrust_lab.api_server.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
