#!/usr/bin/env python3
"""
Development server launcher for the Pallavi career guidance API.

For production, run the app under a proper ASGI server deployment.
"""

import logging
import os
import uvicorn
from pathlib import Path

from pallavi.api.main import configure_logging

project_root = Path(__file__).parent
package_path = project_root / "pallavi"

logger = logging.getLogger("pallavi.server")

if __name__ == "__main__":
    configure_logging()
    host = os.getenv("PALLAVI_HOST", "0.0.0.0")
    port = int(os.getenv("PALLAVI_PORT", "8000"))

    logger.info("Starting Pallavi API development server")
    logger.info(f"Server will be available at: http://localhost:{port}")
    logger.info(f"API documentation at: http://localhost:{port}/docs")

    uvicorn.run(
        "pallavi.api.main:app",
        host=host,
        port=port,
        reload=True,     # Auto-reload on code changes (development only)
        reload_dirs=[str(package_path)],
        log_level=os.getenv("PALLAVI_LOG_LEVEL", "info").lower()
    )
