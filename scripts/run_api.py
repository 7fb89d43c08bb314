#!/usr/bin/env python3
"""Run the FastAPI server for the educational story generator."""

import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from cuentos.api.config import LOG_FORMAT, LOG_LEVEL
from cuentos.api.logging import configure_logging


def main():
    """Run the API server."""
    configure_logging(
        json_format=LOG_FORMAT == "json",
        level=getattr(logging, LOG_LEVEL, logging.INFO),
    )
    uvicorn.run(
        "cuentos.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "").lower() in ("true", "1", "yes"),
        log_config=None,  # Keep our structured handler
    )


if __name__ == "__main__":
    main()
