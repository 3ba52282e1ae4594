#!/usr/bin/env python3
"""
Main entry point for IntentRelay
"""

import uvicorn

from intentrelay.core.config import settings
from intentrelay.core.logging import LoggingConfig, setup_logging

if __name__ == "__main__":
    # Setup logging before starting uvicorn
    setup_logging(LoggingConfig.from_settings(settings.logging))

    uvicorn.run(
        "intentrelay.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if not settings.DEBUG else "debug",
        log_config=None,  # Keep our handlers instead of uvicorn's defaults
    )
