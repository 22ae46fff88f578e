#!/usr/bin/env python
"""Script to run the Taskboard API server."""
import uvicorn

from taskboard.config import get_settings
from taskboard.logging_setup import setup_logging

if __name__ == "__main__":
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    uvicorn.run(
        "taskboard.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_config=None,
    )
