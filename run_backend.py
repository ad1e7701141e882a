#!/usr/bin/env python
"""Script to run the Task Ledger API server."""
import os

import uvicorn

from task_ledger.config import LOG_FILE, LOG_LEVEL
from task_ledger.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging(level=LOG_LEVEL, log_file=LOG_FILE)
    uvicorn.run(
        "task_ledger.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "").lower() in ("1", "true", "yes"),
        log_config=None,
    )
