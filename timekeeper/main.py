"""
Main Entry Module

Runs the Timekeeper API with uvicorn.

Usage:
    python -m timekeeper.main

Author: Timekeeper Development Team
"""

import uvicorn

from timekeeper.shared import config


def main():
    uvicorn.run(
        "timekeeper.app:app",
        host="0.0.0.0",
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
