"""
core/logging_config.py
Console logging setup for the API process and the background worker.
"""

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single console handler."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Clear existing handlers so reloads do not duplicate output
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(console)
