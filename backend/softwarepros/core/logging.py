"""
core/logging.py

Centralized logging configuration for the API.
- Colored console logs via `colorlog`
- RotatingFileHandler for logs/app.log (1MB max, 5 backups)
- Separate logs/error.log for ERROR and above
- Log level controlled via environment variable (LOG_LEVEL)

Should be initialized once early in app startup (e.g., in main.py)
"""

import os
from logging.config import dictConfig
from typing import Any

from softwarepros.core.config import BASE_DIR, settings

LOG_DIR = os.path.join(BASE_DIR, "logs")

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] in %(module)s: %(message)s"


def build_logging_config(log_dir: str = LOG_DIR, level: str | None = None) -> dict[str, Any]:
    """Returns the dictConfig mapping for the given log directory and level."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
            "color": {
                "()": "colorlog.ColoredFormatter",
                "format": f"%(log_color)s{LOG_FORMAT}",
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "color",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": os.path.join(log_dir, "app.log"),
                "maxBytes": 1 * 1024 * 1024,  # 1MB
                "backupCount": 5,
                "formatter": "default",
                "encoding": "utf-8",
            },
            "error_file": {
                "class": "logging.FileHandler",
                "filename": os.path.join(log_dir, "error.log"),
                "level": "ERROR",
                "formatter": "default",
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "uvicorn": {"level": "WARNING"},
            "sqlalchemy": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
        },
        "root": {
            "level": (level or settings.LOG_LEVEL).upper(),
            "handlers": ["console", "file", "error_file"],
        },
    }


def init_logging(log_dir: str = LOG_DIR) -> None:
    """Initializes logging, creating the log directory if needed."""
    os.makedirs(log_dir, exist_ok=True)
    dictConfig(build_logging_config(log_dir))
