"""
Logging Configuration
Sets up centralized logging for the application, writing to both console and file.
"""

import os
import sys
import logging
import logging.config
from pathlib import Path

def setup_logging(log_dir: str = "/var/log/flippi", log_level: str = "INFO"):
    """
    Configure logging for the API server and the Celery worker.

    Args:
        log_dir: Directory to store log files.
        log_level: Logging level (default: INFO)
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    log_file_path = os.path.join(log_dir, "app.log")
    handlers = ["console", "file"]

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
                "level": log_level,
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": log_file_path,
                "maxBytes": 10 * 1024 * 1024,  # 10 MB
                "backupCount": 5,
                "formatter": "default",
                "level": log_level,
                "encoding": "utf8",
            },
        },
        "loggers": {
            "": {  # Root logger
                "handlers": handlers,
                "level": log_level,
                "propagate": True,
            },
            "uvicorn": {"handlers": handlers, "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": handlers, "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": handlers, "level": "INFO", "propagate": False},
            "celery": {"handlers": handlers, "level": "INFO", "propagate": False},
            "app": {
                "handlers": handlers,
                "level": log_level,
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    logger = logging.getLogger("app")
    logger.info(f"Logging initialized. Writing logs to {log_file_path}")
