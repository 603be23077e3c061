import logging.config


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s - %(message)s"
                },
                "audit": {
                    "format": "%(asctime)s %(levelname)s audit - %(message)s"
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
                "audit_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "audit",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                "gmpanel.audit": {
                    "level": level,
                    "handlers": ["audit_console"],
                    "propagate": False,
                },
                "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
                "uvicorn.error": {
                    "level": level,
                    "handlers": ["console"],
                    "propagate": False,
                },
                "uvicorn.access": {
                    "level": level,
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }
    )
