import logging
import logging.config
from pathlib import Path
from typing import Optional

import structlog

_FIRST_PARTY_PACKAGES = frozenset(["sui_harness"])


def _shared_processors():
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S.%f"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(level: str = "INFO", debug_log_file_path: Optional[str] = None) -> None:
    """Route structlog through stdlib logging.

    The console gets a human readable rendering at `level`. If
    `debug_log_file_path` is given, first party loggers additionally write
    JSON lines at DEBUG level to that file.
    """
    level = level.upper()
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "console",
        }
    }
    if debug_log_file_path:
        Path(debug_log_file_path).parent.mkdir(exist_ok=True, parents=True)
        handlers["debug-file"] = {
            "class": "logging.FileHandler",
            "filename": debug_log_file_path,
            "level": "DEBUG",
            "formatter": "json",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.dev.ConsoleRenderer(colors=False),
                    ],
                    "foreign_pre_chain": _shared_processors(),
                },
                "json": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.JSONRenderer(),
                    ],
                    "foreign_pre_chain": _shared_processors(),
                },
            },
            "handlers": handlers,
            "loggers": {
                "": {"handlers": list(handlers), "level": "INFO"},
                **{
                    package: {"handlers": list(handlers), "level": "DEBUG", "propagate": False}
                    for package in _FIRST_PARTY_PACKAGES
                },
            },
        }
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
