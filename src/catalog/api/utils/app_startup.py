"""Loguru setup for the catalog service.

Standard-library loggers (uvicorn, SQLAlchemy, aiosqlite) are routed into
Loguru so every record goes through the same sinks and carries a request id.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.catalog.runtime.config.config_data import ConfigData, LoggingConfig
from src.catalog.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Access lines are written by the request middleware instead.
DROPPED_LOGGERS = frozenset({"uvicorn.access"})


class InterceptHandler(logging.Handler):
    """Forward standard ``logging`` records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.name in DROPPED_LOGGERS:
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def library_levels(config: ConfigData) -> dict[str, int]:
    """Levels for third-party loggers; SQL echo follows ``database.echo``."""
    return {
        "sqlalchemy.engine": logging.INFO if config.database.echo else logging.WARNING,
        "sqlalchemy.pool": logging.WARNING,
        "aiosqlite": logging.WARNING,
        "uvicorn": logging.INFO,
        "uvicorn.error": logging.INFO,
        "uvicorn.access": logging.CRITICAL,
    }


def _add_sinks(cfg: LoggingConfig, verbose_errors: bool) -> None:
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=PLAIN_FORMAT,
        colorize=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )

    if not cfg.file:
        return

    as_json = cfg.format == "json"
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if as_json else PLAIN_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )


def _route_stdlib_logging(config: ConfigData) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers = []
        existing.propagate = True

    for name, level in library_levels(config).items():
        logging.getLogger(name).setLevel(level)


def configure_logging(main_config: ConfigData | None = None) -> None:
    """Replace all Loguru sinks according to ``main_config.logging``."""
    main_config = main_config or get_config()
    environment = main_config.app.environment

    logger.remove()
    logger.configure(
        extra={"request_id": "-"},
        patcher=lambda record: record["extra"].setdefault("request_id", "-"),
    )

    # Tracebacks with local variables can leak data in production.
    _add_sinks(main_config.logging, verbose_errors=environment != "production")
    _route_stdlib_logging(main_config)

    logger.info(
        "Logging configured for {} (level {}, file {})",
        environment,
        main_config.logging.level,
        main_config.logging.file or "none",
    )
