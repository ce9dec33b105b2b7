from __future__ import annotations

import inspect
import logging.config
import sys
import typing
from typing import Any, override

from loguru import logger

from esquery.config.general import CONFIG, GeneralConfig

if typing.TYPE_CHECKING:
    from loguru import Record


class InterceptHandler(logging.Handler):
    """Logger which forwards to loguru."""

    @override
    def emit(self, record: logging.LogRecord) -> None:
        """Intercept stdlib logging and send it to loguru handling."""
        # Get corresponding Loguru level if it exists.
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message.
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(config: GeneralConfig = CONFIG) -> dict[str, Any]:
    """Route standardlib logging to loguru and configure loguru."""
    std_log_config = {
        "version": 1,
        "handlers": {
            "loguru": {
                "()": InterceptHandler,
            }
        },
        "loggers": {
            "esquery": {
                "level": "DEBUG",
                "handlers": ["loguru"],
            },
        },
        "incremental": False,
        "disable_existing_loggers": True,
    }
    logging.config.dictConfig(std_log_config)

    def format_stderr(record: Record) -> str:
        header = "<cyan>{time:YYYY-MM-DDTHH:mm:ss.SSSZ}</cyan> <level>{level:8}</level> "
        log = "{message:80} <cyan>{name}:{function}():{line}</cyan>\n{exception}"
        if "index" in record["extra"]:
            header += "<green>{extra[index]}</green> "

        return header + log

    # stdout carries rendered documents, so logs go to stderr
    logger.remove()
    logger.add(
        sys.stderr,
        format=format_stderr,
        colorize=True,
        backtrace=True,
        diagnose=False,
        level=config.log_level,
    )
    if config.log_file is not None:
        logger.add(
            config.log_file,
            format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level:8} | {message:80} | {extra} | {name}:{function}:{line}",
            colorize=False,
            backtrace=True,
            diagnose=True,
            rotation="monthly",
            retention=3,
            compression="tar.gz",
            level=config.log_level,
        )

    return std_log_config
