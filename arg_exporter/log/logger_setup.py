import sys

import loguru
from loguru import logger

from arg_exporter.config import LogLevelType
from arg_exporter.log.sensitive import sensitive_log_filter


def setup_logger(level: LogLevelType, *secrets: str | None) -> None:
    logger.remove()
    sensitive_log_filter.hide_sensitive_strings(*secrets)
    _stderr_loguru_handler(level)


def _stderr_loguru_handler(level: LogLevelType) -> None:
    logger_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<level>{message}</level>"
    )
    if level == "DEBUG":
        logger_format += " | {extra}"

    logger.add(
        sys.stderr,
        level=level.upper(),
        format=logger_format,
        diagnose=False,  # hide variable values in log backtrace
        filter=sensitive_log_filter.create_filter(),
    )
    logger.configure(patcher=exception_deserializer)


def exception_deserializer(record: "loguru.Record") -> None:
    """
    Workaround for when trying to log exception objects with loguru.
    Loguru doesn't able to deserialize `Exception` subclasses.
    https://github.com/Delgan/loguru/issues/504#issuecomment-917365972
    """
    exception: loguru.RecordException | None = record["exception"]
    if exception is not None:
        fixed = Exception(str(exception.value))
        record["exception"] = exception._replace(value=fixed)
