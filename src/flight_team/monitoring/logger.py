import json
import logging
import sys
import traceback

import loguru
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<bold><white>{message}</white></bold> | <dim>{extra}</dim> {stacktrace}"
)


# Loggers configuration runs when the package is imported -- src/flight_team/__init__.py
def configure_logger(level: str = "INFO") -> int:
    """
    Configure loguru with a single console sink.

    Args:
        level: Minimum level written to stdout

    Returns:
        The loguru handler id of the console sink
    """
    # Suppress verbose transport logging; requests are logged by GraphClient itself
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.remove()  # remove the default logger

    return logger.add(
        sink=sys.stdout,
        level=level.upper(),
        diagnose=False,
        format=CONSOLE_FORMAT,
        filter=process_log_record,
    )


def process_log_record(record: "loguru.Record") -> "loguru.Record":
    r"""
    Inject transformed metadata into each log record before they are passed to the formatter.

    1. Serialize the "extra" field to JSON so it renders on one line in hosted log viewers.
    2. For error logs, add a traceback with \r instead of \n so that the log collector does not
       split the traceback into multiple log events.
    """
    extra = record["extra"]

    # serialize "extra" field to JSON
    if extra and not isinstance(extra, str):
        record["extra"] = json.dumps(extra, default=str)

    # add stacktrace to log record
    record["stacktrace"] = ""
    if record["exception"]:
        err = record["exception"]
        stacktrace = get_formatted_stacktrace(err, replace_newline_character_with_carriage_return=True)
        record["stacktrace"] = stacktrace

    return record


def get_formatted_stacktrace(loguru_record_exception, replace_newline_character_with_carriage_return: bool) -> str:
    """Get the formatted stacktrace for the current exception."""
    exc_type, exc_value, exc_traceback = loguru_record_exception
    stacktrace_: list[str] = traceback.format_exception(exc_type, exc_value, exc_traceback)
    stacktrace: str = "".join(stacktrace_)
    if replace_newline_character_with_carriage_return:
        stacktrace = stacktrace.replace("\n", "\r")
    return stacktrace
