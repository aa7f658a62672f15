"""
Structured logging configuration for chef2puppet.

This module provides structured logging with JSON output support and
contextual information about the cookbook and recipe being translated.
"""

import functools
import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Literal, TextIO

from chef2puppet.core.errors import Chef2PuppetError

# Context variables for structured logging
operation_var: ContextVar[str | None] = ContextVar("operation", default=None)
cookbook_var: ContextVar[str | None] = ContextVar("cookbook", default=None)
recipe_var: ContextVar[str | None] = ContextVar("recipe", default=None)

_CONTEXT_FIELDS = ("operation", "cookbook", "recipe")

_RESERVED_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "processName",
        "process",
        "threadName",
        "thread",
        "taskName",
        "message",
        "asctime",
        "relativeCreated",
        *_CONTEXT_FIELDS,
    }
)


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs structured log records.

    Supports both JSON and human-readable text formats.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Literal["%", "{", "$"] = "%",
        json_format: bool = False,
    ):
        """
        Initialise structured formatter.

        Args:
            fmt: Log format string (ignored if json_format=True).
            datefmt: Date format string.
            style: Format style ('%', '{', or '$').
            json_format: Whether to output JSON format.

        """
        super().__init__(fmt, datefmt, style)
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as structured output.

        Args:
            record: Log record to format.

        Returns:
            Formatted log string (JSON or text).

        """
        record.operation = operation_var.get()
        record.cookbook = cookbook_var.get()
        record.recipe = recipe_var.get()

        if self.json_format:
            return self._format_json(record)
        return self._format_text(record)

    def _format_json(self, record: logging.LogRecord) -> str:
        """Format record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field_name in _CONTEXT_FIELDS:
            value = getattr(record, field_name, None)
            if value:
                log_data[field_name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRIBUTES and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def _format_text(self, record: logging.LogRecord) -> str:
        """Format record as human-readable text."""
        base_msg = super().format(record)

        context_parts = [
            f"{field_name}={getattr(record, field_name)}"
            for field_name in _CONTEXT_FIELDS
            if getattr(record, field_name, None)
        ]

        if context_parts:
            return base_msg + " [" + ", ".join(context_parts) + "]"

        return base_msg


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging for chef2puppet.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Whether to output JSON format.
        log_file: Optional file path for log output.
        stream: Console stream, stderr when omitted.

    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = StructuredFormatter(json_format=True)
    else:
        formatter = StructuredFormatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("chef2puppet").setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Configured logger instance.

    """
    return logging.getLogger(name)


def set_context(
    operation: str | None = None,
    cookbook: str | None = None,
    recipe: str | None = None,
) -> None:
    """
    Set context variables for structured logging.

    Args:
        operation: Current operation name.
        cookbook: Cookbook being translated.
        recipe: Recipe file being translated.

    """
    if operation is not None:
        operation_var.set(operation)
    if cookbook is not None:
        cookbook_var.set(cookbook)
    if recipe is not None:
        recipe_var.set(recipe)


def clear_context() -> None:
    """Clear all context variables."""
    operation_var.set(None)
    cookbook_var.set(None)
    recipe_var.set(None)


class LogContext:
    """
    Context manager for temporary logging context.

    Example:
        with LogContext(operation="convert_cookbook", cookbook="apache"):
            logger.info("Translating recipes")

    """

    def __init__(
        self,
        operation: str | None = None,
        cookbook: str | None = None,
        recipe: str | None = None,
    ):
        """
        Initialise log context.

        Args:
            operation: Current operation name.
            cookbook: Cookbook being translated.
            recipe: Recipe file being translated.

        """
        self.operation = operation
        self.cookbook = cookbook
        self.recipe = recipe
        self.previous_context: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        """Enter context and save previous values."""
        self.previous_context = {
            "operation": operation_var.get(),
            "cookbook": cookbook_var.get(),
            "recipe": recipe_var.get(),
        }
        set_context(
            operation=self.operation,
            cookbook=self.cookbook,
            recipe=self.recipe,
        )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context and restore previous values."""
        operation_var.set(self.previous_context["operation"])
        cookbook_var.set(self.previous_context["cookbook"])
        recipe_var.set(self.previous_context["recipe"])


def log_operation(operation_name: str):
    """
    Decorate functions to log operations with structured context.

    Args:
        operation_name: Name of the operation being logged.

    Example:
        @log_operation("convert_cookbook")
        def convert_cookbook(cookbook_path: str) -> Path:
            return module_path

    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)

            with LogContext(operation=operation_name):
                logger.info(
                    f"Starting {operation_name}",
                    extra={"function": func.__name__},
                )
                try:
                    result = func(*args, **kwargs)
                except Chef2PuppetError as e:
                    # Reported to the user by the caller
                    logger.debug(
                        f"Failed {operation_name}: {e}",
                        extra={"function": func.__name__},
                    )
                    raise
                except Exception as e:
                    logger.error(
                        f"Failed {operation_name}: {e}",
                        extra={"function": func.__name__},
                        exc_info=True,
                    )
                    raise
                logger.info(
                    f"Completed {operation_name}",
                    extra={"function": func.__name__},
                )
                return result

        return wrapper

    return decorator
