"""
Error handling utilities for apns-message.

Provides a decorator and a helper for consistent error logging and reporting.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from apns_message.exceptions import ApnsMessageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_errors(operation_name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator to log errors with context.

    Logs exceptions with structured context including operation name,
    function name, and error details. The exception is re-raised after
    logging.

    Args:
        operation_name: Name of the operation for logging context

    Returns:
        Decorated function that logs errors before re-raising

    Example:
        @log_errors("build_message")
        def build_message(request: MessageRequest) -> Message:
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                extra: dict[str, object] = {
                    "operation": operation_name,
                    "error_type": type(e).__name__,
                    "function": func.__name__,
                }
                if isinstance(e, ApnsMessageError):
                    extra.update({f"context_{k}": v for k, v in e.context.items()})
                logger.exception(f"Error in {operation_name}", extra=extra)
                raise

        return wrapper

    return decorator


def format_exception_for_response(e: Exception) -> dict[str, object]:
    """
    Format exception for an error report.

    Extracts error message and context from custom exceptions or formats
    generic exceptions.

    Args:
        e: Exception to format

    Returns:
        Dictionary with error details

    Example:
        try:
            payload = message.get_payload()
        except PayloadTooLargeError as e:
            report(format_exception_for_response(e))
    """
    error_dict: dict[str, object] = {
        "error": type(e).__name__,
        "message": str(e),
    }

    if isinstance(e, ApnsMessageError) and e.context:
        error_dict["context"] = e.context

    return error_dict
