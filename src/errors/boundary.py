"""The single seam through which callers invoke the tracker core.

``with_error_handling`` runs an operation and converts any exception into a
classified ``StructuredError`` so no failure crosses the boundary unhandled.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

from src.tracker.exceptions import (
    CalculationError,
    DataCorruptionError,
    ValidationFailedError,
)

from .recovery import log_error
from .taxonomy import (
    StructuredError,
    handle_calculation_error,
    handle_data_corruption_error,
    handle_file_system_error,
    handle_network_error,
    handle_unknown_error,
    handle_validation_error,
)

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Tagged result: ``data`` is set on success, ``error`` on failure."""

    success: bool
    data: T | None = None
    error: StructuredError | None = None

    @classmethod
    def ok(cls, data: T) -> OperationResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: StructuredError) -> OperationResult[T]:
        return cls(success=False, error=error)


def _http_status(exc: BaseException) -> int | None:
    for attr in ("status", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int):
        return value
    return None


def classify_exception(exc: Exception, context: str) -> StructuredError:
    """Convert an exception into the matching StructuredError."""
    if isinstance(exc, ValidationFailedError):
        return handle_validation_error(exc.validation, context)

    if isinstance(exc, DataCorruptionError):
        details = {"kind": exc.kind, **exc.details}
        return handle_data_corruption_error(details, context, reason=exc.message)

    if isinstance(exc, (CalculationError, ArithmeticError)):
        return handle_calculation_error(exc, context)

    if isinstance(exc, OSError) and exc.errno is not None:
        return handle_file_system_error(
            context,
            code=errno.errorcode.get(exc.errno),
            message=exc.strerror or str(exc),
            path=str(exc.filename) if exc.filename is not None else None,
        )

    status = _http_status(exc)
    if status is not None or getattr(exc, "response", None) is not None:
        return handle_network_error(
            context,
            status=status,
            message=str(exc),
            response=getattr(exc, "response", None),
        )

    return handle_unknown_error(exc, context)


def _failed(
    exc: Exception,
    context: str,
    on_error: Callable[[StructuredError], None] | None,
) -> OperationResult:
    error = classify_exception(exc, context)
    log_error(error)
    if on_error is not None:
        on_error(error)
    return OperationResult.fail(error)


def with_error_handling(
    operation: Callable[[], T],
    context: str,
    on_error: Callable[[StructuredError], None] | None = None,
) -> OperationResult[T]:
    """Run ``operation``; return its value or the classified failure."""
    try:
        data = operation()
    except Exception as exc:
        return _failed(exc, context, on_error)
    return OperationResult.ok(data)


async def with_error_handling_async(
    operation: Callable[[], Awaitable[T]],
    context: str,
    on_error: Callable[[StructuredError], None] | None = None,
) -> OperationResult[T]:
    """Awaitable twin of :func:`with_error_handling`."""
    try:
        data = await operation()
    except Exception as exc:
        return _failed(exc, context, on_error)
    return OperationResult.ok(data)
