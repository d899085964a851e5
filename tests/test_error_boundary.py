"""Tests for the with_error_handling boundary and exception classification."""

import errno

import pytest

from src.errors.boundary import (
    OperationResult,
    classify_exception,
    with_error_handling,
    with_error_handling_async,
)
from src.errors.taxonomy import ErrorSeverity, ErrorType
from src.tracker.exceptions import (
    CalculationError,
    CsvFormatError,
    ValidationFailedError,
)
from src.tracker.models import ValidationResult


class _HttpError(Exception):
    def __init__(self, status_code):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class _Response:
    status_code = 401


class _ResponseError(Exception):
    response = _Response()


class TestWithErrorHandling:
    def test_success(self):
        result = with_error_handling(lambda: 42, "answer")
        assert result == OperationResult(success=True, data=42)

    def test_failure_never_raises(self):
        def boom():
            raise RuntimeError("kaboom")

        result = with_error_handling(boom, "explode")
        assert not result.success
        assert result.error.type is ErrorType.UNKNOWN
        assert result.error.context == "explode"

    def test_on_error_called(self):
        seen = []

        def boom():
            raise CalculationError("negative")

        with_error_handling(boom, "calc", on_error=seen.append)
        assert len(seen) == 1
        assert seen[0].type is ErrorType.CALCULATION

    def test_on_error_not_called_on_success(self):
        seen = []
        with_error_handling(lambda: None, "noop", on_error=seen.append)
        assert seen == []

    def test_failure_is_logged(self, caplog):
        def boom():
            raise RuntimeError("kaboom")

        with_error_handling(boom, "explode")
        assert "kaboom" in caplog.text


class TestWithErrorHandlingAsync:
    @pytest.mark.asyncio
    async def test_success(self):
        async def op():
            return "text"

        result = await with_error_handling_async(op, "read")
        assert result.success
        assert result.data == "text"

    @pytest.mark.asyncio
    async def test_failure(self):
        async def op():
            raise FileNotFoundError(errno.ENOENT, "No such file", "missing.json")

        result = await with_error_handling_async(op, "read")
        assert not result.success
        assert result.error.type is ErrorType.FILE_SYSTEM
        assert result.error.details == {"code": "ENOENT", "path": "missing.json"}


class TestClassifyException:
    def test_validation(self):
        validation = ValidationResult.from_errors(["Name is required"], {"name": "Name is required"})
        error = classify_exception(ValidationFailedError("save", validation), "save")
        assert error.type is ErrorType.VALIDATION
        assert error.user_message == "Name is required"

    def test_data_corruption(self):
        error = classify_exception(CsvFormatError("Invalid CSV format: x", {"row": 3}), "import")
        assert error.type is ErrorType.DATA_CORRUPTION
        assert error.details == {"kind": "csv", "row": 3}
        assert "Invalid CSV format: x" in error.message

    def test_arithmetic(self):
        assert classify_exception(ZeroDivisionError("x"), "calc").type is ErrorType.CALCULATION

    def test_permission_denied(self):
        error = classify_exception(PermissionError(errno.EACCES, "Permission denied", "/data"), "save")
        assert error.type is ErrorType.FILE_SYSTEM
        assert error.severity is ErrorSeverity.CRITICAL

    def test_http_status(self):
        error = classify_exception(_HttpError(500), "sync")
        assert error.type is ErrorType.NETWORK
        assert error.severity is ErrorSeverity.HIGH

    def test_http_response(self):
        error = classify_exception(_ResponseError("denied"), "sync")
        assert error.type is ErrorType.NETWORK
        assert "Authentication required" in error.user_message

    def test_fallback_unknown(self):
        assert classify_exception(KeyError("x"), "lookup").type is ErrorType.UNKNOWN
