from .boundary import (
    OperationResult,
    classify_exception,
    with_error_handling,
    with_error_handling_async,
)
from .recovery import (
    ErrorRecovery,
    create_fallback_data,
    format_error_for_display,
    get_error_recovery,
    log_error,
)
from .taxonomy import (
    ErrorSeverity,
    ErrorType,
    StructuredError,
    create_error,
    handle_calculation_error,
    handle_data_corruption_error,
    handle_file_system_error,
    handle_network_error,
    handle_unknown_error,
    handle_validation_error,
)

__all__ = [
    "ErrorType",
    "ErrorSeverity",
    "StructuredError",
    "create_error",
    "handle_validation_error",
    "handle_network_error",
    "handle_file_system_error",
    "handle_data_corruption_error",
    "handle_calculation_error",
    "handle_unknown_error",
    "ErrorRecovery",
    "get_error_recovery",
    "format_error_for_display",
    "create_fallback_data",
    "log_error",
    "OperationResult",
    "classify_exception",
    "with_error_handling",
    "with_error_handling_async",
]
