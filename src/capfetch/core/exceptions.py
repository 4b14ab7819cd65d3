"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class InvalidStateError(AppError):
    """Raised when a batch control operation is not allowed in the current state."""

    def __init__(self, operation: str, status: str):
        super().__init__(
            f"Cannot {operation} batch while {status}",
            code="INVALID_STATE",
        )


class TransportError(AppError):
    """Raised when the upstream provider answers non-2xx or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, code="TRANSPORT_ERROR")


class NoPriceDataError(AppError):
    """Raised when neither the requested date nor any fallback date has a quote."""

    def __init__(self, message: str):
        super().__init__(message, code="NO_PRICE_DATA")


class MissingYearDateError(AppError):
    """Raised when the year-to-date mapping has no entry for a requested year."""

    def __init__(self, year: int):
        super().__init__(f"No target date configured for year {year}", code="MISSING_YEAR_DATE")


class CancelledError(AppError):
    """Raised when the batch is stopped while work is in flight."""

    def __init__(self, message: str = "Batch cancelled"):
        super().__init__(message, code="CANCELLED")
