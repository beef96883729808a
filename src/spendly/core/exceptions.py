"""Custom exception classes.

Every exception carries an error_code that maps to the catalog in
errors.py. Provider errors are raised by the provider adapters and caught
by the rate resolver and the categorization engine, which fall back to the
next tier instead of surfacing them.
"""

from typing import Any


class SpendlyError(Exception):
    """Base exception for all application errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "AI_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class ProviderError(SpendlyError):
    """Raised when an external provider call fails.

    Covers network errors, timeouts, auth failures and responses that
    cannot be interpreted.
    """

    pass


class RateProviderError(ProviderError):
    """Raised when the exchange rate provider cannot deliver a snapshot."""

    def __init__(self, reason: str, **details: Any):
        super().__init__("FX_001", details={"reason": reason, **details}, http_status=503)
        self.reason = reason

    def __str__(self) -> str:
        return f"FX_001: {self.reason}"


class InferenceProviderError(ProviderError):
    """Raised when the category inference provider fails."""

    def __init__(self, reason: str, **details: Any):
        super().__init__("AI_002", details={"reason": reason, **details}, http_status=503)
        self.reason = reason

    def __str__(self) -> str:
        return f"AI_002: {self.reason}"


class InvalidInputError(SpendlyError):
    """Raised by the API layer for requests the core cannot act on."""

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details=details, http_status=400)
