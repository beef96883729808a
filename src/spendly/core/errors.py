"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable

FX_* and AI_002 describe provider failures. They are logged by the core
components and absorbed by the fallback chain; they are never returned to
API clients.
"""

ERROR_CATALOG: dict[str, dict] = {
    # Exchange rates
    "FX_001": {
        "code": "FX_001",
        "message": "Exchange rate provider request failed",
        "user_message": "Live exchange rates are temporarily unavailable.",
        "suggestion": "Approximate rates are used until the provider recovers.",
        "retry_allowed": True,
    },
    "FX_002": {
        "code": "FX_002",
        "message": "Exchange rate refresh could not be persisted",
        "user_message": "We couldn't store the latest exchange rates.",
        "suggestion": "The next scheduled refresh will try again.",
        "retry_allowed": True,
    },
    # Categorization
    "AI_001": {
        "code": "AI_001",
        "message": "Merchant name is required for categorization",
        "user_message": "Please enter a merchant name.",
        "suggestion": "Type the merchant or store name, then try again.",
        "retry_allowed": False,
    },
    "AI_002": {
        "code": "AI_002",
        "message": "Category inference provider request failed",
        "user_message": "No AI suggestion is available right now.",
        "suggestion": "Pick a category manually.",
        "retry_allowed": True,
    },
    # Auth
    "AUTH_001": {
        "code": "AUTH_001",
        "message": "Bearer token missing, invalid or expired",
        "user_message": "Your session has expired.",
        "suggestion": "Please sign in again.",
        "retry_allowed": False,
    },
    # Database
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Resource already exists",
        "user_message": "This record already exists.",
        "suggestion": "Please check if the record was already created.",
        "retry_allowed": False,
    },
    # Validation / system
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data.",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred.",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details. Unknown codes map to a generic entry.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
