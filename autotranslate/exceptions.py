"""
Custom Exception Classes for Autotranslate

This module defines the exceptions raised by the automatic translation
engine. Every exception carries an HTTP status code so the routes can turn
them into consistent error responses.
"""

from typing import Any

from fastapi import status


class AutoTranslateException(Exception):
    """Base exception class for all automatic-translation exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(AutoTranslateException):
    """Raised when an automatic translation declaration is invalid"""

    def __init__(self, message: str, option: str | None = None):
        details = {"option": option} if option else {}
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)


class UnknownTranslatedFieldError(AutoTranslateException):
    """Raised when a (field, locale) pair is not configured for automatic translation"""

    def __init__(self, field: str, locale: str | None = None):
        message = f"Field '{field}' is not configured for automatic translation"
        if locale is not None:
            message = f"Field '{field}' is not configured for automatic translation in locale '{locale}'"
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"field": field, "locale": locale},
        )


# ============================================================================
# Resource & Operation Exceptions
# ============================================================================


class HostRecordNotFoundError(AutoTranslateException):
    """Raised when the record owning the translations cannot be found"""

    def __init__(self, host_type: str, host_id: Any | None = None):
        message = f"{host_type} not found"
        if host_id is not None:
            message = f"{host_type} with id '{host_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"host_type": host_type, "host_id": host_id},
        )


class InvalidOperationError(AutoTranslateException):
    """Raised when an operation is invalid in the current context"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details or {})


# ============================================================================
# Translator & Persistence Exceptions
# ============================================================================


class TranslatorError(AutoTranslateException):
    """Raised when the external translator fails (timeout, transport, malformed response)"""

    def __init__(self, message: str = "Translator request failed", translator: str | None = None):
        details = {"translator": translator} if translator else {}
        super().__init__(message=message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


class TranslationCountMismatchError(TranslatorError):
    """Raised when the translator does not return exactly one result per input text"""

    def __init__(self, expected: int, received: int):
        super().__init__(message=f"Translator returned {received} results for {expected} texts")
        self.details.update({"expected": expected, "received": received})


class DatabaseError(AutoTranslateException):
    """Raised when a database operation fails"""

    def __init__(self, message: str = "A database error occurred", operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
