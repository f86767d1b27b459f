"""
Exception hierarchy for the Histograph storage layer.

Provides layered exception structure for storage-adapter errors.
All exceptions include context (table, column, host, response) so a failure
can be diagnosed without backend-side logs.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across both storage backends
"""

from typing import Any


class HistographError(Exception):
    """Base exception for all Histograph storage errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConnectivityError(HistographError):
    """Raised when a backend cannot be reached."""

    def __init__(
        self,
        message: str,
        host: str,
        port: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize connectivity error.

        Args:
            message: Error message
            host: Backend host that was contacted
            port: Backend port that was contacted
            details: Additional context
        """
        details = details or {}
        details["host"] = host
        details["port"] = port
        self.host = host
        self.port = port
        super().__init__(f"{message} at http://{host}:{port}", details)


class ConfigError(HistographError):
    """Raised when a schema or settings file is unreadable or malformed."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class SchemaError(HistographError):
    """Raised when a DDL request is malformed or rejected by the backend."""

    def __init__(
        self,
        message: str,
        table: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if table:
            details["table"] = table
        super().__init__(message, details)


class ShapeError(HistographError):
    """Raised when a row's value count fits neither insert shape."""

    def __init__(
        self,
        message: str,
        table: str | None = None,
        expected: int | None = None,
        actual: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize shape error.

        Args:
            message: Error message
            table: Target table name
            expected: Number of live columns in the table
            actual: Number of values supplied by the caller
            details: Additional context
        """
        details = details or {}
        if table:
            details["table"] = table
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        super().__init__(message, details)


class ValidationError(HistographError):
    """Raised when input validation fails (unknown column, missing hgid, bad token)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class PersistenceError(HistographError):
    """Raised when the backend rejects a write or reports an unexpected row count."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        table: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            operation: Operation that failed (insert, delete, create_index)
            table: Table the operation targeted
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details)


class ProtocolError(HistographError):
    """Raised when a backend response matches none of the known shapes."""

    def __init__(
        self,
        message: str,
        response: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if response is not None:
            details["response"] = response
        super().__init__(message, details)


class DocumentUpdateError(HistographError):
    """
    Raised when a delete-then-add document update fails partway.

    phase is "delete" when the first step failed and the stored document is
    unchanged, or "add" when the delete went through and the document is now
    absent until the update is re-issued.
    """

    def __init__(
        self,
        message: str,
        phase: str,
        hgid: str | None = None,
        delete_response: Any = None,
        add_response: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["phase"] = phase
        if hgid:
            details["hgid"] = hgid
        self.phase = phase
        self.delete_response = delete_response
        self.add_response = add_response
        super().__init__(message, details)

    @property
    def document_missing(self) -> bool:
        """True when the old document was removed but the new one was not stored."""
        return self.phase == "add"
