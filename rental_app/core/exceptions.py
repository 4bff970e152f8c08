"""
Errors raised by the storage layer.

Absence is never an error here: lookups return ``None`` and deletes return
``False``. The only contract-level failure is ``DuplicateError``; anything
the database itself refuses surfaces as ``StorageBackendError``.
"""

from typing import Any, Optional


class StorageError(Exception):
    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = {key: str(value) for key, value in context.items()}

    def __str__(self) -> str:
        return self.message


class DuplicateError(StorageError):
    """A unique field (User username / email) collides with an existing row."""

    def __init__(
        self,
        resource_type: str,
        field: str,
        value: Any,
        message: Optional[str] = None,
    ):
        self.resource_type = resource_type
        self.field = field
        self.value = value
        super().__init__(
            message or f"{resource_type} with {field} '{value}' already exists",
            resource_type=resource_type,
            field=field,
            value=value,
        )


class StorageBackendError(StorageError):
    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.operation = operation
        self.original_error = original_error
        context = {"operation": operation} if operation else {}
        super().__init__(message, **context)
