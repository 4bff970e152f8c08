"""
Tests for storage errors and their user-facing messages.
"""
import pytest
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import DuplicateError, StorageBackendError, StorageError
from core.friendly_msg import get_friendly_message
from core.get_db import build_engine, build_session_factory
from helpers import user_data
from schemas.schema import UserCreate
from storage.database_storage import DatabaseStorage


class TestDuplicateError:
    def test_message_and_fields(self):
        exc = DuplicateError("User", "username", "alice")

        assert isinstance(exc, StorageError)
        assert str(exc) == "User with username 'alice' already exists"
        assert exc.resource_type == "User"
        assert exc.field == "username"
        assert exc.value == "alice"
        assert exc.context == {"resource_type": "User", "field": "username", "value": "alice"}

    def test_custom_message(self):
        exc = DuplicateError("User", "email", "a@b.c", message="Email taken")
        assert str(exc) == "Email taken"
        assert exc.field == "email"


class TestStorageBackendError:
    def test_operation_in_context(self):
        original = SQLAlchemyError("boom")
        exc = StorageBackendError("failed", operation="get_user", original_error=original)

        assert exc.operation == "get_user"
        assert exc.original_error is original
        assert exc.context == {"operation": "get_user"}

    def test_without_operation(self):
        exc = StorageBackendError("failed")
        assert exc.context == {}
        assert exc.original_error is None


class TestFriendlyMessages:
    def test_duplicate_username(self):
        exc = DuplicateError("User", "username", "alice")
        assert get_friendly_message(exc) == "Username already exists"

    def test_duplicate_email(self):
        exc = DuplicateError("User", "email", "alice@example.com")
        assert get_friendly_message(exc) == "Email already registered"

    def test_duplicate_other_field(self):
        exc = DuplicateError("Property", "name", "Loft")
        assert get_friendly_message(exc) == "This record already exists."

    def test_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            UserCreate(**user_data(role="nobody"))
        assert get_friendly_message(exc_info.value).startswith("Invalid data received")

    def test_backend_error(self):
        assert "Temporary issue" in get_friendly_message(StorageBackendError("down"))

    def test_unknown_error(self):
        assert get_friendly_message(RuntimeError("x")) == (
            "Something went wrong on our end. Please try again."
        )


async def test_backend_failure_is_wrapped():
    """Test that a database error surfaces as StorageBackendError with the cause attached."""
    # schema never created, so every statement fails
    engine = build_engine("sqlite+aiosqlite:///:memory:", echo=False)
    storage = DatabaseStorage(build_session_factory(engine))
    try:
        with pytest.raises(StorageBackendError) as exc_info:
            await storage.list_users()
        assert exc_info.value.operation == "list_users"
        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)

        with pytest.raises(StorageBackendError) as exc_info:
            await storage.create_user(user_data())
        assert exc_info.value.operation == "create_user"
    finally:
        await engine.dispose()
