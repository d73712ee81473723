"""Tests for folio.core.errors module."""

import pytest

from folio.core.errors import (
    AuthenticationError,
    ConflictError,
    ErrorCategory,
    ErrorContext,
    FolioError,
    IntegrityError,
    NotFoundError,
    PaymentRequiredError,
    ValidationError,
    categorize_error,
    error_code,
)


class TestCodes:
    """Every error kind has a stable code."""

    @pytest.mark.parametrize(
        "error,code",
        [
            (AuthenticationError("Sign in."), "UNAUTHORIZED"),
            (NotFoundError("Portfolio not found."), "NOT_FOUND"),
            (ValidationError("Bad."), "BAD_REQUEST"),
            (PaymentRequiredError(), "PAYMENT_REQUIRED"),
            (ConflictError("Taken."), "CONFLICT"),
            (IntegrityError("UNIQUE constraint failed", column="slug"), "CONFLICT"),
        ],
    )
    def test_code(self, error, code):
        assert error.code == code
        assert error_code(error) == code

    def test_foreign_exception_is_internal(self):
        assert error_code(KeyError("x")) == "INTERNAL"

    def test_payment_default_message(self):
        assert PaymentRequiredError().message == "Upgrade to Pro to use this template."


class TestErrorContext:
    def test_empty(self):
        assert ErrorContext().to_dict() == {}

    def test_known_and_extra_keys(self):
        err = NotFoundError("Portfolio not found.").with_context(project_id="p1", slug="my-site")
        assert err.context.project_id == "p1"
        assert err.context.metadata == {"slug": "my-site"}
        assert err.to_dict()["context"] == {"project_id": "p1", "slug": "my-site"}


class TestFolioError:
    def test_cause_chained(self):
        cause = ValueError("driver")
        err = FolioError("wrapped", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == "driver"

    def test_validation_to_dict(self):
        d = ValidationError("Title is required.", field="title", value="", constraint="required").to_dict()
        assert d["field"] == "title"
        assert d["constraint"] == "required"
        assert d["code"] == "BAD_REQUEST"

    def test_integrity_is_conflict(self):
        err = IntegrityError("dup", column="slug")
        assert isinstance(err, ConflictError)
        assert err.column == "slug"
        assert err.category == ErrorCategory.DATABASE


class TestCategorize:
    def test_folio(self):
        assert categorize_error(PaymentRequiredError()) == ErrorCategory.BILLING

    def test_os_error(self):
        assert categorize_error(ConnectionError()) == ErrorCategory.NETWORK

    def test_value_error(self):
        assert categorize_error(ValueError()) == ErrorCategory.VALIDATION

    def test_unknown(self):
        assert categorize_error(RuntimeError()) == ErrorCategory.UNKNOWN
