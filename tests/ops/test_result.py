"""Tests for folio.ops.result - OperationResult envelope and error folding."""

from folio.core.errors import ErrorCategory, NotFoundError, PaymentRequiredError, ValidationError
from folio.ops.guards import failure
from folio.ops.result import OperationResult, start_timer


# =====================================================================
# OperationResult.ok / fail
# =====================================================================


class TestOperationResultOk:
    def test_ok_basic(self):
        r = OperationResult.ok("hello")
        assert r.success is True
        assert r.data == "hello"
        assert r.error is None

    def test_ok_with_elapsed(self):
        r = OperationResult.ok(None, elapsed_ms=12.5)
        assert r.elapsed_ms == 12.5


class TestOperationResultFail:
    def test_fail_basic(self):
        r = OperationResult.fail("NOT_FOUND", "Portfolio not found.")
        assert r.success is False
        assert r.data is None
        assert r.error.code == "NOT_FOUND"

    def test_fail_with_details(self):
        r = OperationResult.fail("BAD_REQUEST", "Bad input", details={"field": "title"})
        assert r.error.details == {"field": "title"}


# =====================================================================
# from_error
# =====================================================================


class TestFromError:
    def test_validation_details(self):
        err = ValidationError("Title is required.", field="title", constraint="required")
        r = OperationResult.from_error(err)
        assert r.error.code == "BAD_REQUEST"
        assert r.error.category == ErrorCategory.VALIDATION
        assert r.error.details == {"field": "title", "constraint": "required"}

    def test_context_metadata_copied(self):
        err = ValidationError("Invalid item order.").with_context(missing=["a"])
        assert OperationResult.from_error(err).error.details["missing"] == ["a"]

    def test_known_context_fields_not_leaked(self):
        err = NotFoundError("Portfolio not found.").with_context(project_id="p1", user_id="u1")
        assert OperationResult.from_error(err).error.details == {}

    def test_payment_required(self):
        r = OperationResult.from_error(PaymentRequiredError())
        assert r.error.code == "PAYMENT_REQUIRED"
        assert r.error.category == ErrorCategory.BILLING


class TestFailure:
    def test_folio_error(self):
        r = failure("get_project", NotFoundError("Portfolio not found."), 1.0)
        assert r.error.code == "NOT_FOUND"
        assert r.elapsed_ms == 1.0

    def test_unexpected_error_is_internal(self):
        r = failure("create_project", RuntimeError("boom"), 0.0)
        assert r.error.code == "INTERNAL"
        assert r.error.message == "Failed to create project: boom"


# =====================================================================
# to_dict / timer
# =====================================================================


class TestToDict:
    def test_success(self):
        d = OperationResult.ok([1, 2]).to_dict()
        assert d == {"success": True, "data": [1, 2]}

    def test_failure(self):
        d = OperationResult.fail("BAD_REQUEST", "nope", details={"field": "slug"}).to_dict()
        assert d["success"] is False
        assert d["error"] == {
            "code": "BAD_REQUEST",
            "message": "nope",
            "details": {"field": "slug"},
        }


class TestTimer:
    def test_elapsed_non_negative(self):
        assert start_timer().elapsed_ms >= 0
