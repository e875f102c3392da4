"""Error Hierarchy — verifies codes, statuses and the error envelope."""

import pytest

from netgroup.core.errors import (
    BadRequestError, ConflictError, DatabaseError, ErrorCategory,
    ForbiddenError, NetgroupError, NotFoundError, UnauthorizedError,
)


@pytest.mark.parametrize("error, code, status", [
    (BadRequestError("x"), "BAD_REQUEST", 400),
    (UnauthorizedError(), "UNAUTHORIZED", 401),
    (ForbiddenError("x"), "FORBIDDEN", 403),
    (NotFoundError("Member", "42"), "NOT_FOUND", 404),
    (ConflictError("x"), "CONFLICT", 409),
    (DatabaseError("x", "commit"), "DATABASE_ERROR", 503),
])
def test_error_codes_and_statuses(error, code, status):
    assert isinstance(error, NetgroupError)
    assert error.code == code
    assert error.http_status == status


def test_not_found_message_names_resource():
    error = NotFoundError("Member", "42")
    assert error.message == "Member '42' not found"
    assert error.category == ErrorCategory.RESOURCE_NOT_FOUND
    assert error.context.resource_id == "42"


def test_envelope_shape():
    body = ConflictError("duplicate").to_response()
    assert body["success"] is False
    assert body["error"] == {
        "code": "CONFLICT", "message": "duplicate", "category": "conflict",
    }
    assert "timestamp" in body["meta"]
