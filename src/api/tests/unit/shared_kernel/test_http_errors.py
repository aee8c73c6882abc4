"""Unit tests for the domain error taxonomy and its HTTP translation."""

import pytest
from fastapi import HTTPException

from shared_kernel.exceptions import (
    AuthorizationError,
    ConflictError,
    DeskflowError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from shared_kernel.http_errors import (
    bad_request,
    internal_error,
    parse_workspace_path,
    to_http_exception,
)


@pytest.mark.parametrize(
    ("error_cls", "status_code"),
    [
        (ValidationError, 400),
        (AuthorizationError, 403),
        (NotFoundError, 404),
        (ConflictError, 409),
        (UnexpectedError, 500),
    ],
)
def test_status_by_kind(error_cls, status_code):
    assert to_http_exception(error_cls("boom")).status_code == status_code


def test_detail_carries_kind_message_and_details():
    error = NotFoundError("Comment not found", comment_id="01ABC")

    exc = to_http_exception(error)

    assert exc.detail == {
        "kind": "not_found",
        "message": "Comment not found",
        "comment_id": "01ABC",
    }


def test_unknown_kind_maps_to_500():
    class Odd(DeskflowError):
        kind = "odd"

    assert to_http_exception(Odd("?")).status_code == 500


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        raise ValidationError("bad")


def test_internal_error_and_bad_request():
    assert internal_error("failed").status_code == 500
    assert internal_error("failed").detail["kind"] == "unexpected"
    assert bad_request("Invalid id").detail == {
        "kind": "validation",
        "message": "Invalid id",
    }


def test_workspace_path_parses_valid_id(current_user, workspace_id):
    assert parse_workspace_path(workspace_id.value, current_user) == workspace_id


def test_malformed_workspace_path_is_denied_before_validation(current_user):
    with pytest.raises(HTTPException) as exc_info:
        parse_workspace_path("not-a-ulid", current_user)

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail["kind"] == "authorization"


def test_malformed_workspace_path_is_400_for_super_admin(super_admin):
    with pytest.raises(HTTPException) as exc_info:
        parse_workspace_path("not-a-ulid", super_admin)

    assert exc_info.value.status_code == 400
