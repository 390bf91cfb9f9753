"""Unit tests for kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from togglehouse.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    StoreUnavailableError,
    UnsupportedMediaTypeError,
    ValidationError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        err = BaseError("m", code="custom")
        assert err.code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {
            "code": "my_code",
            "message": "m",
            "details": [{"message": "m"}],
            "detail": {"key": "val"},
        }

    def test_to_dict_omits_empty_detail(self) -> None:
        assert "detail" not in BaseError("m").to_dict()

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        err = BaseError("wrap", cause=cause)
        assert err.__cause__ is cause
        assert err.cause is cause

    def test_str_is_valid_json(self) -> None:
        err = BaseError("oops", code="oops", detail={"x": 1})
        parsed = json.loads(str(err))
        assert parsed["code"] == "oops"

    def test_repr(self) -> None:
        assert repr(ConflictError("dup")) == "ConflictError(code='conflict', message='dup')"


class TestValidationError:
    def test_default_errors_wrap_message(self) -> None:
        err = ValidationError('"name" must be URL friendly')
        assert err.details == [{"message": '"name" must be URL friendly'}]

    def test_explicit_errors_become_details(self) -> None:
        errors = [
            {"message": "first", "path": ["name"]},
            {"message": "second", "path": ["strategies"]},
        ]
        err = ValidationError("first", errors=errors)
        assert err.to_dict()["details"] == errors
        assert err.code == "validation_error"


class TestNotFoundError:
    def test_resource_and_identifier(self) -> None:
        err = NotFoundError("missing", resource="feature", identifier="t1")
        assert err.resource == "feature"
        assert err.identifier == "t1"
        assert err.code == "not_found"


class TestUnsupportedMediaTypeError:
    def test_message_names_content_type(self) -> None:
        err = UnsupportedMediaTypeError("text/plain")
        assert "text/plain" in err.message
        assert "application/json" in err.message
        assert err.code == "unsupported_media_type"

    def test_missing_content_type(self) -> None:
        assert "'none'" in UnsupportedMediaTypeError(None).message


class TestStoreUnavailableError:
    def test_default_message(self) -> None:
        err = StoreUnavailableError("tag", "getAll")
        assert err.message == "Store 'tag' failed during 'getAll'"
        assert (err.store, err.action) == ("tag", "getAll")


class TestHierarchy:
    @pytest.mark.parametrize(
        ("cls", "parent"),
        [
            (ValidationError, DomainError),
            (NotFoundError, DomainError),
            (ConflictError, DomainError),
            (UnsupportedMediaTypeError, ApplicationError),
            (StoreUnavailableError, InfrastructureError),
            (DomainError, BaseError),
            (ApplicationError, BaseError),
            (InfrastructureError, BaseError),
        ],
    )
    def test_subclassing(self, cls: type, parent: type) -> None:
        assert issubclass(cls, parent)
