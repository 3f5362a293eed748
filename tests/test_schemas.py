"""Validation of create and update payloads."""
from __future__ import annotations

import pytest

from apps.blog.models import TITLE_MAX_LENGTH
from apps.blog.schemas import validate_for_create, validate_for_update
from apps.shared.errors import ValidationError


def valid_payload() -> dict:
    return {
        "author": {"firstName": "Jo", "lastName": "Ng"},
        "title": "T",
        "content": "C",
    }


def test_create_accepts_valid_payload():
    draft = validate_for_create(valid_payload())
    assert draft.title == "T"
    assert draft.content == "C"
    assert draft.author.model_dump() == {"firstName": "Jo", "lastName": "Ng"}


def test_create_reports_every_missing_field_at_once():
    with pytest.raises(ValidationError) as excinfo:
        validate_for_create({"author": {}})

    assert excinfo.value.violations == ["title", "content", "author.firstName", "author.lastName"]
    for field in ("title", "content", "author.firstName", "author.lastName"):
        assert field in excinfo.value.message


def test_create_missing_last_name():
    payload = valid_payload()
    del payload["author"]["lastName"]

    with pytest.raises(ValidationError) as excinfo:
        validate_for_create(payload)
    assert excinfo.value.violations == ["author.lastName"]


@pytest.mark.parametrize("field", ["title", "content"])
@pytest.mark.parametrize("value", ["", "   ", None, 12])
def test_create_rejects_empty_or_non_string(field, value):
    payload = valid_payload()
    payload[field] = value

    with pytest.raises(ValidationError) as excinfo:
        validate_for_create(payload)
    assert excinfo.value.violations == [field]


def test_create_rejects_missing_author_object():
    payload = valid_payload()
    del payload["author"]

    with pytest.raises(ValidationError) as excinfo:
        validate_for_create(payload)
    assert excinfo.value.violations == ["author"]


def test_create_ignores_client_id_and_created():
    payload = valid_payload()
    payload["id"] = "client-chosen"
    payload["created"] = "1999-01-01T00:00:00"

    draft = validate_for_create(payload)
    assert not hasattr(draft, "id")
    assert "created" not in draft.model_dump()


@pytest.mark.parametrize("payload", [[], "text", 5, None])
def test_non_object_body_is_rejected(payload):
    with pytest.raises(ValidationError):
        validate_for_create(payload)
    with pytest.raises(ValidationError):
        validate_for_update(payload)


def test_update_returns_only_sent_fields():
    assert validate_for_update({"title": "T2"}) == {"title": "T2"}
    assert validate_for_update({}) == {}


def test_update_strips_server_fields():
    patch = validate_for_update({"id": "abc", "created": "2020-01-01", "content": "C2"})
    assert patch == {"content": "C2"}


def test_update_author_must_be_complete():
    with pytest.raises(ValidationError) as excinfo:
        validate_for_update({"author": {"firstName": "Only"}})
    assert excinfo.value.violations == ["author.lastName"]


def test_update_author_replaces_as_whole_object():
    patch = validate_for_update({"author": {"firstName": "A", "lastName": "B", "extra": "x"}})
    assert patch == {"author": {"firstName": "A", "lastName": "B"}}


@pytest.mark.parametrize("field", ["title", "content", "author"])
def test_update_rejects_explicit_null(field):
    with pytest.raises(ValidationError) as excinfo:
        validate_for_update({field: None})
    assert excinfo.value.violations == [field]


def test_update_rejects_blank_title():
    with pytest.raises(ValidationError) as excinfo:
        validate_for_update({"title": " "})
    assert excinfo.value.violations == ["title"]


def test_title_longer_than_column_is_rejected():
    payload = valid_payload()
    payload["title"] = "x" * (TITLE_MAX_LENGTH + 1)

    with pytest.raises(ValidationError) as excinfo:
        validate_for_create(payload)
    assert excinfo.value.violations == ["title"]

    with pytest.raises(ValidationError) as excinfo:
        validate_for_update({"title": "x" * (TITLE_MAX_LENGTH + 1)})
    assert excinfo.value.violations == ["title"]
