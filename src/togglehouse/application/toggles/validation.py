"""Toggle domain – definition validation.

Every check appends ``{"message", "path"}`` entries; a non-empty list is
raised as a single :class:`ValidationError` whose message is the first
entry's.
"""
from __future__ import annotations

import re
from typing import Any

from togglehouse.application.toggles.models import FeatureToggle, Tag
from togglehouse.kernel.errors import ValidationError

# Characters left untouched by URI component encoding.
URL_FRIENDLY = re.compile(r"^[A-Za-z0-9\-_.!~*'()]+$")

MAX_VARIANT_WEIGHT = 1000
TAG_TYPE_MIN = 2
TAG_TYPE_MAX = 50
TAG_VALUE_MIN = 2
TAG_VALUE_MAX = 50


def is_url_friendly(value: str) -> bool:
    return URL_FRIENDLY.fullmatch(value) is not None


def _error(message: str, *path: Any) -> dict[str, Any]:
    return {"message": message, "path": list(path)}


def _raise_if_any(errors: list[dict[str, Any]]) -> None:
    if errors:
        raise ValidationError(errors[0]["message"], errors=errors)


def name_errors(value: str, field: str = "name") -> list[dict[str, Any]]:
    if not value:
        return [_error(f'"{field}" is not allowed to be empty', field)]
    if not is_url_friendly(value):
        return [_error(f'"{field}" must be URL friendly', field)]
    return []


def validate_name(value: str, field: str = "name") -> None:
    """Raise :class:`ValidationError` unless *value* is a URL-friendly name."""
    _raise_if_any(name_errors(value, field))


def validate_toggle(toggle: FeatureToggle) -> None:
    """Check a full toggle definition before create or update."""
    errors = name_errors(toggle.name)

    if not toggle.strategies:
        errors.append(_error('"strategies" must contain at least 1 items', "strategies"))
    for i, strategy in enumerate(toggle.strategies):
        if not strategy.name:
            errors.append(_error('"name" is not allowed to be empty', "strategies", i, "name"))

    seen: set[str] = set()
    for i, variant in enumerate(toggle.variants):
        if not variant.name:
            errors.append(_error('"name" is not allowed to be empty', "variants", i, "name"))
        elif variant.name in seen:
            errors.append(_error('"variants" contains a duplicate value', "variants", i))
        seen.add(variant.name)
        if not 0 <= variant.weight <= MAX_VARIANT_WEIGHT:
            errors.append(
                _error(
                    f'"weight" must be between 0 and {MAX_VARIANT_WEIGHT}',
                    "variants", i, "weight",
                )
            )

    _raise_if_any(errors)


def validate_tag(tag: Tag) -> None:
    """Tag values are checked as given; callers strip surrounding whitespace."""
    errors = name_errors(tag.type, "type")
    if not errors and not TAG_TYPE_MIN <= len(tag.type) <= TAG_TYPE_MAX:
        errors.append(
            _error(
                f'"type" length must be between {TAG_TYPE_MIN} and {TAG_TYPE_MAX} characters',
                "type",
            )
        )
    if not TAG_VALUE_MIN <= len(tag.value) <= TAG_VALUE_MAX:
        errors.append(
            _error(
                f'"value" length must be between {TAG_VALUE_MIN} and {TAG_VALUE_MAX} characters',
                "value",
            )
        )
    _raise_if_any(errors)


__all__ = [
    "URL_FRIENDLY",
    "is_url_friendly",
    "name_errors",
    "validate_name",
    "validate_tag",
    "validate_toggle",
]
