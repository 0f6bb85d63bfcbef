"""Entry details: the free-form metadata attached to every upload.

Clients may send details either as a JSON document or as arbitrary text, so
the value is modelled as one of two variants:

- :class:`Structured` wraps any JSON-compatible value (usually a mapping).
- :class:`Raw` wraps a string that was not valid JSON.

Conversion to and from the stored text happens only at the store boundary via
:func:`serialize_details` and :func:`parse_details`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Structured:
    """Details that parsed as JSON."""

    value: Any


@dataclass(frozen=True)
class Raw:
    """Details kept as the client sent them."""

    text: str


Details = Union[Structured, Raw]


@dataclass(frozen=True)
class ParseResult:
    """Outcome of :func:`try_parse_json`.

    Attributes:
        ok: ``True`` if the text was valid JSON.
        value: The decoded value when ``ok`` is ``True``, otherwise ``None``.
    """

    ok: bool
    value: Any = None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def try_parse_json(text: str) -> ParseResult:
    """Decode *text* as JSON without raising.

    ``NaN`` and ``Infinity`` are rejected so every parsed value can be
    re-encoded as strict JSON.

    Args:
        text: Candidate JSON document.

    Returns:
        A :class:`ParseResult`; ``ok`` is ``False`` for anything the JSON
        decoder rejects.
    """
    try:
        return ParseResult(ok=True, value=json.loads(text, parse_constant=_reject_constant))
    except (TypeError, ValueError):
        return ParseResult(ok=False)


def parse_details(text: str | None) -> Details:
    """Turn stored or submitted text into a :data:`Details` value.

    ``None`` (a NULL column) reads back as JSON ``null``.
    """
    if text is None:
        return Structured(None)
    result = try_parse_json(text)
    if result.ok:
        return Structured(result.value)
    return Raw(text)


def from_form(fields: Mapping[str, str], exclude: str = "image") -> Details:
    """Collect scalar form fields into a structured details document.

    Args:
        fields: Non-file form fields, in submission order.
        exclude: Field name that carries the upload and must not be copied.

    Returns:
        ``Structured`` mapping of field name to value.
    """
    return Structured({key: value for key, value in fields.items() if key != exclude})


def serialize_details(details: Details) -> str:
    """Render details as the text stored in the ``details`` column."""
    if isinstance(details, Raw):
        return details.text
    return json.dumps(details.value, ensure_ascii=False)


def details_value(details: Details) -> Any:
    """Return the JSON-compatible value exposed to API clients."""
    if isinstance(details, Raw):
        return details.text
    return details.value
