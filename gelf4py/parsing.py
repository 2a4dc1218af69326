# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Parsers for the textual field-spec syntaxes.

Two forms are accepted wherever additional fields or data are configured
as text:

BULK
----
A JSON object in which single quotes may stand in for double quotes, so
specs can be written inside XML attributes, INI values or shell strings
without escaping::

    {'threadName':'thread','timestampMs':'timestampMs'}

Every ``'`` is replaced by ``"`` before decoding.  A consequence is that a
literal single quote can never appear inside a value written in this
syntax.

SINGLE ENTRY
------------
``key=value``, split on the first ``=``::

    ip_address=ipAddress
    query=a=b          # key "query", value "a=b"

"""

from __future__ import annotations

import json

__all__ = [
    "parse_field_spec",
    "parse_json_object",
]


def _reject_constant(name: str) -> object:
    raise ValueError(f"Invalid JSON constant {name}")


def parse_json_object(text: str) -> dict[str, object]:
    """Decode a relaxed-JSON object.

    Args:
        text: JSON object text, optionally using single quotes as string
            delimiters.

    Returns:
        The decoded object.

    Raises:
        json.JSONDecodeError: If *text* is not valid JSON after quote
            substitution.
        ValueError: If *text* is valid JSON but not an object, or uses the
            non-standard ``NaN``, ``Infinity`` or ``-Infinity`` constants.

    """
    decoded = json.loads(text.replace("'", '"'), parse_constant=_reject_constant)
    if not isinstance(decoded, dict):
        raise ValueError(f"Expected a JSON object but found {type(decoded).__name__} in '{text}'")
    return decoded


def parse_field_spec(field_spec: str) -> tuple[str, str]:
    """Split a ``key=value`` spec on its first ``=``.

    Raises:
        ValueError: If *field_spec* contains no ``=``.

    """
    key, sep, value = field_spec.partition("=")
    if not sep:
        raise ValueError(f"Expected value to be of form a=b but found '{field_spec}' instead.")
    return key, value
