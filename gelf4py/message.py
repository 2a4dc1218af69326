# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""GELF 1.1 message envelope.

This module provides Level and GelfMessage, the in-memory form of a single
log event before it is handed to a ``GelfConnection``.

WIRE FORMAT
-----------
``GelfMessage.to_dict()`` produces the GELF 1.1 object::

    {
        "version": "1.1",
        "host": "web-01",
        "short_message": "Processing started",
        "full_message": "Processing started\\nTraceback ...",
        "timestamp": 1700000000.123,
        "level": 6,
        "_facility": "billing",
        "_threadName": "MainThread"
    }

Additional field names are prefixed with ``_`` unless they already carry
one.  ``_id`` is reserved by Graylog and is never emitted.  Values that
are not strings, numbers or booleans are sent as compact JSON text.

KEY CLASSES
-----------
Level : IntEnum of syslog severities, EMERGENCY (0) to DEBUG (7)
GelfMessage : Envelope with core fields and additional fields

"""

from __future__ import annotations

import json
import logging
from enum import IntEnum
from typing import ClassVar

__all__ = [
    "GELF_VERSION",
    "GelfMessage",
    "Level",
]

GELF_VERSION = "1.1"


class Level(IntEnum):
    """Syslog severity levels carried in the GELF ``level`` field.

    Attributes:
        EMERGENCY: System is unusable.
        ALERT: Action must be taken immediately.
        CRITICAL: Critical conditions.
        ERROR: Error conditions.
        WARNING: Warning conditions.
        NOTICE: Normal but significant condition.
        INFO: Informational messages.
        DEBUG: Debug-level messages.

    """

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7

    @classmethod
    def from_logging(cls, levelno: int) -> Level:
        """Map a :mod:`logging` level number to the closest syslog severity."""
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


class GelfMessage:
    """A single GELF message.

    Attributes:
        short_message: One-line summary of the event.
        host: Name of the machine that produced the event.
        full_message: Long form, typically including a traceback.
        timestamp: Seconds since the epoch, with fractional milliseconds.
        level: Syslog severity.
        facility: Originating application or subsystem.
        additional_fields: Extra fields, keyed without the ``_`` prefix.

    """

    __slots__ = ("additional_fields", "facility", "full_message", "host", "level", "short_message", "timestamp")
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    _RESERVED_FIELDS: ClassVar[frozenset[str]] = frozenset({"_id"})

    def __init__(
        self,
        short_message: str,
        *,
        host: str | None = None,
        full_message: str | None = None,
        timestamp: float | None = None,
        level: Level | None = None,
        facility: str | None = None,
        additional_fields: dict[str, object] | None = None,
    ) -> None:
        """Create a message with a short summary and optional core fields."""
        self.short_message = short_message
        self.host = host
        self.full_message = full_message
        self.timestamp = timestamp
        self.level = level
        self.facility = facility
        self.additional_fields: dict[str, object] = dict(additional_fields) if additional_fields else {}

    def __eq__(self, other: object) -> bool:
        """Compare messages field by field."""
        if not isinstance(other, GelfMessage):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __repr__(self) -> str:
        """Return a string representation suitable for debugging."""
        if self.additional_fields:
            return f"GelfMessage({self.short_message!r}, level={self.level!r}, **{self.additional_fields!r})"
        return f"GelfMessage({self.short_message!r}, level={self.level!r})"

    def to_dict(self) -> dict[str, object]:
        """Build the GELF 1.1 object for this message.

        Core fields that are ``None`` are omitted, as are additional fields
        whose value is ``None``.
        """
        result: dict[str, object] = {"version": GELF_VERSION}
        if self.host is not None:
            result["host"] = self.host
        result["short_message"] = self.short_message
        if self.full_message is not None:
            result["full_message"] = self.full_message
        if self.timestamp is not None:
            result["timestamp"] = round(self.timestamp, 3)
        if self.level is not None:
            result["level"] = int(self.level)
        if self.facility is not None:
            result["_facility"] = self.facility
        for name, value in self.additional_fields.items():
            key = name if name.startswith("_") else f"_{name}"
            if key in self._RESERVED_FIELDS or value is None:
                continue
            result[key] = _field_value(value)
        return result

    def to_json(self) -> str:
        """Serialize the message as compact JSON.

        Raises:
            ValueError: If a field holds a NaN or infinite float.

        """
        return json.dumps(self.to_dict(), separators=(",", ":"), default=str, allow_nan=False)


def _field_value(value: object) -> object:
    """Reduce an additional field value to a GELF scalar."""
    if isinstance(value, str | int | float | bool):
        return value
    return json.dumps(value, separators=(",", ":"), default=str, allow_nan=False)
