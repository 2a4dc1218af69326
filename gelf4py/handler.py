# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""``logging.Handler`` that ships records to a GELF collector.

Programmatic setup::

    handler = GelfHandler("graylog.internal", facility="billing")
    handler.config.add_additional_field("thread=threadName")
    logging.getLogger().addHandler(handler)

``logging.config.dictConfig`` setup::

    "handlers": {
        "gelf": {
            "class": "gelf4py.GelfHandler",
            "host": "graylog.internal",
            "facility": "billing",
            "additional_fields": "{'thread':'threadName','exception':'exception'}",
            "additional_data": {"env": "prod"},
        },
    }

Field lookup for each configured additional field:

- ``threadName``: ``record.threadName``
- ``timestampMs``: ``record.created`` in integer milliseconds
- ``loggerName``: ``record.name``
- ``exception``: formatted traceback, only when ``exc_info`` is set
- anything else: the record attribute of that name, usually supplied with
  ``logger.info(..., extra={"request_id": rid})``

Missing values are left out of the message.
"""

from __future__ import annotations

import logging

from gelf4py.config import (
    FIELD_EXCEPTION,
    FIELD_LOGGER_NAME,
    FIELD_THREAD_NAME,
    FIELD_TIMESTAMP_MS,
    FieldSpec,
    GelfTargetConfig,
)
from gelf4py.connection import GelfConnection
from gelf4py.message import GelfMessage, Level

__all__ = ["GelfHandler"]

_default_formatter = logging.Formatter()


class GelfHandler(logging.Handler):
    """Send each log record as a GELF message over UDP.

    Keyword arguments override the matching settings of *config* (or of a
    fresh ``GelfTargetConfig``).  The connection is created immediately so
    that an unreachable collector fails logging setup; pass ``delay=True``
    to defer it to the first record.

    Attributes:
        config: The target configuration consulted for every record.

    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        origin_host: str | None = None,
        facility: str | None = None,
        additional_fields: FieldSpec | None = None,
        additional_data: FieldSpec | None = None,
        config: GelfTargetConfig | None = None,
        delay: bool = False,
        level: int | str = logging.NOTSET,
    ) -> None:
        """Configure the target and, unless *delay* is set, connect to it."""
        super().__init__(level)
        self.config = config if config is not None else GelfTargetConfig()
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = int(port)
        if origin_host is not None:
            self.config.origin_host = origin_host
        if facility is not None:
            self.config.facility = facility
        if additional_fields is not None:
            self.config.set_additional_fields(additional_fields)
        if additional_data is not None:
            self.config.set_additional_data(additional_data)
        self._connection: GelfConnection | None = None
        if not delay:
            self._connection = self.config.create_connection()

    def __repr__(self) -> str:
        """Return a string representation suitable for debugging."""
        level = logging.getLevelName(self.level)
        return f"<{self.__class__.__name__} {self.config.host}:{self.config.port} ({level})>"

    def build_message(self, record: logging.LogRecord) -> GelfMessage:
        """Convert *record* into a ``GelfMessage`` using the current config."""
        text = record.getMessage()
        short_message = text.splitlines()[0] if text else ""
        full_message = self.format(record)

        fields: dict[str, object] = dict(self.config.additional_data)
        for name, key in self.config.additional_fields.items():
            value = self._lookup(record, key)
            if value is not None:
                fields[name] = value

        return GelfMessage(
            short_message,
            host=self.config.origin_host,
            full_message=full_message if full_message != short_message else None,
            timestamp=record.created,
            level=Level.from_logging(record.levelno),
            facility=self.config.facility,
            additional_fields=fields,
        )

    def _lookup(self, record: logging.LogRecord, key: str) -> object:
        """Resolve one context key against *record*."""
        if key == FIELD_THREAD_NAME:
            return record.threadName
        if key == FIELD_TIMESTAMP_MS:
            return int(record.created * 1000)
        if key == FIELD_LOGGER_NAME:
            return record.name
        if key == FIELD_EXCEPTION:
            if not record.exc_info:
                return None
            return (self.formatter or _default_formatter).formatException(record.exc_info)
        return record.__dict__.get(key)

    def emit(self, record: logging.LogRecord) -> None:
        """Send *record*, opening the connection first if it was delayed."""
        try:
            message = self.build_message(record)
            if self._connection is None:
                self._connection = self.config.create_connection()
            self._connection.send(message)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the connection and release the handler."""
        self.acquire()
        try:
            try:
                if self._connection is not None:
                    self._connection.close()
                    self._connection = None
            finally:
                super().close()
        finally:
            self.release()
