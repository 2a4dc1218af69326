# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Target configuration for GELF output.

``GelfTargetConfig`` describes where GELF messages go (``host``/``port``)
and how they are enriched (``origin_host``, ``facility``, additional fields
and additional data).  It is populated once during logging setup and read
for every record afterwards.

ADDITIONAL FIELDS vs ADDITIONAL DATA
------------------------------------
*Additional fields* map a GELF field name to a context key that is looked
up fresh for every record (``threadName``, ``loggerName``, an ``extra=``
attribute, ...).  Values are always stored as text.

*Additional data* map a GELF field name to a literal that is sent
unchanged with every message.  Values keep the type they were decoded
with.

Both accept the relaxed bulk syntax and the ``key=value`` syntax described
in :mod:`gelf4py.parsing`::

    config = GelfTargetConfig(host="graylog.internal", facility="billing")
    config.set_additional_fields("{'thread':'threadName','logger':'loggerName'}")
    config.add_additional_field("request_id=request_id")
    config.set_additional_data("{'env':'prod','shard':3}")

The mappings are exposed as live read-only views.  Change them through the
``set_*``/``add_*``/``remove_*`` methods.

Not thread-safe: finish configuring before records start flowing.
"""

from __future__ import annotations

import json
import logging
import os
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from gelf4py.connection import DEFAULT_PORT, GelfConnection, resolve_host
from gelf4py.errors import GelfConnectionError, UnresolvedHostError
from gelf4py.parsing import parse_field_spec, parse_json_object

__all__ = [
    "DEFAULT_PORT",
    "FIELD_EXCEPTION",
    "FIELD_LOGGER_NAME",
    "FIELD_THREAD_NAME",
    "FIELD_TIMESTAMP_MS",
    "GelfTargetConfig",
]

_logger = logging.getLogger("gelf4py.config")

# ---------------------------------------------------------------------------
# Well-known context keys
# ---------------------------------------------------------------------------

FIELD_THREAD_NAME = "threadName"
FIELD_TIMESTAMP_MS = "timestampMs"
FIELD_LOGGER_NAME = "loggerName"
FIELD_EXCEPTION = "exception"

FieldSpec = str | Mapping[str, object]
"""Bulk spec: relaxed-JSON text or an already-decoded mapping."""


def _local_hostname() -> str | None:
    """Return the resolved local host name, or ``None`` if it cannot be resolved."""
    try:
        name = socket.gethostname()
        socket.gethostbyname(name)
    except OSError:
        return None
    return name


def _default_fields() -> dict[str, str]:
    return {FIELD_EXCEPTION: FIELD_EXCEPTION}


def _as_text(value: object) -> str:
    """Render a decoded JSON value the way it was written (``5``, ``true``, ``null``)."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _decode(spec: FieldSpec) -> dict[str, object]:
    if isinstance(spec, str):
        return parse_json_object(spec)
    return {str(key): value for key, value in spec.items()}


@dataclass
class GelfTargetConfig:
    """Connection and enrichment settings for one GELF output.

    Attributes:
        host: Collector host name or address (resolved on ``create_connection``).
        port: Collector UDP port.
        origin_host: Value of the GELF ``host`` field.  Defaults to the local
            host name, or ``None`` when it cannot be resolved.
        facility: Originating application or subsystem, if any.

    """

    host: str = "localhost"
    port: int = DEFAULT_PORT
    origin_host: str | None = field(default_factory=_local_hostname)
    facility: str | None = None
    _additional_fields: dict[str, str] = field(init=False, repr=False, default_factory=_default_fields)
    _additional_data: dict[str, object] = field(init=False, repr=False, default_factory=dict)

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def create_connection(self) -> GelfConnection:
        """Resolve ``host`` and open a new connection to it.

        Blocks on name resolution; call it during setup, not per record.
        The caller owns (and must close) the returned connection.

        Raises:
            UnresolvedHostError: If ``host`` cannot be resolved.
            GelfConnectionError: If the connection cannot be created.

        """
        try:
            address = resolve_host(self.host)
        except socket.gaierror as exc:
            raise UnresolvedHostError(self.host) from exc
        try:
            return GelfConnection(address, self.port)
        except Exception as exc:
            raise GelfConnectionError(
                f"Error connecting to GELF host {self.host} on port {self.port}",
                host=self.host,
                port=self.port,
            ) from exc

    # ------------------------------------------------------------------
    # Additional fields
    # ------------------------------------------------------------------

    @property
    def additional_fields(self) -> Mapping[str, str]:
        """Live read-only view of GELF field name -> context key."""
        return MappingProxyType(self._additional_fields)

    def set_additional_fields(self, spec: FieldSpec) -> None:
        """Replace all additional fields, including the default ``exception`` entry.

        Non-string values are stored as their JSON text (``5`` -> ``"5"``).

        Raises:
            ValueError: If *spec* is not a (relaxed) JSON object.  The
                current fields are left unchanged.

        """
        decoded = _decode(spec)
        self._additional_fields.clear()
        for key, value in decoded.items():
            self._additional_fields[key] = _as_text(value)
        _logger.debug("Replaced additional fields: %s", sorted(self._additional_fields))

    def add_additional_field(self, field_spec: str) -> None:
        """Add or overwrite one field given as ``gelf_field=context_key``.

        Raises:
            ValueError: If *field_spec* contains no ``=``.

        """
        key, value = parse_field_spec(field_spec)
        self._additional_fields[key] = value

    def remove_additional_field(self, key: str) -> None:
        """Remove one additional field; unknown keys are ignored."""
        self._additional_fields.pop(key, None)

    # ------------------------------------------------------------------
    # Additional data
    # ------------------------------------------------------------------

    @property
    def additional_data(self) -> Mapping[str, object]:
        """Live read-only view of GELF field name -> literal value."""
        return MappingProxyType(self._additional_data)

    def set_additional_data(self, spec: FieldSpec) -> None:
        """Replace all additional data with the decoded entries of *spec*.

        Raises:
            ValueError: If *spec* is not a (relaxed) JSON object.  The
                current data is left unchanged.

        """
        decoded = _decode(spec)
        self._additional_data.clear()
        self._additional_data.update(decoded)
        _logger.debug("Replaced additional data: %s", sorted(self._additional_data))

    def add_additional_data(self, field_spec: str) -> None:
        """Add or overwrite one literal given as ``gelf_field=value``.

        The value is stored as a string; no type inference is attempted.

        Raises:
            ValueError: If *field_spec* contains no ``=``.

        """
        key, value = parse_field_spec(field_spec)
        self._additional_data[key] = value

    def remove_additional_data(self, key: str) -> None:
        """Remove one additional data entry; unknown keys are ignored."""
        self._additional_data.pop(key, None)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, prefix: str = "GELF_") -> GelfTargetConfig:
        """Build a config from environment variables.

        Recognised variables (with the default prefix): ``GELF_HOST``,
        ``GELF_PORT``, ``GELF_ORIGIN_HOST``, ``GELF_FACILITY``,
        ``GELF_ADDITIONAL_FIELDS`` and ``GELF_ADDITIONAL_DATA`` (bulk syntax).
        Unset variables keep their defaults.

        Raises:
            ValueError: If ``GELF_PORT`` is not an integer or a bulk spec is
                malformed.

        """
        env = os.environ if environ is None else environ
        config = cls()
        if (host := env.get(f"{prefix}HOST")) is not None:
            config.host = host
        if (port := env.get(f"{prefix}PORT")) is not None:
            config.port = int(port)
        if (origin_host := env.get(f"{prefix}ORIGIN_HOST")) is not None:
            config.origin_host = origin_host
        if (facility := env.get(f"{prefix}FACILITY")) is not None:
            config.facility = facility
        if (fields := env.get(f"{prefix}ADDITIONAL_FIELDS")) is not None:
            config.set_additional_fields(fields)
        if (data := env.get(f"{prefix}ADDITIONAL_DATA")) is not None:
            config.set_additional_data(data)
        return config

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly snapshot of the settings."""
        return {
            "host": self.host,
            "port": self.port,
            "origin_host": self.origin_host,
            "facility": self.facility,
            "additional_fields": dict(self._additional_fields),
            "additional_data": dict(self._additional_data),
        }
