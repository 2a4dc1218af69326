# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""UDP transport for GELF messages.

``GelfConnection`` owns one datagram socket bound to a resolved collector
address.  Every message is JSON-encoded and gzip-compressed; payloads
larger than ``chunk_size`` are split into GELF chunks::

    0x1e 0x0f | message id (8 bytes) | sequence number | sequence count | data

Graylog discards messages with more than 128 chunks, so such payloads are
rejected with ``MessageTooLargeError`` before anything is sent.

Wire diagnostics are written to stderr through structlog when
``GELF4PY_WIRE_DEBUG=1`` is set.  They bypass the :mod:`logging`
module so a ``GelfHandler`` on the root logger never receives its own
diagnostics.
"""

from __future__ import annotations

import gzip
import ipaddress
import os
import socket
import sys
from types import TracebackType

import structlog

from gelf4py.errors import GelfConnectionError, MessageTooLargeError
from gelf4py.message import GelfMessage

__all__ = [
    "CHUNK_MAGIC",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_PORT",
    "MAX_CHUNKS",
    "GelfConnection",
    "resolve_host",
]

DEFAULT_PORT = 12201
"""Standard GELF UDP port."""

DEFAULT_CHUNK_SIZE = 8154
"""Largest datagram payload sent without chunking (8192 minus headroom)."""

CHUNK_MAGIC = b"\x1e\x0f"
MAX_CHUNKS = 128
_CHUNK_HEADER_SIZE = 12

# Wire debug logging - enable with GELF4PY_WIRE_DEBUG=1
_WIRE_DEBUG = os.environ.get("GELF4PY_WIRE_DEBUG", "").lower() in ("1", "true", "yes")
_wire_log: structlog.typing.FilteringBoundLogger | None = None


def _get_wire_log() -> structlog.typing.FilteringBoundLogger:
    """Get or create the wire debug logger, writing to stderr."""
    global _wire_log
    if _wire_log is None:
        _wire_log = structlog.wrap_logger(
            structlog.PrintLogger(file=sys.stderr),
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(0),
        ).bind(component="gelf.wire")
    return _wire_log


def resolve_host(host: str) -> str:
    """Resolve *host*, preferring an IPv4 address when one is available.

    Falls back to the first address ``getaddrinfo`` returns when *host* has
    no IPv4 address.

    Raises:
        socket.gaierror: If the name cannot be resolved.

    """
    infos = socket.getaddrinfo(host, None, type=socket.SOCK_DGRAM)
    for family, _, _, _, sockaddr in infos:
        if family == socket.AF_INET:
            return str(sockaddr[0])
    return str(infos[0][4][0])


class GelfConnection:
    """Datagram connection to a GELF collector.

    The connection is not thread-safe on its own; ``GelfHandler`` serialises
    access through the handler lock.

    Attributes:
        address: Resolved collector IP address.
        port: Collector UDP port.
        chunk_size: Maximum datagram payload before chunking.

    """

    def __init__(self, address: str, port: int = DEFAULT_PORT, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """Open a UDP socket for *address* and *port*.

        Raises:
            ValueError: If *address* is not an IP address or *chunk_size*
                leaves no room for chunk data.
            OSError: If the socket cannot be created.

        """
        if chunk_size <= _CHUNK_HEADER_SIZE:
            raise ValueError(f"chunk_size must be > {_CHUNK_HEADER_SIZE}, got {chunk_size}")
        family = socket.AF_INET6 if ipaddress.ip_address(address).version == 6 else socket.AF_INET
        self.address = address
        self.port = port
        self.chunk_size = chunk_size
        self._socket: socket.socket | None = socket.socket(family, socket.SOCK_DGRAM)
        if _WIRE_DEBUG:
            _get_wire_log().debug("open", address=address, port=port, chunk_size=chunk_size)

    def __repr__(self) -> str:
        """Return a string representation suitable for debugging."""
        state = "closed" if self.closed else "open"
        return f"GelfConnection({self.address!r}, {self.port}, {state})"

    @property
    def closed(self) -> bool:
        """Whether ``close()`` has been called."""
        return self._socket is None

    def send(self, message: GelfMessage) -> None:
        """Encode, compress and send *message*.

        Raises:
            GelfConnectionError: If the connection is closed.
            MessageTooLargeError: If the payload needs more than 128 chunks.
            OSError: If the datagram cannot be sent.

        """
        if self._socket is None:
            raise GelfConnectionError(
                f"GELF connection to {self.address} on port {self.port} is closed",
                host=self.address,
                port=self.port,
            )
        payload = gzip.compress(message.to_json().encode("utf-8"))
        target = (self.address, self.port)
        if len(payload) <= self.chunk_size:
            self._socket.sendto(payload, target)
            if _WIRE_DEBUG:
                _get_wire_log().debug("send", bytes=len(payload), chunks=1)
            return
        chunks = self.chunk(payload)
        for datagram in chunks:
            self._socket.sendto(datagram, target)
        if _WIRE_DEBUG:
            _get_wire_log().debug("send", bytes=len(payload), chunks=len(chunks))

    def chunk(self, payload: bytes) -> list[bytes]:
        """Split *payload* into GELF chunk datagrams.

        Raises:
            MessageTooLargeError: If more than 128 chunks would be needed.

        """
        data_size = self.chunk_size - _CHUNK_HEADER_SIZE
        count = -(-len(payload) // data_size)
        if count > MAX_CHUNKS:
            raise MessageTooLargeError(len(payload), count, MAX_CHUNKS)
        message_id = os.urandom(8)
        return [
            CHUNK_MAGIC + message_id + bytes((seq, count)) + payload[seq * data_size : (seq + 1) * data_size]
            for seq in range(count)
        ]

    def close(self) -> None:
        """Close the socket.  Calling ``close()`` twice is a no-op."""
        if self._socket is None:
            return
        self._socket.close()
        self._socket = None
        if _WIRE_DEBUG:
            _get_wire_log().debug("close", address=self.address, port=self.port)

    def __enter__(self) -> GelfConnection:
        """Return the connection for use as a context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the connection."""
        self.close()
