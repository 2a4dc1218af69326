# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Exception types raised by gelf4py.

Malformed field specs are reported as plain ``ValueError`` (and
``json.JSONDecodeError`` for bulk specs); only connection and transport
failures get dedicated types.
"""

from __future__ import annotations

__all__ = [
    "GelfConnectionError",
    "GelfError",
    "MessageTooLargeError",
    "UnresolvedHostError",
]


class GelfError(Exception):
    """Base class for all gelf4py errors."""


class GelfConnectionError(GelfError):
    """A connection to the GELF collector could not be created or used.

    Attributes:
        host: Collector host name, when known.
        port: Collector port, when known.

    """

    def __init__(self, message: str, *, host: str | None = None, port: int | None = None) -> None:
        """Initialize with a message and the target host/port."""
        super().__init__(message)
        self.host = host
        self.port = port


class UnresolvedHostError(GelfConnectionError):
    """The collector host name could not be resolved to an address."""

    def __init__(self, host: str) -> None:
        """Initialize with the host name that failed to resolve."""
        super().__init__(f"Unknown GELF host {host}", host=host)


class MessageTooLargeError(GelfError):
    """A message needs more chunks than the GELF protocol allows.

    Attributes:
        size: Compressed payload size in bytes.
        chunks: Number of chunks the payload would need.

    """

    def __init__(self, size: int, chunks: int, max_chunks: int) -> None:
        """Initialize with the payload size and chunk counts."""
        self.size = size
        self.chunks = chunks
        super().__init__(f"GELF message of {size} bytes needs {chunks} chunks (maximum {max_chunks})")
