# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Shared test fixtures for gelf4py tests."""

from __future__ import annotations

import gzip
import json
import socket
from collections.abc import Iterator

import pytest

from gelf4py.connection import CHUNK_MAGIC


class UdpCollector:
    """Loopback UDP socket standing in for a GELF collector."""

    def __init__(self) -> None:
        """Bind to an ephemeral port on 127.0.0.1."""
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(5.0)
        self.host = "127.0.0.1"
        self.port: int = self.sock.getsockname()[1]

    def recv_datagram(self) -> bytes:
        """Receive one raw datagram."""
        data, _ = self.sock.recvfrom(65535)
        return data

    def recv_message(self) -> dict[str, object]:
        """Receive one GELF message, reassembling chunks if needed."""
        first = self.recv_datagram()
        if not first.startswith(CHUNK_MAGIC):
            return json.loads(gzip.decompress(first))
        count = first[11]
        parts = {first[10]: first[12:]}
        while len(parts) < count:
            datagram = self.recv_datagram()
            assert datagram[2:10] == first[2:10], "chunks from different messages"
            parts[datagram[10]] = datagram[12:]
        return json.loads(gzip.decompress(b"".join(parts[i] for i in range(count))))

    def close(self) -> None:
        """Close the socket."""
        self.sock.close()


@pytest.fixture
def collector() -> Iterator[UdpCollector]:
    """Yield a loopback collector for one test."""
    c = UdpCollector()
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def unresolvable(monkeypatch: pytest.MonkeyPatch) -> str:
    """Make name resolution fail for a dedicated host name and return it."""
    name = "collector.unresolvable.invalid"
    real_getaddrinfo = socket.getaddrinfo

    def fake_getaddrinfo(host: object, *args: object, **kwargs: object) -> object:
        if host == name:
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        return real_getaddrinfo(host, *args, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)
    return name
