# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Blocking UDP, TCP and TLS client transports for syslog delivery

# Standard library imports
import logging
import socket
import ssl
import time

from enum import Enum
from typing import Callable, Optional

# Fixed delay after a failed TLS handshake before the error is surfaced
TLS_HANDSHAKE_PENALTY_SECONDS = 5.0

logger = logging.getLogger("ziggiz_courier_delivery_syslog.protocol.transport")


class TransportKind(Enum):
    """Enumeration for the transport protocol, keyed by its configuration value."""

    UDP = "udp"
    TCP = "tcp"
    TLS = "ssl-tcp"


class TransportError(OSError):
    """Base class for transport failures."""


class ConnectError(TransportError):
    """Raised when a connection to the syslog peer cannot be established."""


class WriteError(TransportError):
    """Raised when data cannot be written to an established connection."""


class Connection:
    """
    A single live connection to a syslog peer.

    Wraps a connected socket so that every transport kind shares the same
    write/close contract.
    """

    def __init__(self, kind: TransportKind, sock: socket.socket):
        self.kind = kind
        self.sock: Optional[socket.socket] = sock

    @property
    def closed(self) -> bool:
        return self.sock is None

    def write(self, data: bytes) -> None:
        """
        Write data to the peer.

        Args:
            data: The bytes to send

        Raises:
            WriteError: If the connection is closed or the send fails
        """
        if self.sock is None:
            raise WriteError("Connection is closed")
        try:
            if self.kind == TransportKind.UDP:
                self.sock.send(data)
            else:
                self.sock.sendall(data)
        except OSError as e:
            raise WriteError(f"Failed to write to syslog peer: {e}") from e

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        sock, self.sock = self.sock, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            logger.debug("Error while closing connection", extra={"error": str(e)})

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Connection(kind={self.kind.name}, {state})"


def connect(
    kind: TransportKind,
    host: str,
    port: int,
    ssl_context: Optional[ssl.SSLContext] = None,
    timeout: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Connection:
    """
    Open a connection to a syslog peer.

    Args:
        kind: The transport protocol to use
        host: Peer host name or address
        port: Peer port
        ssl_context: Client SSL context, required for TLS
        timeout: Optional socket timeout in seconds for connect and write
        sleep: Sleep function used for the TLS handshake penalty

    Returns:
        An open Connection

    Raises:
        ConnectError: If the connection or TLS handshake fails
    """
    if kind == TransportKind.UDP:
        return _connect_udp(host, port, timeout)

    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise ConnectError(f"Failed to connect to {host}:{port}: {e}") from e

    if kind == TransportKind.TCP:
        return Connection(kind, sock)

    if ssl_context is None:
        sock.close()
        raise ConnectError("An SSL context is required for TLS connections")

    try:
        # server_hostname enables SNI
        tls_sock = ssl_context.wrap_socket(sock, server_hostname=host)
    except ssl.SSLError as e:
        logger.error(
            "SSL Error",
            extra={"host": host, "port": port, "error": str(e)},
        )
        sock.close()
        sleep(TLS_HANDSHAKE_PENALTY_SECONDS)
        raise ConnectError(f"TLS handshake with {host}:{port} failed: {e}") from e
    except OSError as e:
        sock.close()
        raise ConnectError(f"Failed to connect to {host}:{port}: {e}") from e

    logger.debug(
        "TLS connection established",
        extra={"host": host, "port": port, "version": tls_sock.version()},
    )
    return Connection(kind, tls_sock)


def _connect_udp(host: str, port: int, timeout: Optional[float]) -> Connection:
    """Create a datagram socket bound to a single peer address."""
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except OSError as e:
        raise ConnectError(f"Failed to resolve {host}:{port}: {e}") from e

    last_error: Optional[OSError] = None
    for family, socktype, proto, _, address in infos:
        sock = socket.socket(family, socktype, proto)
        try:
            sock.settimeout(timeout)
            sock.connect(address)
        except OSError as e:
            sock.close()
            last_error = e
            continue
        return Connection(TransportKind.UDP, sock)

    raise ConnectError(f"Failed to connect to {host}:{port}: {last_error}")
