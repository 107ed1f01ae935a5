# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Connection lifecycle and resend loop for outgoing syslog messages

# Standard library imports
import logging
import ssl
import time

from enum import Enum
from typing import Callable, Optional

# Local/package imports
from ziggiz_courier_delivery_syslog.protocol import transport
from ziggiz_courier_delivery_syslog.protocol.transport import (
    Connection,
    TransportError,
    TransportKind,
)


class ConnectionState(Enum):
    """State of the delivery connection."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class SyslogDelivery:
    """
    Owns the single connection to a syslog peer and delivers framed messages.

    Messages are sent one at a time. On TCP and TLS a failed connect or write
    closes the connection, sleeps for the reconnect interval and resends the
    same bytes, forever. On UDP a failure drops the message.
    """

    def __init__(
        self,
        kind: TransportKind,
        host: str,
        port: int,
        delimiter: str = "\n",
        reconnect_interval: float = 1.0,
        ssl_context: Optional[ssl.SSLContext] = None,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the delivery loop.

        Args:
            kind: The transport protocol to use
            host: Peer host name or address
            port: Peer port
            delimiter: Trailer appended to every message
            reconnect_interval: Seconds to wait before reconnecting after a failure
            ssl_context: Client SSL context for TLS
            timeout: Optional socket timeout in seconds
            sleep: Sleep function, replaceable for tests
        """
        self.logger = logging.getLogger(
            "ziggiz_courier_delivery_syslog.protocol.delivery"
        )
        self.kind = kind
        self.host = host
        self.port = port
        self.delimiter = delimiter
        self.reconnect_interval = reconnect_interval
        self.ssl_context = ssl_context
        self.timeout = timeout
        self.sleep = sleep
        self.connection: Optional[Connection] = None

    @property
    def state(self) -> ConnectionState:
        if self.connection is None:
            return ConnectionState.DISCONNECTED
        return ConnectionState.CONNECTED

    def _connect(self) -> Connection:
        return transport.connect(
            self.kind,
            self.host,
            self.port,
            ssl_context=self.ssl_context,
            timeout=self.timeout,
            sleep=self.sleep,
        )

    def send(self, message: str) -> bool:
        """
        Deliver one framed message, reconnecting as needed.

        Args:
            message: The formatted syslog message without its delimiter

        Returns:
            True if the message was written, False if it was dropped (UDP only)
        """
        payload = (message + self.delimiter).encode("utf-8")
        attempt = 0

        while True:
            attempt += 1
            try:
                if self.state == ConnectionState.DISCONNECTED:
                    self.connection = self._connect()
                self.connection.write(payload)  # type: ignore[union-attr]
                return True
            except TransportError as e:
                if self.kind == TransportKind.UDP:
                    # UDP is stateless, a retry would be meaningless
                    self.logger.debug(
                        "Dropped syslog message after UDP failure to "
                        f"{self.host}:{self.port}: {e}",
                        extra={"host": self.host, "port": self.port, "error": str(e)},
                    )
                    return False

                self.logger.warning(
                    f"syslog {self.kind.value} output exception: closing, "
                    f"reconnecting and resending event to {self.host}:{self.port}: {e}",
                    extra={
                        "host": self.host,
                        "port": self.port,
                        "error": str(e),
                        "attempt": attempt,
                    },
                )
                self.close()
                self.sleep(self.reconnect_interval)

    def close(self) -> None:
        """Close the connection, if any, and return to the disconnected state."""
        connection, self.connection = self.connection, None
        if connection is not None:
            connection.close()
