# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Syslog output: turns events into syslog messages and delivers them

# Standard library imports
import logging
import time

from typing import Callable, Optional

# Local/package imports
from ziggiz_courier_delivery_syslog.config import Config
from ziggiz_courier_delivery_syslog.errors import ConfigurationError
from ziggiz_courier_delivery_syslog.event import Event
from ziggiz_courier_delivery_syslog.field_resolver import FieldResolver
from ziggiz_courier_delivery_syslog.protocol.delivery import SyslogDelivery
from ziggiz_courier_delivery_syslog.protocol.formatter import (
    FramingMode,
    delimiter_for,
    format_message,
)
from ziggiz_courier_delivery_syslog.protocol.priority import (
    PriorityMode,
    resolve_priority,
)
from ziggiz_courier_delivery_syslog.protocol.tls import TrustContextBuilder
from ziggiz_courier_delivery_syslog.protocol.transport import TransportKind
from ziggiz_courier_delivery_syslog.telemetry import get_tracer


class SyslogOutput:
    """
    Sends events to a syslog server.

    Every configured template is resolved against the event, the PRI value is
    computed, the message is formatted for the configured RFC and handed to
    the delivery loop. Events are processed one at a time; receive() blocks
    while the delivery loop reconnects.
    """

    def __init__(
        self,
        config: Config,
        resolver: Optional[FieldResolver] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the output and validate its configuration.

        Args:
            config: The output configuration
            resolver: Field resolver for templates, defaults to a UTC FieldResolver
            sleep: Sleep function used by the delivery loop, replaceable for tests

        Raises:
            ConfigurationError: If the configuration cannot be used
        """
        self.logger = logging.getLogger("ziggiz_courier_delivery_syslog.output")
        self.config = config
        self.resolver = resolver or FieldResolver()
        self.tracer = get_tracer()

        self.framing_mode = FramingMode(config.rfc)
        self.priority_mode = (
            PriorityMode.LABELED if config.use_labels else PriorityMode.NUMERIC
        )
        self.transport_kind = TransportKind(config.protocol)

        if not self.framing_mode.supports_structured_data and config.structured_data:
            raise ConfigurationError("Structured data is not supported for RFC3164")

        ssl_context = None
        if self.transport_kind == TransportKind.TLS:
            ssl_context = TrustContextBuilder.create_client_context(
                verify=config.ssl_verify,
                cacert=config.ssl_cacert,
                crl=config.ssl_crl,
                crl_check_all=config.ssl_crl_check_all,
            )

        self.delivery = SyslogDelivery(
            self.transport_kind,
            config.host,
            config.port,
            delimiter=delimiter_for(self.framing_mode),
            reconnect_interval=config.reconnect_interval,
            ssl_context=ssl_context,
            timeout=config.connect_timeout,
            sleep=sleep,
        )

        self.logger.info(
            f"Syslog output to {config.host}:{config.port} using "
            f"{self.transport_kind.name} with {self.framing_mode.name} framing"
        )

    def compute_priority(self, event: Event) -> int:
        """Resolve the PRI value of the message for an event."""
        sprintf = self.resolver.sprintf
        if self.priority_mode == PriorityMode.LABELED:
            return resolve_priority(
                self.priority_mode,
                facility_label=sprintf(event, self.config.facility),
                severity_label=sprintf(event, self.config.severity),
            )
        return resolve_priority(
            self.priority_mode, raw_priority=sprintf(event, self.config.priority)
        )

    def build_message(self, event: Event) -> str:
        """
        Build the syslog message for an event, without its delimiter.

        Args:
            event: The event to format

        Returns:
            The formatted syslog message
        """
        sprintf = self.resolver.sprintf
        config = self.config

        msgid = "-"
        structured_data = ""
        if self.framing_mode != FramingMode.RFC3164:
            msgid = sprintf(event, config.msgid)
            if config.structured_data:
                structured_data = sprintf(event, config.structured_data)

        return format_message(
            self.framing_mode,
            priority=self.compute_priority(event),
            timestamp=self.resolver.format_timestamp(
                event, self.framing_mode.timestamp_pattern
            ),
            sourcehost=sprintf(event, config.sourcehost),
            appname=sprintf(event, config.appname),
            procid=sprintf(event, config.procid),
            msgid=msgid,
            structured_data=structured_data,
            message=sprintf(event, config.message),
        )

    def receive(self, event: Event) -> bool:
        """
        Format and deliver one event.

        Args:
            event: The event to send

        Returns:
            True if the message was written, False if it was dropped
        """
        syslog_msg = self.build_message(event)
        with self.tracer.start_as_current_span(
            "syslog.publish",
            attributes={
                "syslog.protocol": self.config.protocol,
                "syslog.rfc": self.config.rfc,
                "net.peer.name": self.config.host,
                "net.peer.port": self.config.port,
            },
        ):
            return self.delivery.send(syslog_msg)

    def close(self) -> None:
        """Close the connection to the syslog server."""
        self.delivery.close()
        self.logger.debug("Syslog output closed")
