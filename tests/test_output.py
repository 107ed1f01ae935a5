# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for the syslog output

# Standard library imports
import datetime
import re
import ssl

from unittest.mock import MagicMock, patch

# Third-party imports
import pytest

# Local/package imports
from ziggiz_courier_delivery_syslog.config import Config
from ziggiz_courier_delivery_syslog.errors import ConfigurationError
from ziggiz_courier_delivery_syslog.event import Event
from ziggiz_courier_delivery_syslog.output import SyslogOutput
from ziggiz_courier_delivery_syslog.protocol.formatter import FramingMode
from ziggiz_courier_delivery_syslog.protocol.priority import PriorityMode
from ziggiz_courier_delivery_syslog.protocol.transport import TransportKind

UTC = datetime.timezone.utc


@pytest.fixture
def event():
    return Event(
        {
            "message": "user logged in\r\nsecond line  ",
            "host": "web-1",
            "pid": 321,
            "level": "warning",
            "syslog_pri": "34",
            "type": "LOGIN",
            "source": {"ip": "10.0.0.1"},
        },
        timestamp=datetime.datetime(2024, 1, 2, 15, 4, 5, 123456, tzinfo=UTC),
    )


def make_config(**kwargs):
    kwargs.setdefault("host", "127.0.0.1")
    kwargs.setdefault("port", 5140)
    return Config(**kwargs)


class TestSyslogOutputSetup:
    """Tests for SyslogOutput initialization."""

    @pytest.mark.unit
    def test_modes_from_config(self):
        output = SyslogOutput(make_config(protocol="tcp", rfc="rfc6587", use_labels=False))
        assert output.framing_mode is FramingMode.RFC6587
        assert output.priority_mode is PriorityMode.NUMERIC
        assert output.transport_kind is TransportKind.TCP
        assert output.delivery.delimiter == ""
        assert output.delivery.ssl_context is None
        assert output.delivery.reconnect_interval == 1

    @pytest.mark.unit
    def test_rfc3164_line_delimiter(self):
        output = SyslogOutput(make_config())
        assert output.delivery.delimiter == "\n"
        assert output.transport_kind is TransportKind.UDP

    @pytest.mark.unit
    def test_structured_data_with_rfc3164_is_rejected(self):
        # model_construct skips validation, as when a config is built by hand
        config = Config.model_construct(
            **{
                **make_config().model_dump(),
                "structured_data": "[a]",
            }
        )
        with pytest.raises(ConfigurationError):
            SyslogOutput(config)

    @pytest.mark.unit
    def test_tls_context_is_built(self):
        with patch(
            "ziggiz_courier_delivery_syslog.output.TrustContextBuilder.create_client_context"
        ) as mock_create:
            mock_create.return_value = MagicMock(spec=ssl.SSLContext)
            output = SyslogOutput(
                make_config(
                    protocol="ssl-tcp",
                    ssl_verify=True,
                    ssl_cacert="/ca.pem",
                    ssl_crl="/crl.pem",
                    ssl_crl_check_all=True,
                )
            )
        mock_create.assert_called_once_with(
            verify=True, cacert="/ca.pem", crl="/crl.pem", crl_check_all=True
        )
        assert output.delivery.ssl_context is mock_create.return_value
        assert output.transport_kind is TransportKind.TLS


class TestSyslogOutputMessages:
    """Tests for message construction."""

    @pytest.mark.unit
    def test_default_rfc3164(self, event):
        output = SyslogOutput(make_config())
        assert output.build_message(event) == (
            "<13>Jan 02 15:04:05 web-1 LOGSTASH[-]: user logged in\\nsecond line"
        )

    @pytest.mark.unit
    def test_labels(self, event):
        output = SyslogOutput(make_config(facility="local0", severity="%{level}"))
        assert output.compute_priority(event) == 14 * 8 + 4

    @pytest.mark.unit
    def test_unknown_labels_fall_back(self, event):
        output = SyslogOutput(make_config(facility="%{nope}", severity="loud"))
        assert output.compute_priority(event) == 13

    @pytest.mark.unit
    def test_numeric_priority(self, event):
        output = SyslogOutput(make_config(use_labels=False))
        assert output.compute_priority(event) == 34

    @pytest.mark.unit
    def test_numeric_priority_missing_field(self):
        output = SyslogOutput(make_config(use_labels=False))
        assert output.compute_priority(Event({})) == 13

    @pytest.mark.unit
    def test_rfc5424(self, event):
        output = SyslogOutput(
            make_config(
                rfc="rfc5424",
                appname="auth",
                procid="%{pid}",
                msgid="%{type}",
                structured_data='[origin ip="%{[source][ip]}"]',
            )
        )
        assert output.build_message(event) == (
            '<13>1 2024-01-02T15:04:05.123+00:00 web-1 auth 321 LOGIN '
            '[origin ip="10.0.0.1"] user logged in\\nsecond line'
        )

    @pytest.mark.unit
    def test_rfc5424_without_structured_data(self, event):
        output = SyslogOutput(make_config(rfc="rfc5424"))
        message = output.build_message(event)
        assert re.match(
            r"^<13>1 2024-01-02T15:04:05\.123\+00:00 web-1 LOGSTASH - - - ", message
        )

    @pytest.mark.unit
    def test_rfc6587(self, event):
        output = SyslogOutput(make_config(rfc="rfc6587"))
        message = output.build_message(event)
        length, body = message.split(" ", 1)
        assert int(length) == len(body)
        assert body.startswith("<13>1 2024-01-02T15:04:05.123+00:00 ")


class TestSyslogOutputReceive:
    """Tests for SyslogOutput.receive()."""

    @pytest.mark.unit
    def test_receive_hands_message_to_delivery(self, event):
        output = SyslogOutput(make_config(rfc="rfc5424"))
        output.delivery = MagicMock()
        output.delivery.send.return_value = True

        assert output.receive(event) is True
        output.delivery.send.assert_called_once_with(output.build_message(event))

    @pytest.mark.unit
    def test_receive_runs_in_span(self, event):
        output = SyslogOutput(make_config(protocol="tcp"))
        output.delivery = MagicMock()
        output.tracer = MagicMock()

        output.receive(event)

        output.tracer.start_as_current_span.assert_called_once()
        args, kwargs = output.tracer.start_as_current_span.call_args
        assert args == ("syslog.publish",)
        assert kwargs["attributes"]["syslog.protocol"] == "tcp"
        assert kwargs["attributes"]["net.peer.port"] == 5140

    @pytest.mark.unit
    def test_close(self):
        output = SyslogOutput(make_config())
        output.delivery = MagicMock()
        output.close()
        output.delivery.close.assert_called_once()

    @pytest.mark.integration
    def test_udp_end_to_end(self, udp_receiver, event):
        host, port = udp_receiver.getsockname()
        output = SyslogOutput(make_config(host=host, port=port, rfc="rfc5424"))
        try:
            assert output.receive(event) is True
            data, _ = udp_receiver.recvfrom(4096)
        finally:
            output.close()
        assert data == (output.build_message(event) + "\n").encode("utf-8")

    @pytest.mark.integration
    def test_tcp_rfc6587_end_to_end(self, tcp_listener, event):
        host, port = tcp_listener.getsockname()
        output = SyslogOutput(
            make_config(host=host, port=port, protocol="tcp", rfc="rfc6587")
        )
        try:
            output.receive(event)
            output.receive(event)
            peer, _ = tcp_listener.accept()
            peer.settimeout(5)
            expected = output.build_message(event).encode("utf-8") * 2
            data = b""
            while len(data) < len(expected):
                chunk = peer.recv(4096)
                if not chunk:
                    break
                data += chunk
            peer.close()
        finally:
            output.close()
        # Octet-counted frames are written back to back without a delimiter
        assert data == expected
