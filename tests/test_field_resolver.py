# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for template resolution and date pattern formatting

# Standard library imports
import datetime

# Third-party imports
import pytest

# Local/package imports
from ziggiz_courier_delivery_syslog.event import Event
from ziggiz_courier_delivery_syslog.field_resolver import (
    FieldResolver,
    format_date,
    stringify,
    tokenize_date_pattern,
)

UTC = datetime.timezone.utc
SAMPLE = datetime.datetime(2006, 1, 2, 15, 4, 5, 678900, tzinfo=UTC)


@pytest.fixture
def resolver():
    return FieldResolver()


@pytest.fixture
def event():
    return Event(
        {
            "message": "hello world",
            "host": "web-1",
            "pid": 4242,
            "level": "error",
            "ok": True,
            "nothing": None,
            "service": {"name": "api", "version": 2},
            "tags": ["a", "b"],
        },
        timestamp=SAMPLE,
    )


@pytest.mark.unit
class TestDatePatterns:
    """Tests for the Joda style date pattern formatter."""

    def test_tokenize(self):
        assert tokenize_date_pattern("YYYY-MM'T'") == [
            ("field", "YYYY"),
            ("literal", "-"),
            ("field", "MM"),
            ("literal", "T"),
        ]

    def test_escaped_quote(self):
        assert format_date(SAMPLE, "HH''mm") == "15'04"

    def test_rfc3164_pattern(self):
        assert format_date(SAMPLE, "MMM dd HH:mm:ss") == "Jan 02 15:04:05"

    def test_rfc5424_pattern(self):
        assert (
            format_date(SAMPLE, "YYYY-MM-dd'T'HH:mm:ss.SSSZZ")
            == "2006-01-02T15:04:05.678+00:00"
        )

    def test_offsets(self):
        tz = datetime.timezone(datetime.timedelta(hours=-5, minutes=-30))
        dt = SAMPLE.astimezone(tz)
        assert format_date(dt, "ZZ") == "-05:30"
        assert format_date(dt, "Z") == "-0530"

    def test_short_fields(self):
        dt = datetime.datetime(2024, 3, 4, 5, 6, 7, tzinfo=UTC)
        assert format_date(dt, "yy M d H") == "24 3 4 5"
        assert format_date(dt, "S") == "0"

    def test_unsupported_letter(self):
        with pytest.raises(ValueError):
            format_date(SAMPLE, "EEE")


@pytest.mark.unit
class TestStringify:
    """Tests for stringify()."""

    def test_values(self):
        assert stringify("text") == "text"
        assert stringify(None) == ""
        assert stringify(True) == "true"
        assert stringify(12) == "12"
        assert stringify({"a": 1}) == '{"a":1}'
        assert stringify([1, "x"]) == '[1,"x"]'


@pytest.mark.unit
class TestFieldResolver:
    """Tests for FieldResolver.sprintf()."""

    def test_plain_template(self, resolver, event):
        assert resolver.sprintf(event, "LOGSTASH") == "LOGSTASH"

    def test_field_reference(self, resolver, event):
        assert resolver.sprintf(event, "%{message}") == "hello world"
        assert resolver.sprintf(event, "%{host}:%{pid}") == "web-1:4242"

    def test_nested_reference(self, resolver, event):
        assert resolver.sprintf(event, "%{[service][name]}") == "api"
        assert resolver.sprintf(event, "%{service}") == '{"name":"api","version":2}'

    def test_scalar_rendering(self, resolver, event):
        assert resolver.sprintf(event, "%{ok}") == "true"
        assert resolver.sprintf(event, "[%{nothing}]") == "[]"
        assert resolver.sprintf(event, "%{tags}") == '["a","b"]'

    def test_missing_field_is_left_in_place(self, resolver, event):
        assert resolver.sprintf(event, "%{syslog_pri}") == "%{syslog_pri}"
        assert resolver.sprintf(event, "x %{[a][b]} y") == "x %{[a][b]} y"

    def test_date_reference(self, resolver, event):
        assert resolver.sprintf(event, "%{+MMM dd HH:mm:ss}") == "Jan 02 15:04:05"
        assert resolver.sprintf(event, "%{+%s}") == str(int(SAMPLE.timestamp()))

    def test_timestamps_are_rendered_in_utc(self, resolver):
        tz = datetime.timezone(datetime.timedelta(hours=2))
        event = Event({}, timestamp=SAMPLE.astimezone(tz))
        assert (
            resolver.format_timestamp(event, "YYYY-MM-dd'T'HH:mm:ss.SSSZZ")
            == "2006-01-02T15:04:05.678+00:00"
        )

    def test_custom_time_zone(self, event):
        tz = datetime.timezone(datetime.timedelta(hours=2))
        resolver = FieldResolver(tz=tz)
        assert resolver.format_timestamp(event, "HH:mm ZZ") == "17:04 +02:00"

    def test_unsupported_date_pattern_is_left_in_place(self, resolver, event):
        assert resolver.sprintf(event, "%{+EEE}") == "%{+EEE}"
