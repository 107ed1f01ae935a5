# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Syslog message formatting for RFC3164, RFC5424 and RFC6587 framing

# Standard library imports
from enum import Enum

# Timestamp patterns handed to the field resolver for each framing mode
RFC3164_TIMESTAMP_PATTERN = "MMM dd HH:mm:ss"
RFC5424_TIMESTAMP_PATTERN = "YYYY-MM-dd'T'HH:mm:ss.SSSZZ"

NILVALUE = "-"
LINE_DELIMITER = "\n"


class FramingMode(Enum):
    """
    Enumeration for the outgoing syslog message format.

    Values:
        RFC3164: Legacy BSD syslog, newline delimited.
        RFC5424: Structured syslog, newline delimited.
        RFC6587: RFC5424 body with an octet-count prefix and no delimiter.
    """

    RFC3164 = "rfc3164"
    RFC5424 = "rfc5424"
    RFC6587 = "rfc6587"

    @property
    def timestamp_pattern(self) -> str:
        """The date pattern used to render the message timestamp."""
        if self == FramingMode.RFC3164:
            return RFC3164_TIMESTAMP_PATTERN
        return RFC5424_TIMESTAMP_PATTERN

    @property
    def supports_structured_data(self) -> bool:
        return self != FramingMode.RFC3164


def delimiter_for(mode: FramingMode) -> str:
    """Return the trailer written after each message for a framing mode."""
    if mode == FramingMode.RFC6587:
        return ""
    return LINE_DELIMITER


def normalize_message(message: str) -> str:
    """
    Make a message body safe for line oriented framing.

    Trailing whitespace is stripped, CRLF becomes LF and every remaining LF is
    escaped as the two characters backslash-n.
    """
    return message.rstrip().replace("\r\n", "\n").replace("\n", "\\n")


def format_message(
    framing_mode: FramingMode,
    priority: int,
    timestamp: str,
    sourcehost: str,
    appname: str,
    procid: str,
    msgid: str,
    structured_data: str,
    message: str,
) -> str:
    """
    Build a syslog message from already resolved field values.

    The returned string carries no trailing delimiter; see delimiter_for().

    Args:
        framing_mode: The message format to produce
        priority: PRI value in [0, 191]
        timestamp: Timestamp already rendered with framing_mode.timestamp_pattern
        sourcehost: HOSTNAME field
        appname: APP-NAME (RFC5424) or TAG (RFC3164)
        procid: PROCID field
        msgid: MSGID field, ignored for RFC3164
        structured_data: STRUCTURED-DATA, "-" is used when empty; ignored for RFC3164
        message: Message body, normalized before use

    Returns:
        The formatted message
    """
    body = normalize_message(message)

    if framing_mode == FramingMode.RFC3164:
        return f"<{priority}>{timestamp} {sourcehost} {appname}[{procid}]: {body}"

    sd = structured_data if structured_data else NILVALUE
    syslog_msg = (
        f"<{priority}>1 {timestamp} {sourcehost} {appname} {procid} {msgid} {sd} {body}"
    )
    if framing_mode == FramingMode.RFC6587:
        syslog_msg = f"{len(syslog_msg)} {syslog_msg}"
    return syslog_msg
