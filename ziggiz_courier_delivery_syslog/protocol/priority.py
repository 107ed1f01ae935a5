# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Facility/severity tables and PRI computation for outgoing syslog messages

# Standard library imports
from enum import Enum
from typing import Optional

# Ordered so that the list index is the facility code
FACILITY_LABELS = (
    "kernel",
    "user-level",
    "mail",
    "daemon",
    "security/authorization",
    "syslogd",
    "line printer",
    "network news",
    "uucp",
    "clock",
    "ftp",
    "ntp",
    "log audit",
    "log alert",
    "local0",
    "local1",
    "local2",
    "local3",
    "local4",
    "local5",
    "local6",
    "local7",
)

# Ordered so that the list index is the severity code
SEVERITY_LABELS = (
    "emergency",
    "alert",
    "critical",
    "error",
    "warning",
    "notice",
    "informational",
    "debug",
)

# RFC3164 defaults: user-level / notice, PRI 13
DEFAULT_FACILITY_CODE = 1
DEFAULT_SEVERITY_CODE = 5
DEFAULT_PRIORITY = DEFAULT_FACILITY_CODE * 8 + DEFAULT_SEVERITY_CODE

MAX_PRIORITY = 191


class PriorityMode(Enum):
    """How the PRI value of a message is obtained."""

    LABELED = "labeled"
    NUMERIC = "numeric"


def facility_code(label: str) -> int:
    """Return the facility code for a label, falling back to user-level."""
    try:
        return FACILITY_LABELS.index(label)
    except ValueError:
        return DEFAULT_FACILITY_CODE


def severity_code(label: str) -> int:
    """Return the severity code for a label, falling back to notice."""
    try:
        return SEVERITY_LABELS.index(label)
    except ValueError:
        return DEFAULT_SEVERITY_CODE


def parse_priority(raw_priority: Optional[str]) -> int:
    """
    Parse a numeric PRI override.

    Anything that is not an integer in [0, 191] yields the default PRI 13.

    Args:
        raw_priority: The resolved priority text

    Returns:
        A valid PRI value
    """
    try:
        priority = int(raw_priority)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    if priority < 0 or priority > MAX_PRIORITY:
        return DEFAULT_PRIORITY
    return priority


def resolve_priority(
    mode: PriorityMode,
    facility_label: str = "",
    severity_label: str = "",
    raw_priority: Optional[str] = None,
) -> int:
    """
    Compute the PRI value of a syslog message.

    Args:
        mode: LABELED to look up facility/severity labels, NUMERIC to use raw_priority
        facility_label: Resolved facility label (LABELED mode)
        severity_label: Resolved severity label (LABELED mode)
        raw_priority: Resolved priority text (NUMERIC mode)

    Returns:
        An integer in [0, 191]
    """
    if mode == PriorityMode.LABELED:
        return facility_code(facility_label) * 8 + severity_code(severity_label)
    return parse_priority(raw_priority)
