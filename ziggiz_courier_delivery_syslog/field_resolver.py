# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Template substitution of %{field} and %{+date-pattern} references

# Standard library imports
import datetime
import json
import re

from typing import Any, List, Tuple

# Local/package imports
from ziggiz_courier_delivery_syslog.event import Event

_TEMPLATE_REFERENCE = re.compile(r"%\{([^}]+)\}")

# Sentinel for fields absent from an event
_MISSING = object()

_MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def tokenize_date_pattern(pattern: str) -> List[Tuple[str, str]]:
    """
    Split a Joda style date pattern into tokens.

    Returns a list of (kind, value) tuples where kind is "field" for a run of
    one repeated pattern letter and "literal" for text copied verbatim.
    Text between single quotes is literal; two single quotes produce one.
    """
    tokens: List[Tuple[str, str]] = []
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if char == "'":
            if i + 1 < length and pattern[i + 1] == "'":
                tokens.append(("literal", "'"))
                i += 2
                continue
            end = pattern.find("'", i + 1)
            if end == -1:
                end = length
            tokens.append(("literal", pattern[i + 1 : end]))
            i = end + 1
        elif char.isascii() and char.isalpha():
            j = i
            while j < length and pattern[j] == char:
                j += 1
            tokens.append(("field", pattern[i:j]))
            i = j
        else:
            tokens.append(("literal", char))
            i += 1
    return tokens


def _format_offset(dt: datetime.datetime, with_colon: bool) -> str:
    offset = dt.utcoffset() or datetime.timedelta(0)
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    if with_colon:
        return f"{sign}{hours:02d}:{minutes:02d}"
    return f"{sign}{hours:02d}{minutes:02d}"


def _format_field(dt: datetime.datetime, token: str) -> str:
    letter = token[0]
    width = len(token)

    if letter in ("Y", "y"):
        if width == 2:
            return f"{dt.year % 100:02d}"
        return str(dt.year).zfill(width)
    if letter == "M":
        if width >= 4:
            return dt.strftime("%B")
        if width == 3:
            return _MONTH_ABBREVIATIONS[dt.month - 1]
        return str(dt.month).zfill(width)
    if letter == "d":
        return str(dt.day).zfill(width)
    if letter == "H":
        return str(dt.hour).zfill(width)
    if letter == "m":
        return str(dt.minute).zfill(width)
    if letter == "s":
        return str(dt.second).zfill(width)
    if letter == "S":
        # Fraction of second truncated to the requested number of digits
        return f"{dt.microsecond:06d}{'0' * width}"[:width]
    if letter == "Z":
        return _format_offset(dt, with_colon=width >= 2)
    raise ValueError(f"Unsupported date pattern field: {token}")


def format_date(dt: datetime.datetime, pattern: str) -> str:
    """
    Render a datetime with a Joda style date pattern.

    Supported fields are year (Y/y), month (M, MMM for the abbreviated name),
    day (d), hour (H), minute (m), second (s), fraction (S) and zone offset
    (Z for +HHMM, ZZ for +HH:MM).

    Args:
        dt: A timezone aware datetime
        pattern: The date pattern

    Returns:
        The formatted date

    Raises:
        ValueError: If the pattern uses an unsupported field letter
    """
    parts = []
    for kind, value in tokenize_date_pattern(pattern):
        if kind == "literal":
            parts.append(value)
        else:
            parts.append(_format_field(dt, value))
    return "".join(parts)


def stringify(value: Any) -> str:
    """Convert a field value to the text substituted into a template."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


class FieldResolver:
    """
    Resolves templates against events.

    "%{name}" and "%{[a][b]}" are replaced with event field values,
    "%{+PATTERN}" with the event timestamp in UTC rendered with a date
    pattern, and "%{+%s}" with the epoch seconds of the event. References to
    missing fields and unsupported date patterns are left in place.
    """

    def __init__(self, tz: datetime.tzinfo = datetime.timezone.utc):
        """
        Initialize the resolver.

        Args:
            tz: Time zone the event timestamp is converted to before formatting
        """
        self.tz = tz

    def _resolve_reference(self, event: Event, reference: str, original: str) -> str:
        if reference.startswith("+"):
            pattern = reference[1:]
            if pattern == "%s":
                return str(int(event.timestamp.timestamp()))
            try:
                return format_date(event.timestamp.astimezone(self.tz), pattern)
            except ValueError:
                return original

        value = event.get(reference, _MISSING)
        if value is _MISSING:
            return original
        return stringify(value)

    def sprintf(self, event: Event, template: str) -> str:
        """
        Substitute every reference in a template.

        Args:
            event: The event supplying field values
            template: The template text

        Returns:
            The resolved text
        """
        if "%{" not in template:
            return template
        return _TEMPLATE_REFERENCE.sub(
            lambda match: self._resolve_reference(event, match.group(1), match.group(0)),
            template,
        )

    def format_timestamp(self, event: Event, pattern: str) -> str:
        """Render the event timestamp with a date pattern."""
        return self.sprintf(event, "%{+" + pattern + "}")

