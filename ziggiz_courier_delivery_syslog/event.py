# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Event model consumed by the syslog output

# Standard library imports
import datetime
import re

from typing import Any, Dict, List, Optional, Union

TIMESTAMP_FIELD = "@timestamp"

# Matches "[a][b][c]" nested field references
_NESTED_REFERENCE = re.compile(r"\[([^\[\]]+)\]")


def parse_timestamp(
    value: Union[None, str, int, float, datetime.datetime],
) -> datetime.datetime:
    """
    Convert a timestamp value into a timezone aware datetime.

    Naive datetimes and strings without an offset are taken as UTC.

    Args:
        value: A datetime, an ISO-8601 string, epoch seconds, or None for now

    Returns:
        A timezone aware datetime

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None:
        return datetime.datetime.now(datetime.timezone.utc)
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        try:
            return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Invalid timestamp: {value!r}") from e
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


class Event:
    """
    A structured log event.

    Fields are held in a plain dictionary; the event timestamp is kept
    separately as a timezone aware datetime.
    """

    def __init__(
        self,
        data: Optional[Dict[str, Any]] = None,
        timestamp: Union[None, str, int, float, datetime.datetime] = None,
    ):
        """
        Initialize the event.

        Args:
            data: Event fields; an "@timestamp" entry is used when timestamp is not given
            timestamp: Event time, defaults to now
        """
        self.data: Dict[str, Any] = dict(data or {})
        if timestamp is None:
            timestamp = self.data.pop(TIMESTAMP_FIELD, None)
        else:
            self.data.pop(TIMESTAMP_FIELD, None)
        self.timestamp = parse_timestamp(timestamp)

    @staticmethod
    def _split_reference(reference: str) -> List[str]:
        parts = _NESTED_REFERENCE.findall(reference)
        if parts and "".join(f"[{p}]" for p in parts) == reference:
            return parts
        return [reference]

    def get(self, reference: str, default: Any = None) -> Any:
        """
        Look up a field by name or by a nested "[a][b]" reference.

        Args:
            reference: The field reference
            default: Returned when the field is missing

        Returns:
            The field value or default
        """
        if reference == TIMESTAMP_FIELD:
            return self.timestamp
        value: Any = self.data
        for part in self._split_reference(reference):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Return the event fields including the ISO-8601 timestamp."""
        result = dict(self.data)
        result[TIMESTAMP_FIELD] = self.timestamp.isoformat()
        return result

    def __repr__(self) -> str:
        return f"Event(timestamp={self.timestamp.isoformat()!r}, data={self.data!r})"
