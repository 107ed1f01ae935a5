# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Main entry point: ship newline-delimited JSON events to a syslog server

# Standard library imports
import argparse
import json
import logging
import sys

from typing import Any, Dict, Iterable, Optional, TextIO

# Local/package imports
from ziggiz_courier_delivery_syslog.config import Config, configure_logging, load_config
from ziggiz_courier_delivery_syslog.event import Event
from ziggiz_courier_delivery_syslog.output import SyslogOutput
from ziggiz_courier_delivery_syslog.telemetry import configure_tracing


def setup_logging(log_level: str = "INFO", config: Optional[Config] = None) -> None:
    """
    Configure logging with appropriate formatters and handlers.

    Args:
        log_level: The logging level to set (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        config: Optional configuration object to use for logging setup
    """
    if config:
        configure_logging(config)
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Log to stderr so stdout stays free for piping
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def read_events(stream: TextIO) -> Iterable[Event]:
    """
    Yield an Event for every JSON object line of a stream.

    Blank lines are skipped; lines that are not JSON objects are logged and skipped.
    """
    logger = logging.getLogger("ziggiz_courier_delivery_syslog.main")
    for line_number, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
            if not isinstance(data, dict):
                raise ValueError("event must be a JSON object")
            yield Event(data)
        except ValueError as e:
            logger.warning(
                "Skipping invalid event",
                extra={"line_number": line_number, "error": str(e)},
            )


def run_output(config: Config, stream: TextIO) -> int:
    """
    Send every event read from a stream.

    Args:
        config: The output configuration
        stream: Text stream of newline-delimited JSON events

    Returns:
        The number of events written
    """
    logger = logging.getLogger("ziggiz_courier_delivery_syslog.main")
    output = SyslogOutput(config)
    sent = 0
    try:
        for event in read_events(stream):
            if output.receive(event):
                sent += 1
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        output.close()
    logger.info(f"Sent {sent} events")
    return sent


def _collect_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in ("log_level", "host", "port", "protocol", "rfc"):
        value = getattr(args, name)
        if value:
            overrides[name] = value
    return overrides


def main() -> None:
    """
    Main entry point for the syslog output.
    Parses command-line arguments, sets up logging, and ships the events.
    """
    parser = argparse.ArgumentParser(description="Ziggiz Courier Syslog Delivery")
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (overrides config file)",
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Syslog server address (overrides config file)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Syslog server port (overrides config file)",
    )
    parser.add_argument(
        "--protocol",
        type=str,
        choices=["tcp", "udp", "ssl-tcp"],
        help="Transport protocol (tcp, udp, or ssl-tcp, overrides config file)",
    )
    parser.add_argument(
        "--rfc",
        type=str,
        choices=["rfc3164", "rfc5424", "rfc6587"],
        help="Syslog message format (overrides config file)",
    )
    parser.add_argument(
        "--input",
        type=str,
        help="File of newline-delimited JSON events (default: stdin)",
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config, **_collect_overrides(args))

        setup_logging(config=config)
        logger = logging.getLogger("ziggiz_courier_delivery_syslog.main")

        if args.config:
            logger.info(f"Loaded configuration from {args.config}")
        else:
            logger.info("Using default or automatically detected configuration")

        if config.enable_tracing:
            configure_tracing()

        if args.input:
            with open(args.input, "r", encoding="utf-8") as stream:
                run_output(config, stream)
        else:
            run_output(config, sys.stdin)
    except KeyboardInterrupt:
        logger = logging.getLogger("ziggiz_courier_delivery_syslog.main")
        logger.info("Shutdown requested by user")
    except Exception as e:
        # Setup basic logging if we couldn't load the configuration
        if not logging.root.handlers:
            setup_logging("ERROR")
        logger = logging.getLogger("ziggiz_courier_delivery_syslog.main")
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
