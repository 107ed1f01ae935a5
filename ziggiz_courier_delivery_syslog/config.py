# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Configuration module for loading and parsing configuration files

# Standard library imports
import logging

from pathlib import Path
from typing import Any, List, Optional, Union

# Third-party imports
import yaml

from pydantic import BaseModel, Field, field_validator, model_validator

# Local/package imports
from ziggiz_courier_delivery_syslog.errors import ConfigurationError


class LoggerConfig(BaseModel):
    """
    Configuration for individual loggers.

    Attributes:
        name (str): Logger name.
        level (str): Logging level (default: "INFO").
        propagate (bool): Whether to propagate logs to parent (default: True).
    """

    name: str
    level: str = "INFO"
    propagate: bool = True


class Config(BaseModel):
    """
    Main configuration class for the Ziggiz Courier Delivery Syslog output.

    This class defines the destination, transport, TLS trust settings, the
    templates used to build each syslog message, and logging options.
    Template fields may contain %{field} and %{+date-pattern} references.
    """

    # Destination
    host: str
    port: int
    reconnect_interval: float = 1.0  # Seconds to wait before reconnecting
    protocol: str = "udp"  # "tcp", "udp", or "ssl-tcp"
    connect_timeout: Optional[float] = None  # Socket timeout, None blocks forever

    # TLS configuration (protocol "ssl-tcp")
    ssl_verify: bool = False  # Verify the server certificate chain
    ssl_cacert: Optional[str] = None  # CA file, chain file or CA directory
    ssl_crl: Optional[str] = None  # CRL file or bundle of CRLs
    ssl_crl_check_all: bool = False  # Check CRLs for the whole chain, not only the leaf

    # Message templates
    use_labels: bool = True  # Use facility/severity labels instead of priority
    priority: str = "%{syslog_pri}"
    facility: str = "user-level"
    severity: str = "notice"
    sourcehost: str = "%{host}"
    appname: str = "LOGSTASH"
    procid: str = "-"
    message: str = "%{message}"
    msgid: str = "-"
    rfc: str = "rfc3164"  # "rfc3164", "rfc5424", or "rfc6587"
    structured_data: str = ""

    # Tracing
    enable_tracing: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    loggers: List[LoggerConfig] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is a valid Python logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        """Validate that the protocol is TCP, UDP, or SSL over TCP."""
        valid_protocols = ["tcp", "udp", "ssl-tcp"]
        v = v.lower()
        if v not in valid_protocols:
            raise ValueError(f"Invalid protocol: {v}. Must be one of {valid_protocols}")
        return v

    @field_validator("rfc")
    @classmethod
    def validate_rfc(cls, v: str) -> str:
        """Validate that the message format is a supported RFC."""
        valid_rfcs = ["rfc3164", "rfc5424", "rfc6587"]
        v = v.lower()
        if v not in valid_rfcs:
            raise ValueError(f"Invalid rfc: {v}. Must be one of {valid_rfcs}")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that the port is a valid TCP/UDP port number."""
        if not 0 < v < 65536:
            raise ValueError(f"Invalid port: {v}. Must be between 1 and 65535")
        return v

    @field_validator("reconnect_interval")
    @classmethod
    def validate_reconnect_interval(cls, v: float) -> float:
        """Validate that the reconnect interval is not negative."""
        if v < 0:
            raise ValueError(f"Invalid reconnect interval: {v}. Must not be negative")
        return v

    @field_validator("connect_timeout")
    @classmethod
    def validate_connect_timeout(cls, v: Optional[float]) -> Optional[float]:
        """Validate that the connect timeout, when set, is positive."""
        if v is not None and v <= 0:
            raise ValueError(f"Invalid connect timeout: {v}. Must be positive")
        return v

    @model_validator(mode="after")
    def validate_structured_data(self) -> "Config":
        """Validate that structured data is only used with RFC5424 based formats."""
        if self.rfc == "rfc3164" and self.structured_data:
            raise ConfigurationError("Structured data is not supported for RFC3164")
        return self


def load_config(
    config_path: Optional[Union[str, Path]] = None, **overrides: Any
) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the configuration file. If None, will look for config.yaml
                   in the current directory and default directories.
        **overrides: Values that take precedence over the file contents

    Returns:
        A Config object containing the loaded configuration.

    Raises:
        FileNotFoundError: If the configuration file cannot be found.
        yaml.YAMLError: If the configuration file contains invalid YAML.
        pydantic.ValidationError: If the resulting configuration is invalid.
    """
    # Default search paths
    search_paths = [
        Path.cwd() / "config.yaml",
        Path.cwd() / "config.yml",
        Path("/etc/ziggiz-courier-delivery-syslog/config.yaml"),
        Path("/etc/ziggiz-courier-delivery-syslog/config.yml"),
    ]

    # If config path is provided, try that first
    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
    else:
        # Try default paths
        for path in search_paths:
            if path.exists():
                config_file = path
                break
        else:
            logging.warning("No configuration file found, using command line settings")
            return Config(**overrides)

    # Load YAML configuration
    with open(config_file, "r") as f:
        try:
            config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logging.error("Error parsing configuration file", extra={"error": e})
            raise

    try:
        return Config(**{**config_data, **overrides})
    except Exception as e:
        logging.error("Error loading configuration", extra={"error": e})
        raise


class SafeExtraFormatter(logging.Formatter):
    """
    Custom formatter that substitutes missing extra fields with a blank string.
    """

    def format(self, record: logging.LogRecord) -> str:
        # Add any expected extra fields with blank default if missing
        for field in ("host", "port", "error"):
            if not hasattr(record, field):
                setattr(record, field, "")
        return super().format(record)


def configure_logging(config: "Config") -> None:
    """
    Configure logging based on the provided configuration.

    Args:
        config: The loaded configuration object.
    """
    # Reset logging configuration
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    # Configure root logger
    level = getattr(logging, config.log_level, logging.INFO)
    formatter = SafeExtraFormatter(config.log_format, datefmt=config.log_date_format)

    # Add console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logging.root.setLevel(level)
    logging.root.addHandler(console_handler)

    # Configure additional loggers from config
    for logger_config in config.loggers:
        logger = logging.getLogger(logger_config.name)
        logger.setLevel(getattr(logging, logger_config.level, logging.INFO))
        logger.propagate = logger_config.propagate
