# -*- coding: utf-8 -*-
# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# OpenTelemetry setup for Ziggiz Courier Delivery Syslog
#
# Tracing is opt-in: until configure_tracing() installs a provider, get_tracer()
# returns the no-op tracer of the OpenTelemetry API. The console exporter is meant
# for development; configure an OTLP exporter via environment variables in production.

# Standard library imports
from typing import Optional

# Third-party imports
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace import Tracer

SERVICE_NAME = "ziggiz-courier-delivery-syslog"


def configure_tracing(exporter: Optional[SpanExporter] = None) -> TracerProvider:
    """
    Install a global tracer provider for the service.

    Args:
        exporter: Span exporter to use, defaults to the console exporter

    Returns:
        The installed tracer provider
    """
    resource = Resource.create({"service.name": SERVICE_NAME})
    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(exporter or ConsoleSpanExporter())
    )
    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def get_tracer() -> Tracer:
    return trace.get_tracer(SERVICE_NAME)
