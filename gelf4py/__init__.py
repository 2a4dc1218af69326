# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""GELF output for the standard :mod:`logging` framework."""

import logging

from gelf4py.config import (
    DEFAULT_PORT,
    FIELD_EXCEPTION,
    FIELD_LOGGER_NAME,
    FIELD_THREAD_NAME,
    FIELD_TIMESTAMP_MS,
    GelfTargetConfig,
)
from gelf4py.connection import GelfConnection, resolve_host
from gelf4py.errors import GelfConnectionError, GelfError, MessageTooLargeError, UnresolvedHostError
from gelf4py.handler import GelfHandler
from gelf4py.message import GelfMessage, Level
from gelf4py.parsing import parse_field_spec, parse_json_object

__all__ = [
    # Configuration
    "GelfTargetConfig",
    "DEFAULT_PORT",
    "FIELD_EXCEPTION",
    "FIELD_LOGGER_NAME",
    "FIELD_THREAD_NAME",
    "FIELD_TIMESTAMP_MS",
    # Parsing
    "parse_field_spec",
    "parse_json_object",
    # Transport
    "GelfConnection",
    "resolve_host",
    # Messages
    "GelfMessage",
    "Level",
    # Logging integration
    "GelfHandler",
    # Errors
    "GelfError",
    "GelfConnectionError",
    "UnresolvedHostError",
    "MessageTooLargeError",
]

# Library loggers stay silent unless the application configures logging.
logging.getLogger("gelf4py").addHandler(logging.NullHandler())
