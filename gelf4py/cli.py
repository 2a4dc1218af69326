# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Command-line interface for gelf4py.

Provides ``show`` and ``send`` commands for inspecting a target
configuration and pushing a test message through it.  The base settings
come from ``GELF_*`` environment variables; options override them.

Usage::

    gelf4py show
    gelf4py --host graylog.internal --facility billing --field thread=threadName show
    gelf4py --host graylog.internal --data "{'env':'prod'}" send "hello from gelf4py" --level warning

"""

from __future__ import annotations

import json
import logging
import threading
import time
from enum import StrEnum
from typing import Annotated

import typer

from gelf4py.config import FIELD_LOGGER_NAME, FIELD_THREAD_NAME, FIELD_TIMESTAMP_MS, GelfTargetConfig
from gelf4py.errors import GelfError
from gelf4py.message import GelfMessage, Level

# ---------------------------------------------------------------------------
# Level option enum
# ---------------------------------------------------------------------------


class LevelName(StrEnum):
    """Severity accepted by ``send --level``."""

    debug = "debug"
    info = "info"
    notice = "notice"
    warning = "warning"
    error = "error"
    critical = "critical"
    alert = "alert"
    emergency = "emergency"


app = typer.Typer(
    name="gelf4py",
    help="Inspect GELF target settings and send test messages.",
    add_completion=False,
    no_args_is_help=True,
)

_CLI_LOGGER = "gelf4py.cli"


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def _main(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option("--host", "-H", help="Collector host")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Collector UDP port")] = None,
    facility: Annotated[str | None, typer.Option("--facility", "-f", help="GELF facility")] = None,
    origin_host: Annotated[str | None, typer.Option("--origin-host", help="Value of the GELF host field")] = None,
    fields: Annotated[str | None, typer.Option("--fields", help="Additional fields as a JSON object")] = None,
    field: Annotated[list[str] | None, typer.Option("--field", help="Additional field as key=value")] = None,
    data: Annotated[str | None, typer.Option("--data", help="Additional data as a JSON object")] = None,
    datum: Annotated[list[str] | None, typer.Option("--datum", help="Additional data as key=value")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log configuration changes to stderr")] = False,
) -> None:
    """Build the target configuration shared by all commands."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    try:
        config = GelfTargetConfig.from_env()
    except ValueError as e:
        raise typer.BadParameter(f"Invalid GELF_* environment: {e}") from None
    if host is not None:
        config.host = host
    if port is not None:
        config.port = port
    if facility is not None:
        config.facility = facility
    if origin_host is not None:
        config.origin_host = origin_host
    try:
        if fields is not None:
            config.set_additional_fields(fields)
        for spec in field or []:
            config.add_additional_field(spec)
        if data is not None:
            config.set_additional_data(data)
        for spec in datum or []:
            config.add_additional_data(spec)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    ctx.obj = config


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_field(key: str, timestamp: float) -> object:
    """Resolve a context key for a message sent outside of ``logging``."""
    if key == FIELD_THREAD_NAME:
        return threading.current_thread().name
    if key == FIELD_TIMESTAMP_MS:
        return int(timestamp * 1000)
    if key == FIELD_LOGGER_NAME:
        return _CLI_LOGGER
    return None


def _build_message(config: GelfTargetConfig, text: str, level: Level) -> GelfMessage:
    """Build a message enriched the same way ``GelfHandler`` would."""
    now = time.time()
    fields: dict[str, object] = dict(config.additional_data)
    for name, key in config.additional_fields.items():
        value = _resolve_field(key, now)
        if value is not None:
            fields[name] = value
    lines = text.splitlines()
    return GelfMessage(
        lines[0] if lines else "",
        host=config.origin_host,
        full_message=text if len(lines) > 1 else None,
        timestamp=now,
        level=level,
        facility=config.facility,
        additional_fields=fields,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as JSON."""
    config: GelfTargetConfig = ctx.obj
    typer.echo(json.dumps(config.to_dict(), indent=2, default=str))


@app.command()
def send(
    ctx: typer.Context,
    message: Annotated[str, typer.Argument(help="Message text")],
    level: Annotated[LevelName, typer.Option("--level", "-l", help="Severity")] = LevelName.info,
) -> None:
    """Send one message to the configured collector."""
    config: GelfTargetConfig = ctx.obj
    gelf_message = _build_message(config, message, Level[level.value.upper()])
    try:
        with config.create_connection() as connection:
            connection.send(gelf_message)
    except (GelfError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Sent to {config.host}:{config.port}")
