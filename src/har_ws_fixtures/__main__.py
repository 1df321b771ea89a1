"""Main CLI entry point for har-ws-fixtures.

This module provides a command-line interface using Typer. The `generate`
command runs the whole pipeline:
1.  Resolve options against configuration (`har_ws_fixtures.config`).
2.  Read the capture and select the WebSocket channel (`har_ws_fixtures.har_reader`).
3.  Pair requests with responses and assemble the fixture table
    (`har_ws_fixtures.fixture`).
4.  Render the table as indented JSON to stdout or store it atomically.

The `fingerprint` command prints the canonical form and fingerprint of a
single JSON body, which helps when looking up a request in an existing
fixture.
"""
from __future__ import annotations

import logging
from typing import Optional

import typer

from .config import ExtractionConfig, get_settings
from .fixture import build_fixture, render_fixture, store_fixture
from .har_reader import CaptureFormatError, ChannelNotFoundError, load_channel_messages
from .mapping.canonical import serialize
from .mapping.decoding import decode_json
from .mapping.fingerprint import fingerprint as compute_fingerprint
from .mapping.pairing import MessageDecodeError

app = typer.Typer(help="Build WebSocket mock fixtures from HAR captures")


@app.callback()
def main() -> None:  # pragma: no cover - simple callback
    """har-ws-fixtures CLI.

    Use a subcommand like 'generate' to build a fixture table.
    """
    pass


@app.command(help="Extract one WebSocket channel from a HAR capture and emit its fixture table.")
def generate(
    input_path: Optional[str] = typer.Option(
        None, "--input", "-i", help="Path to the HAR capture (defaults to HAR_FILE)"
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        help="WebSocket request URL of the channel (defaults to WS_URL, else the first WebSocket entry)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the fixture to this file instead of stdout (defaults to FIXTURE_OUTPUT_FILE)",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--lenient",
        help=(
            "Abort on frame bodies that are not valid JSON, or skip them. "
            "If not specified, uses STRICT_DECODE from config/env."
        ),
    ),
    indent: Optional[int] = typer.Option(
        None, min=0, help="JSON indentation width (defaults to FIXTURE_INDENT)"
    ),
    debug: bool = typer.Option(
        False, "--debug/--no-debug", help="Log every pairing decision"
    ),
) -> None:
    """Run the capture -> pairing -> fixture pipeline once."""
    settings = get_settings()
    logging.basicConfig(level=logging.DEBUG if debug else settings.LOG_LEVEL)
    logger = logging.getLogger(__name__)

    source_path = input_path or settings.HAR_FILE
    if not source_path:
        typer.echo("Please provide the path to a HAR capture (--input or HAR_FILE)", err=True)
        raise typer.Exit(code=2)

    config = ExtractionConfig(source_path=source_path, filter_url=url or settings.WS_URL)
    effective_strict = settings.STRICT_DECODE if strict is None else strict
    effective_indent = settings.FIXTURE_INDENT if indent is None else indent
    effective_output = output or settings.FIXTURE_OUTPUT_FILE

    try:
        messages = load_channel_messages(config)
        table = build_fixture(messages, strict=effective_strict)
    except (CaptureFormatError, ChannelNotFoundError, MessageDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if effective_output:
        store_fixture(effective_output, table, indent=effective_indent)
        logger.info("Stored %d fixture entr(ies) to %s", len(table), effective_output)
        typer.echo(f"Wrote {len(table)} fixture entr(ies) to {effective_output}")
    else:
        typer.echo(render_fixture(table, indent=effective_indent))


@app.command(help="Print the fingerprint and canonical form of one JSON message body.")
def fingerprint(
    body: str = typer.Argument(..., help="JSON text of the request body"),
) -> None:
    try:
        value = decode_json(body)
    except ValueError as e:
        typer.echo(f"Error: body is not valid JSON: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{compute_fingerprint(value)}  {serialize(value)}")


if __name__ == "__main__":  # pragma: no cover
    app()
