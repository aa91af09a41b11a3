"""Command-line interface for mailsift."""

import json
import sys
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from mailsift.config import Settings, get_settings
from mailsift.core import configure_logging
from mailsift.exceptions import ConfigurationError, MailsiftError
from mailsift.models import Message
from mailsift.parser import MessageParser

logger = structlog.get_logger(__name__)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def _settings_or_exit() -> Settings:
    try:
        return _load_settings()
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)


def _parse_file(path: Path, ignore_header_errors: bool | None = None) -> Message:
    parser = MessageParser(_settings_or_exit())
    try:
        return parser.parse(path.read_bytes(), ignore_header_errors=ignore_header_errors)
    except MailsiftError as e:
        logger.error("parse_failed", path=str(path), error=e.message)
        click.echo(f"Cannot parse {path}: {e.message}", err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--debug/--no-debug", default=None, help="Enable debug logging [default: MAILSIFT_DEBUG]"
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="JSON log format [default: MAILSIFT_LOG_FORMAT]",
)
@click.pass_context
def main(ctx: click.Context, debug: bool | None, json_logs: bool | None) -> None:
    """mailsift - parse raw .eml messages."""
    settings = _settings_or_exit()
    if debug is None:
        debug = settings.debug
    if json_logs is None:
        json_logs = settings.log_format == "json"

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["json_logs"] = json_logs
    configure_logging(json_format=json_logs, debug=debug)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--ignore-header-errors", is_flag=True, help="Record bad headers")
@click.option("--json", "as_json", is_flag=True, help="Print the message as JSON")
def show(path: Path, ignore_header_errors: bool, as_json: bool) -> None:
    """Summarize a message: headers, body, parts and defects."""
    message = _parse_file(path, ignore_header_errors or None)

    if as_json:
        click.echo(json.dumps(message.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"Message-ID:   {message.message_id}")
    click.echo(f"Date:         {message.date.isoformat() if message.date else '-'}")
    click.echo(f"From:         {', '.join(str(a) for a in message.from_addresses)}")
    click.echo(f"Sender:       {message.sender or '-'}")
    click.echo(f"To:           {', '.join(str(a) for a in message.to)}")
    if message.cc:
        click.echo(f"Cc:           {', '.join(str(a) for a in message.cc)}")
    click.echo(f"Subject:      {message.subject}")
    click.echo(f"Content-Type: {message.content_type or '-'}")
    click.echo(f"Text:         {len(message.text)} chars")
    click.echo(f"Html:         {len(message.html)} chars")

    if message.parts:
        click.echo("\nParts:")
        for index, part in enumerate(message.parts):
            click.echo(f"   [{index}] {part.media_type} ({part.charset}, {len(part.data)} bytes)")

    if message.attachments:
        click.echo("\nAttachments:")
        for attachment in message.attachments:
            click.echo(f"   {attachment.filename} ({len(attachment.data)} bytes)")

    if message.defects:
        click.echo("\nDefects:")
        for defect in message.defects:
            click.echo(f"   ⚠️  {type(defect).__name__}: {defect}")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def headers(path: Path) -> None:
    """Print every header in order, with encoded words decoded."""
    message = _parse_file(path, ignore_header_errors=True)
    for header in message.full_headers:
        click.echo(f"{header.key}: {header.value}")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--extract",
    "target",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write attachments into this directory",
)
def attachments(path: Path, target: Path | None) -> None:
    """List a message's attachments, or extract them."""
    message = _parse_file(path)

    if not message.attachments:
        click.echo("No attachments.")
        return

    if target is None:
        for attachment in message.attachments:
            click.echo(
                f"{attachment.filename}\t{attachment.content_type}\t{len(attachment.data)}"
            )
        return

    target.mkdir(parents=True, exist_ok=True)
    for attachment in message.attachments:
        # never let a declared file name escape the target directory
        name = Path(attachment.filename).name or "attachment.bin"
        dest = target / name
        dest.write_bytes(attachment.data)
        logger.info("attachment_extracted", filename=name, size=len(attachment.data))
        click.echo(f"Wrote {dest}")


if __name__ == "__main__":
    main()
