"""Message assembly.

Runs the tokenizer, the header resolver, the body walker and the content
decoder over one buffer and combines their output into a
:class:`Message`. Tokenizer errors are always fatal; header errors are
fatal unless ignored; body errors are recorded on ``Message.defects``
unless ``strict_body`` is set.
"""

import structlog

from mailsift.config import Settings, get_settings
from mailsift.core.logging import sanitize_for_log
from mailsift.exceptions import BodyError
from mailsift.models.message import Attachment, HeaderInfo, Message, Part
from mailsift.parser.content import ContentDecoder, as_text
from mailsift.parser.headers import HeaderResolver
from mailsift.parser.multipart import BodyWalker, canonical_header_key
from mailsift.parser.raw import parse_raw

logger = structlog.get_logger(__name__)


def extract_header_block(data: bytes, body: bytes) -> bytes:
    """The header block of ``data``, without the blank separator line."""
    return data[: len(data) - len(body)].rstrip(b"\r\n")


def _part_headers(info: HeaderInfo) -> dict[str, list[str]]:
    headers: dict[str, list[str]] = {}
    for key, values in info.header_map.items():
        headers.setdefault(canonical_header_key(key), []).extend(values)
    return headers


class MessageParser:
    """Parse raw message bytes into :class:`Message` objects.

    A parser holds only read-only settings, so one instance can serve
    any number of calls, including concurrent ones.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.walker = BodyWalker(
            max_depth=self.settings.max_depth,
            default_charset=self.settings.default_charset,
        )
        self.decoder = ContentDecoder()

    def parse(self, data: bytes, ignore_header_errors: bool | None = None) -> Message:
        """Parse one complete message.

        Args:
            data: The message bytes, CRLF or LF line endings.
            ignore_header_errors: Override the configured header error
                policy for this call.

        Raises:
            UnexpectedEndOfInputError: If there is no header/body separator.
            AddressParseError: On a malformed address header, unless header
                errors are ignored.
            BodyError: On an unparsable body, only with ``strict_body``.
        """
        if ignore_header_errors is None:
            ignore_header_errors = self.settings.ignore_header_errors

        raw = parse_raw(data)
        resolver = HeaderResolver(ignore_errors=ignore_header_errors)
        info = resolver.resolve(raw)
        defects: list[Exception] = list(resolver.defects)

        logger.debug(
            "headers_resolved",
            count=len(info.full_headers),
            subject=sanitize_for_log(info.subject, 50),
        )

        text = ""
        html = ""
        attachments: list[Attachment] = []
        parts: list[Part] = []
        content_type = info.content_type

        if not info.content_type:
            text = as_text(raw.body)
        else:
            try:
                parts = self.walker.parse_body(info.content_type, raw.body, _part_headers(info))
            except BodyError as e:
                if self.settings.strict_body:
                    raise
                logger.warning("body_parse_failed", error=str(e))
                defects.append(e)
                text = as_text(raw.body)
            else:
                decoded = self.decoder.decode(parts)
                defects.extend(decoded.defects)
                html = decoded.html
                attachments = decoded.attachments
                content_type = parts[0].media_type
                # the decoded text/plain part wins over the first part's raw bytes
                text = decoded.text if decoded.text is not None else as_text(parts[0].data)

        return Message.from_header_info(
            info,
            content_type=content_type,
            raw_headers=extract_header_block(data, raw.body),
            body=raw.body,
            text=text,
            html=html,
            attachments=attachments,
            parts=parts,
            defects=defects,
        )


def parse_message(data: bytes, ignore_header_errors: bool = False) -> Message:
    """Parse ``data`` with default settings."""
    settings = Settings(_env_file=None, ignore_header_errors=ignore_header_errors)
    return MessageParser(settings).parse(data)
