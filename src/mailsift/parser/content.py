"""Content decoding for leaf parts.

Turns ``text/plain`` and ``text/html`` parts into strings and parts with
an ``attachment`` disposition into :class:`Attachment` objects. Nothing
in here raises: every failure falls back to the undecoded bytes and is
recorded in ``defects``.
"""

import re
from dataclasses import dataclass, field

import structlog

from mailsift.core.logging import sanitize_for_log
from mailsift.decoding.charset import transcode
from mailsift.decoding.media_type import parse_media_type
from mailsift.decoding.transfer import decode_transfer_encoding
from mailsift.decoding.words import decode_encoded_words
from mailsift.exceptions import (
    DecodeError,
    EncodedWordError,
    InvalidBase64Error,
    InvalidMediaTypeError,
    MissingFilenameError,
    UnsupportedCharsetError,
)
from mailsift.models.message import Attachment, Part

logger = structlog.get_logger(__name__)

_QUOTED_NAME_RE = re.compile(r'name="(.*?)"', re.IGNORECASE | re.DOTALL)
_BARE_FILENAME_RE = re.compile(r"filename\s*=\s*([^\";\s]+)", re.IGNORECASE)


def as_text(data: bytes) -> str:
    """Undecoded bytes as a string, for fallback values."""
    return data.decode("utf-8", errors="replace")


@dataclass
class DecodedContent:
    """Output of :meth:`ContentDecoder.decode`.

    ``text`` is None when no ``text/plain`` part was found.
    """

    text: str | None = None
    html: str = ""
    attachments: list[Attachment] = field(default_factory=list)
    defects: list[DecodeError] = field(default_factory=list)


class ContentDecoder:
    """Decode text bodies and extract attachments from leaf parts."""

    def decode(self, parts: list[Part]) -> DecodedContent:
        result = DecodedContent()

        for part in parts:
            if "text/plain" in part.media_type:
                result.text = self.decode_text(part, result.defects)
            elif "text/html" in part.media_type:
                result.html = self.decode_text(part, result.defects)
            else:
                disposition = part.header("Content-Disposition")
                if disposition and "attachment" in disposition.lower():
                    attachment = self.extract_attachment(part, disposition, result.defects)
                    if attachment is not None:
                        result.attachments.append(attachment)

        return result

    def decode_text(self, part: Part, defects: list[DecodeError]) -> str:
        """Reverse transfer encoding, then transcode to text.

        On an unknown charset the undecoded bytes are returned.
        """
        data = part.data
        try:
            data = decode_transfer_encoding(part.header("Content-Transfer-Encoding"), data)
        except InvalidBase64Error as e:
            defects.append(e)

        try:
            return transcode(part.charset, data)
        except UnsupportedCharsetError as e:
            logger.warning("charset_transcode_failed", charset=sanitize_for_log(part.charset))
            defects.append(e)
            return as_text(part.data)

    def extract_attachment(
        self, part: Part, disposition: str, defects: list[DecodeError]
    ) -> Attachment | None:
        """Build an attachment, or None when no file name is declared."""
        filename = self._filename(part, disposition)
        if filename is None:
            defects.append(MissingFilenameError())
            return None

        try:
            filename = decode_encoded_words(filename)
        except EncodedWordError as e:
            defects.append(
                EncodedWordError(f"failed decode filename of attachment [msg: {e}]")
            )

        data = part.data
        try:
            data = decode_transfer_encoding(part.header("Content-Transfer-Encoding"), data)
        except InvalidBase64Error as e:
            logger.warning("attachment_base64_failed", filename=sanitize_for_log(filename))
            defects.append(e)

        return Attachment(filename=filename, data=data, content_type=part.media_type)

    @staticmethod
    def _filename(part: Part, disposition: str) -> str | None:
        match = _QUOTED_NAME_RE.search(disposition) or _BARE_FILENAME_RE.search(disposition)
        if match:
            return match.group(1)

        content_type = part.header("Content-Type")
        if content_type:
            try:
                _, params = parse_media_type(content_type)
            except InvalidMediaTypeError:
                return None
            return params.get("name") or None
        return None
