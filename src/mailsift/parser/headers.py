"""Header semantic resolver.

Walks the raw headers in order, decodes encoded words, and routes each
header to a typed field of :class:`HeaderInfo`. Headers without a typed
field land in ``opt_headers``.
"""

import base64
import hashlib
from collections.abc import Callable

import structlog

from mailsift.core.logging import sanitize_for_log
from mailsift.decoding.words import decode_encoded_words
from mailsift.exceptions import DateParseError, EncodedWordError, HeaderError
from mailsift.fields.addresses import parse_address_list, parse_single_address
from mailsift.fields.dates import parse_date
from mailsift.models.message import Header, HeaderInfo
from mailsift.models.raw import RawMessage

logger = structlog.get_logger(__name__)

_ADDRESS_LISTS = {
    "from": "from_addresses",
    "reply-to": "reply_to",
    "to": "to",
    "cc": "cc",
    "bcc": "bcc",
}


def make_id(message_id: bytes) -> str:
    """Short stable key for a Message-ID: URL-safe base64 of its SHA-1."""
    digest = hashlib.sha1(message_id).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii")[:20]


def _split_ids(value: str) -> list[str]:
    return [token.strip("<> ") for token in value.split()]


class HeaderResolver:
    """Resolve raw headers into typed fields.

    Args:
        ignore_errors: When True, address grammar errors are recorded in
            ``defects`` and the offending header is skipped. When False
            they are raised.
    """

    def __init__(self, ignore_errors: bool = False):
        self.ignore_errors = ignore_errors
        self.defects: list[Exception] = []

    def resolve(self, raw: RawMessage) -> HeaderInfo:
        """Build a :class:`HeaderInfo` from ``raw``.

        Raises:
            AddressParseError: On a malformed From/Sender/Reply-To/To/Cc/Bcc
                value, unless ``ignore_errors`` is set.
        """
        info = HeaderInfo()

        for rh in raw.headers:
            key = rh.key.decode("utf-8", errors="replace")
            value = rh.value.decode("utf-8", errors="replace")
            decoded = self._decode(key, value)

            header = Header(key, decoded)
            info.full_headers.append(header)
            info.header_map.setdefault(key, []).append(value)

            try:
                handled = self._dispatch(info, key.lower(), value, decoded)
            except HeaderError as e:
                if not self.ignore_errors:
                    raise
                logger.warning(
                    "header_ignored", header=sanitize_for_log(key), error=str(e)
                )
                self.defects.append(e)
                continue

            if not handled:
                info.opt_headers.append(header)

        if info.sender is None and info.from_addresses:
            info.sender = info.from_addresses[0]

        return info

    def _decode(self, key: str, value: str) -> str:
        try:
            return decode_encoded_words(value)
        except EncodedWordError as e:
            logger.debug("encoded_word_fallback", header=sanitize_for_log(key))
            self.defects.append(e)
            return value

    def _dispatch(self, info: HeaderInfo, key: str, value: str, decoded: str) -> bool:
        """Assign one header to its typed field. Returns False if it has none."""
        if key in _ADDRESS_LISTS:
            field = _ADDRESS_LISTS[key]
            getattr(info, field).extend(parse_address_list(value, header=key))
            return True

        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler(self, info, value, decoded)
        return True

    def _on_content_type(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.content_type = value

    def _on_message_id(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.message_id = value.strip().strip("<>").strip()
        info.id = make_id(info.message_id.encode("utf-8"))

    def _on_in_reply_to(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.in_reply_to.extend(_split_ids(value))

    def _on_references(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.references.extend(_split_ids(value))

    def _on_date(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.date = parse_date(value)
        if info.date is None:
            self.defects.append(DateParseError(f"cannot parse date {value!r}", header="Date"))

    def _on_sender(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.sender = parse_single_address(value, header="sender")

    def _on_subject(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.subject = decoded

    def _on_comments(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.comments.append(value)

    def _on_keywords(self, info: HeaderInfo, value: str, decoded: str) -> None:
        info.keywords.extend(k.strip() for k in value.split(","))

    _handlers: dict[str, Callable[["HeaderResolver", HeaderInfo, str, str], None]] = {
        "content-type": _on_content_type,
        "message-id": _on_message_id,
        "in-reply-to": _on_in_reply_to,
        "references": _on_references,
        "date": _on_date,
        "sender": _on_sender,
        "subject": _on_subject,
        "comments": _on_comments,
        "keywords": _on_keywords,
    }
