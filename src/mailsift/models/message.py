"""Message data models for mailsift.

This module provides the data classes returned by the parser: decoded
headers, leaf MIME parts, attachments and the assembled message.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from mailsift.models.address import Address


@dataclass(frozen=True)
class Header:
    """A header with encoded words resolved to readable text."""

    key: str
    value: str


@dataclass
class Part:
    """A leaf MIME part. Multipart containers never appear here.

    Attributes:
        media_type: Lower-cased ``type/subtype`` (raw Content-Type value if
            it did not parse).
        charset: Declared charset, ``UTF-8`` when none was declared.
        data: The part body as it appeared in the input (transfer
            encoding still applied).
        headers: Canonical header name to ordered list of values.
    """

    media_type: str
    charset: str
    data: bytes
    headers: dict[str, list[str]] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        """Return the first value of a header, or None."""
        values = self.headers.get(name)
        return values[0] if values else None


@dataclass
class Attachment:
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"


@dataclass
class HeaderInfo:
    """Typed header fields resolved from the raw header list.

    Singular fields keep the last occurrence of their header; list fields
    accumulate across repeated headers.
    """

    full_headers: list[Header] = field(default_factory=list)
    opt_headers: list[Header] = field(default_factory=list)
    header_map: dict[str, list[str]] = field(default_factory=dict)

    message_id: str = ""
    id: str = ""
    date: datetime | None = None
    sender: Address | None = None
    from_addresses: list[Address] = field(default_factory=list)
    reply_to: list[Address] = field(default_factory=list)
    to: list[Address] = field(default_factory=list)
    cc: list[Address] = field(default_factory=list)
    bcc: list[Address] = field(default_factory=list)
    subject: str = ""
    content_type: str = ""
    comments: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    in_reply_to: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)


@dataclass
class Message(HeaderInfo):
    """A fully parsed message.

    ``text`` holds the decoded ``text/plain`` content when the message has
    such a part; otherwise it falls back to the raw bytes of the first part
    (or of the whole body), which are not guaranteed to be valid UTF-8 and
    are decoded with replacement characters.

    Attributes:
        raw_headers: The header block as it appeared in the input, without
            the trailing separator.
        body: The raw body bytes.
        defects: Non-fatal errors, in the order they were encountered.
    """

    raw_headers: bytes = b""
    body: bytes = b""
    text: str = ""
    html: str = ""
    attachments: list[Attachment] = field(default_factory=list)
    parts: list[Part] = field(default_factory=list)
    defects: list[Exception] = field(default_factory=list)

    @classmethod
    def from_header_info(cls, info: HeaderInfo, **kwargs: Any) -> "Message":
        values = {f.name: getattr(info, f.name) for f in fields(HeaderInfo)}
        values.update(kwargs)
        return cls(**values)

    def get_all(self, name: str) -> list[str]:
        """Return every decoded value of a header, case-insensitively."""
        wanted = name.lower()
        return [h.value for h in self.full_headers if h.key.lower() == wanted]

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first decoded value of a header."""
        values = self.get_all(name)
        return values[0] if values else default

    def to_dict(self) -> dict[str, Any]:
        def addresses(values: list[Address]) -> list[str]:
            return [str(a) for a in values]

        return {
            "message_id": self.message_id,
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "sender": str(self.sender) if self.sender else None,
            "from": addresses(self.from_addresses),
            "reply_to": addresses(self.reply_to),
            "to": addresses(self.to),
            "cc": addresses(self.cc),
            "bcc": addresses(self.bcc),
            "subject": self.subject,
            "content_type": self.content_type,
            "comments": list(self.comments),
            "keywords": list(self.keywords),
            "in_reply_to": list(self.in_reply_to),
            "references": list(self.references),
            "text": self.text,
            "html": self.html,
            "parts": [
                {"media_type": p.media_type, "charset": p.charset, "size": len(p.data)}
                for p in self.parts
            ],
            "attachments": [
                {"filename": a.filename, "content_type": a.content_type, "size": len(a.data)}
                for a in self.attachments
            ],
            "defects": [f"{type(d).__name__}: {d}" for d in self.defects],
        }
