"""Raw header/body split produced by the tokenizer."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawHeader:
    """One header line with folding removed; no decoding applied."""

    key: bytes
    value: bytes


@dataclass(frozen=True)
class RawMessage:
    """Ordered raw headers plus the undecoded body bytes.

    Attributes:
        headers: Headers in input order. Repeated keys (``Received``)
            are separate entries.
        body: Everything after the header/body separator.
    """

    headers: tuple[RawHeader, ...] = field(default_factory=tuple)
    body: bytes = b""
