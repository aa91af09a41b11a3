"""Raw header/body tokenizer.

Splits a message buffer into ordered (key, value) header pairs and the
body bytes. Both CRLF and bare LF line endings are accepted, possibly
mixed within one message. Folded header lines are unwrapped by dropping
the line-break bytes; the continuation's leading whitespace is kept.
"""

from enum import Enum, auto

from mailsift.exceptions import UnexpectedEndOfInputError
from mailsift.models.raw import RawHeader, RawMessage

CR = 0x0D
LF = 0x0A
_WSP = (0x20, 0x09)


class _State(Enum):
    READY = auto()
    IN_KEY = auto()
    HEADER_VALUE_LEADING_WS = auto()
    IN_VALUE = auto()


def _unfold(value: bytes) -> bytes:
    return value.replace(b"\r\n", b"").replace(b"\n", b"")


def parse_raw(data: bytes) -> RawMessage:
    """Tokenize ``data`` into raw headers and body.

    Raises:
        UnexpectedEndOfInputError: If no header/body separator is found,
            even when the buffer holds no headers at all.
    """
    state = _State.READY
    headers: list[RawHeader] = []
    key_start = key_end = value_start = 0
    size = len(data)
    i = 0

    while i < size:
        b = data[i]

        if state is _State.READY:
            if b == LF:
                return RawMessage(tuple(headers), data[i + 1 :])
            if b == CR and i + 1 < size and data[i + 1] == LF:
                return RawMessage(tuple(headers), data[i + 2 :])
            key_start = i
            state = _State.IN_KEY

        elif state is _State.IN_KEY:
            if b == 0x3A:  # ':'
                key_end = i
                state = _State.HEADER_VALUE_LEADING_WS

        elif state is _State.HEADER_VALUE_LEADING_WS:
            if b not in _WSP:
                value_start = i
                state = _State.IN_VALUE
                # an empty value ends right here, let IN_VALUE see the newline
                if b in (CR, LF):
                    continue

        elif state is _State.IN_VALUE:
            # A line break ends the value unless the next line is a
            # continuation (starts with whitespace).
            if b == CR and i + 2 < size and data[i + 1] == LF and data[i + 2] not in _WSP:
                headers.append(RawHeader(data[key_start:key_end], _unfold(data[value_start:i])))
                state = _State.READY
                i += 1
            elif b == LF and i + 1 < size and data[i + 1] not in _WSP:
                headers.append(RawHeader(data[key_start:key_end], _unfold(data[value_start:i])))
                state = _State.READY

        i += 1

    raise UnexpectedEndOfInputError()
