"""RFC2047 encoded-word decoding for header values."""

import base64
import binascii
from email.errors import MessageError
from email.header import decode_header, ecre, make_header

from mailsift.exceptions import EncodedWordError


def _check_base64_words(value: str) -> None:
    # decode_header drops non-alphabet characters from B words silently
    for match in ecre.finditer(value):
        if match.group("encoding").lower() != "b":
            continue
        encoded = match.group("encoded")
        try:
            base64.b64decode(encoded + "=" * (-len(encoded) % 4), validate=True)
        except binascii.Error as e:
            raise EncodedWordError(
                f"cannot decode MIME-word-encoded header {value!r}: "
                f"invalid base64 word {encoded!r}"
            ) from e


def decode_encoded_words(value: str) -> str:
    """Resolve ``=?charset?B|Q?...?=`` words in a header value.

    Values without encoded words are returned unchanged.

    Raises:
        EncodedWordError: If a word is malformed, holds invalid base64 or
            names an unknown charset.
    """
    if "=?" not in value:
        return value
    _check_base64_words(value)
    try:
        return str(make_header(decode_header(value)))
    except (MessageError, LookupError, UnicodeError) as e:
        raise EncodedWordError(f"cannot decode MIME-word-encoded header {value!r}: {e}") from e
