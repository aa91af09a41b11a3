"""Content-Transfer-Encoding decoding."""

import base64
import binascii
import quopri

from mailsift.exceptions import InvalidBase64Error


def base64_decode(data: bytes) -> bytes:
    """Decode standard base64, ignoring line breaks and other noise.

    Raises:
        InvalidBase64Error: On bad padding or a truncated final quantum.
    """
    try:
        return base64.b64decode(data)
    except (binascii.Error, ValueError) as e:
        raise InvalidBase64Error(f"failed decode base64 [msg: {e}]") from e


def quoted_printable_decode(data: bytes) -> bytes:
    """Decode quoted-printable. Malformed escapes are kept literally."""
    return quopri.decodestring(data)


def decode_transfer_encoding(encoding: str | None, data: bytes) -> bytes:
    """Reverse the named transfer encoding.

    Identity encodings (``7bit``, ``8bit``, ``binary``) and unknown names
    return ``data`` unchanged.

    Raises:
        InvalidBase64Error: If ``encoding`` is base64 and ``data`` is not.
    """
    name = (encoding or "").strip().lower()
    if name == "base64":
        return base64_decode(data)
    if name == "quoted-printable":
        return quoted_printable_decode(data)
    return data
