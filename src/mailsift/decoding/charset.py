"""Charset transcoding for text parts."""

import codecs

from mailsift.exceptions import UnsupportedCharsetError


def normalize_charset(label: str) -> str:
    """Normalize a declared charset label to a codec name.

    Strips quotes and whitespace, lower-cases, and maps Microsoft
    ``windows-NNNN`` labels onto Python's ``cpNNNN`` codecs.
    """
    label = label.strip().strip("\"'").strip().lower()
    return label.replace("windows-", "cp")


def transcode(label: str, data: bytes) -> str:
    """Decode ``data`` from the charset named by ``label``.

    Invalid byte sequences in a known charset are replaced rather than
    rejected.

    Raises:
        UnsupportedCharsetError: If no codec matches the label, or the
            codec cannot turn arbitrary bytes into text.
    """
    name = normalize_charset(label)
    try:
        codec = codecs.lookup(name)
    except LookupError as e:
        raise UnsupportedCharsetError(label) from e
    # bytes-to-bytes codecs such as rot13 or zlib
    if not getattr(codec, "_is_text_encoding", True):
        raise UnsupportedCharsetError(label)
    try:
        return data.decode(codec.name, errors="replace")
    except (LookupError, UnicodeError) as e:
        # idna and punycode reject the replace handler
        raise UnsupportedCharsetError(label) from e
