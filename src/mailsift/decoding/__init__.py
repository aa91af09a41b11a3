from mailsift.decoding.charset import normalize_charset, transcode
from mailsift.decoding.media_type import is_multipart, parse_media_type
from mailsift.decoding.transfer import (
    base64_decode,
    decode_transfer_encoding,
    quoted_printable_decode,
)
from mailsift.decoding.words import decode_encoded_words

__all__ = [
    "base64_decode",
    "decode_encoded_words",
    "decode_transfer_encoding",
    "is_multipart",
    "normalize_charset",
    "parse_media_type",
    "quoted_printable_decode",
    "transcode",
]
