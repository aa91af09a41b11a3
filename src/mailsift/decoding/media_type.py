"""Media type parsing for Content-Type values."""

import re
from email.message import Message
from email.utils import collapse_rfc2231_value

from mailsift.exceptions import InvalidMediaTypeError

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_MEDIA_TYPE_RE = re.compile(rf"^\s*({_TOKEN})\s*/\s*({_TOKEN})\s*(?:;|$)")


def parse_media_type(value: str) -> tuple[str, dict[str, str]]:
    """Split a Content-Type value into ``type/subtype`` and parameters.

    Parameter names and the media type are lower-cased; quoted values and
    RFC2231 continuations are collapsed.

    Raises:
        InvalidMediaTypeError: If the value does not start with a
            ``type/subtype`` pair.
    """
    match = _MEDIA_TYPE_RE.match(value)
    if match is None:
        raise InvalidMediaTypeError(f"mime: invalid media type {value!r}")
    media_type = f"{match.group(1)}/{match.group(2)}".lower()

    holder = Message()
    holder["Content-Type"] = value
    params: dict[str, str] = {}
    for key, param in holder.get_params(failobj=[], header="content-type")[1:]:
        if key:
            params[key] = collapse_rfc2231_value(param)
    return media_type, params


def is_multipart(media_type: str) -> bool:
    return media_type.startswith("multipart/")
