"""Recursive MIME body walker.

Splits a body into a flat, depth-first list of leaf :class:`Part` objects.
Multipart containers are expanded in place and never returned.
"""

import re

import structlog

from mailsift.decoding.media_type import is_multipart, parse_media_type
from mailsift.exceptions import (
    InvalidMediaTypeError,
    MalformedMultipartError,
    MissingBoundaryError,
    NestingTooDeepError,
    UnexpectedEndOfInputError,
)
from mailsift.models.message import Part
from mailsift.parser.raw import parse_raw

logger = structlog.get_logger(__name__)

DEFAULT_CHARSET = "UTF-8"
DEFAULT_MAX_DEPTH = 32

_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([^\"';\s]+)", re.IGNORECASE)


def canonical_header_key(key: str) -> str:
    """``content-TYPE`` -> ``Content-Type``."""
    return "-".join(word.capitalize() for word in key.strip().split("-"))


def _delimiter_kind(line: bytes, dash_boundary: bytes) -> str | None:
    """Classify a line as ``"part"``, ``"close"`` or None (content)."""
    if not line.startswith(dash_boundary):
        return None
    tail = line[len(dash_boundary) :].rstrip(b"\r\n")
    if tail.startswith(b"--") and not tail[2:].strip(b" \t"):
        return "close"
    if not tail.strip(b" \t"):
        return "part"
    return None


def _drop_line_break(segment: bytes) -> bytes:
    # the line break before a delimiter belongs to the delimiter
    if segment.endswith(b"\r\n"):
        return segment[:-2]
    if segment.endswith(b"\n"):
        return segment[:-1]
    return segment


def split_multipart(body: bytes, boundary: str) -> list[bytes]:
    """Cut a multipart body into the raw bytes of each sibling part.

    The preamble and the epilogue are discarded. A body that ends before
    its closing delimiter keeps the final part up to end of input.
    """
    dash_boundary = b"--" + boundary.encode("utf-8", errors="replace")
    segments: list[bytes] = []
    current: list[bytes] | None = None

    for line in body.splitlines(keepends=True):
        kind = _delimiter_kind(line, dash_boundary)
        if kind is None:
            if current is not None:
                current.append(line)
            continue
        if current is not None:
            segments.append(_drop_line_break(b"".join(current)))
        if kind == "close":
            return segments
        current = []

    if current is not None:
        segments.append(b"".join(current))
    return segments


def read_part(segment: bytes) -> tuple[dict[str, list[str]], bytes]:
    """Split one part segment into canonical headers and its body."""
    if not segment:
        return {}, b""
    try:
        raw = parse_raw(segment)
    except UnexpectedEndOfInputError:
        # a part holding only headers, or no headers and no separator line
        try:
            raw = parse_raw(segment + b"\n\n")
        except UnexpectedEndOfInputError:
            return {}, segment

    headers: dict[str, list[str]] = {}
    for rh in raw.headers:
        key = canonical_header_key(rh.key.decode("utf-8", errors="replace"))
        headers.setdefault(key, []).append(rh.value.decode("utf-8", errors="replace"))
    return headers, raw.body


class BodyWalker:
    """Walk a (possibly nested) MIME body into leaf parts.

    Args:
        max_depth: Maximum multipart nesting accepted before giving up.
        default_charset: Charset recorded for parts that declare none.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, default_charset: str = DEFAULT_CHARSET):
        self.max_depth = max_depth
        self.default_charset = default_charset

    def parse_body(
        self,
        content_type: str,
        body: bytes,
        headers: dict[str, list[str]] | None = None,
    ) -> list[Part]:
        """Parse ``body`` declared with ``content_type`` into leaf parts.

        ``headers`` are attached to the single part produced for a
        non-multipart body.

        Raises:
            InvalidMediaTypeError: If ``content_type`` is malformed.
            MissingBoundaryError: If a multipart type has no boundary.
            MalformedMultipartError: If no delimiter line is present.
            NestingTooDeepError: If nesting exceeds ``max_depth``.
        """
        media_type, params = parse_media_type(content_type)
        boundary = params.get("boundary")

        if not boundary:
            if is_multipart(media_type):
                raise MissingBoundaryError()
            charset = params.get("charset") or self.default_charset
            return [Part(media_type, charset, body, dict(headers or {}))]

        parts = self._walk(boundary, body, depth=1)
        if not parts:
            raise MalformedMultipartError(f"no part delimited by boundary {boundary!r}")
        return parts

    def _walk(self, boundary: str, body: bytes, depth: int) -> list[Part]:
        if depth > self.max_depth:
            raise NestingTooDeepError(f"multipart nesting deeper than {self.max_depth}")

        parts: list[Part] = []
        for segment in split_multipart(body, boundary):
            headers, data = read_part(segment)
            content_type = (headers.get("Content-Type") or [""])[0].strip() or "text/plain"

            sub_boundary = self._container_boundary(content_type)
            if sub_boundary is not None:
                sub_parts = self._walk(sub_boundary, data, depth + 1)
                if sub_parts:
                    parts.extend(sub_parts)
                    continue
                logger.debug("empty_multipart_kept_as_leaf", depth=depth)

            parts.append(self._leaf(content_type, data, headers))
        return parts

    def _leaf(self, content_type: str, data: bytes, headers: dict[str, list[str]]) -> Part:
        try:
            media_type, _ = parse_media_type(content_type)
        except InvalidMediaTypeError:
            media_type = content_type
        match = _CHARSET_RE.search(content_type)
        charset = match.group(1) if match else self.default_charset
        return Part(media_type=media_type, charset=charset, data=data, headers=headers)

    @staticmethod
    def _container_boundary(content_type: str) -> str | None:
        """Return the boundary of a multipart content type, None for leaves."""
        try:
            media_type, params = parse_media_type(content_type)
        except InvalidMediaTypeError:
            return None
        if not is_multipart(media_type):
            return None
        return params.get("boundary") or None


def parse_body(
    content_type: str,
    body: bytes,
    headers: dict[str, list[str]] | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Part]:
    """Module-level shortcut for :meth:`BodyWalker.parse_body`."""
    return BodyWalker(max_depth=max_depth).parse_body(content_type, body, headers)
