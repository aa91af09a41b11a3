"""Parsing pipeline: tokenizer, header resolver, body walker, decoder."""

from mailsift.parser.content import ContentDecoder, DecodedContent
from mailsift.parser.headers import HeaderResolver
from mailsift.parser.message import MessageParser, parse_message
from mailsift.parser.multipart import BodyWalker, parse_body, split_multipart
from mailsift.parser.raw import parse_raw

__all__ = [
    "BodyWalker",
    "ContentDecoder",
    "DecodedContent",
    "HeaderResolver",
    "MessageParser",
    "parse_body",
    "parse_message",
    "parse_raw",
    "split_multipart",
]
