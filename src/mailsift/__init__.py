"""mailsift: fault-tolerant parsing of raw RFC5322/MIME messages."""

from mailsift.exceptions import MailsiftError
from mailsift.models import Attachment, Group, Mailbox, Message, Part
from mailsift.parser import MessageParser, parse_message

__version__ = "0.1.0"

__all__ = [
    "Attachment",
    "Group",
    "MailsiftError",
    "Mailbox",
    "Message",
    "MessageParser",
    "Part",
    "__version__",
    "parse_message",
]
