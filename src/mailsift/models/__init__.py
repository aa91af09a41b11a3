from mailsift.models.address import Address, Group, Mailbox
from mailsift.models.message import Attachment, Header, HeaderInfo, Message, Part
from mailsift.models.raw import RawHeader, RawMessage

__all__ = [
    "Address",
    "Attachment",
    "Group",
    "Header",
    "HeaderInfo",
    "Mailbox",
    "Message",
    "Part",
    "RawHeader",
    "RawMessage",
]
