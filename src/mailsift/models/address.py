"""Address data models.

An address field holds an ordered list of :class:`Mailbox` and
:class:`Group` entries; the order is the recipient order in the header.
"""

from dataclasses import dataclass, field
from email.utils import formataddr


@dataclass(frozen=True)
class Mailbox:
    """A single mailbox: optional display name plus addr-spec.

    Attributes:
        name: Display name, already decoded from encoded words.
        local_part: The part before ``@``.
        domain: The part after ``@``.
    """

    name: str | None
    local_part: str
    domain: str

    @property
    def address(self) -> str:
        return f"{self.local_part}@{self.domain}"

    def __str__(self) -> str:
        return formataddr((self.name or "", self.address))


@dataclass(frozen=True)
class Group:
    """A named group of mailboxes, e.g. ``Team: a@x.com, b@x.com;``."""

    name: str
    members: tuple[Mailbox, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        return f"{self.name}: {', '.join(str(m) for m in self.members)};"


Address = Mailbox | Group
