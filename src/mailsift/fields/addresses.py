"""Address list parsing for From/To/Cc/Bcc/Reply-To/Sender.

The RFC5322 lexer and address grammar come from
:mod:`email.headerregistry`, which also resolves encoded words inside
display names. This module maps its result onto :class:`Mailbox` and
:class:`Group` and turns grammar defects into :class:`AddressParseError`.
"""

from email.errors import HeaderParseError
from email.headerregistry import HeaderRegistry

from mailsift.exceptions import AddressParseError
from mailsift.models.address import Address, Group, Mailbox

_registry = HeaderRegistry()


def _mailbox(address, header: str, value: str) -> Mailbox:
    if not address.username or not address.domain:
        raise AddressParseError(f"invalid address in {value!r}", header=header)
    return Mailbox(address.display_name or None, address.username, address.domain)


def _parse(header: str, value: str) -> list[Address]:
    if not value.strip():
        return []
    try:
        parsed = _registry(header, value)
    except (HeaderParseError, ValueError, IndexError) as e:
        raise AddressParseError(f"cannot parse {header} {value!r}: {e}", header=header) from e

    result: list[Address] = []
    for group in parsed.groups:
        members = [_mailbox(a, header, value) for a in group.addresses]
        if group.display_name is None:
            result.extend(members)
        else:
            result.append(Group(group.display_name, tuple(members)))

    if not result:
        raise AddressParseError(f"no address found in {value!r}", header=header)
    return result


def parse_address_list(value: str, header: str = "To") -> list[Address]:
    """Parse a comma-separated address list, preserving order.

    An empty or blank value yields an empty list.

    Raises:
        AddressParseError: If any entry is not a valid mailbox or group.
    """
    return _parse(header, value)


def parse_single_address(value: str, header: str = "Sender") -> Address:
    """Parse a header that must hold exactly one mailbox.

    Raises:
        AddressParseError: If the value is invalid or holds zero or
            several mailboxes.
    """
    addresses = _parse(header, value)
    if len(addresses) != 1 or not isinstance(addresses[0], Mailbox):
        raise AddressParseError(
            f"expected a single mailbox in {header}, got {value!r}", header=header
        )
    return addresses[0]
