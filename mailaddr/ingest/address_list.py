"""Split comma separated address lists from To/Cc headers."""

import logging

from mailaddr.errors import AddressError, AddressListError, ListSeparatorError
from mailaddr.ingest.email_parser import ParsedAddress, format_address, parse_one
from mailaddr.ingest.sanitizer import sanitize

logger = logging.getLogger(__name__)

# Header values meaning "recipients hidden", not a malformed list
PLACEHOLDER_PREFIXES = ("undisclosed-recipients", "undisclosed recipients")


def _clean_list(raw: str | None) -> str:
    return sanitize(raw).rstrip(", ")


def _is_placeholder(address_list: str) -> bool:
    lowered = address_list.lower()
    return lowered == "" or lowered.startswith(PLACEHOLDER_PREFIXES)


def is_placeholder_list(raw: str | None) -> bool:
    """Return True for empty lists and 'undisclosed recipients' variants."""
    return _is_placeholder(_clean_list(raw))


def parse_address_list(raw: str | None) -> list[ParsedAddress]:
    """Parse a comma separated address list.

    Returns the addresses in order of occurrence. Empty and placeholder
    lists result in an empty list, any malformed entry fails the whole list.
    """
    address_list = _clean_list(raw)
    if _is_placeholder(address_list):
        if address_list:
            logger.debug("Placeholder address list: %r", address_list)
        return []

    addrs = []
    try:
        parsed, unparsed = parse_one(address_list)
    except AddressError as e:
        raise AddressListError(
            f"could not parse email address list '{address_list}', because of: {e}", address_list
        ) from e
    addrs.append(parsed)

    while unparsed:
        if not unparsed.startswith(","):
            raise ListSeparatorError(
                f"expected ',' after parsing email address in unparsed part: '{unparsed}' | full list: '{address_list}'",
                address_list,
                unparsed,
            )
        unparsed = unparsed[1:].lstrip(" ")
        try:
            parsed, unparsed = parse_one(unparsed)
        except AddressError as e:
            raise AddressListError(
                f"could not parse email address list '{address_list}', because of: {e}", address_list
            ) from e
        addrs.append(parsed)

    return addrs


def split_address_list(raw: str | None) -> list[str]:
    """Parse a list and return every entry formatted for a header."""
    return [format_address(a) for a in parse_address_list(raw)]
