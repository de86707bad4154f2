"""Parse single email addresses with optional display names.

Far more lenient than email.utils.parseaddr: stray quotes, umlauts, tabs,
encoded names and addresses repeated inside the name part are all accepted,
and the address part is always returned lower-cased.
"""

import logging
from dataclasses import dataclass
from email.errors import HeaderParseError
from email.header import decode_header, make_header

from mailaddr.errors import (
    EmptyAddressError,
    EncodedWordError,
    GrammarMismatchError,
    TrailingCharactersError,
)
from mailaddr.ingest.grammar import match_name_address, matched_name
from mailaddr.ingest.sanitizer import sanitize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedAddress:
    """Display name and normalized local@domain address."""
    name: str
    address: str

    def __str__(self) -> str:
        return format_address(self)


def format_address(parsed: "ParsedAddress | None") -> str:
    """Render a parsed address for a header value.

    Without name only the address is returned, otherwise the name is
    quoted in front of the bracketed address. Non-ASCII names are kept
    as they are, not encoded.
    """
    if parsed is None or not parsed.address:
        return ""
    if not parsed.name:
        return parsed.address
    name = parsed.name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{name}" <{parsed.address}>'


def decode_name(name: str) -> str:
    """Decode RFC 2047 encoded words in a display name.

    Raises EncodedWordError if an encoded word is malformed or uses an
    unknown charset.
    """
    if "=?" not in name:
        return name
    try:
        return str(make_header(decode_header(name)))
    except (HeaderParseError, LookupError, UnicodeError) as e:
        raise EncodedWordError(f"could not decode email address name {name!r}: {e}", name) from e


def _clean_name(name: str) -> str:
    name = decode_name(name)
    name = name.replace('"', "").replace("\\", "").replace("\t", " ")
    return name.strip()


def _clean_local(local: str) -> str:
    local = local.lower().replace('"', "")
    return local.replace(" ", ".").replace(",", ".")


def _match_one(text: str) -> tuple[str, str, str]:
    """Match one name and address at the start of text.

    Returns the cleaned name, the normalized address and the unparsed
    remainder, without applying the recovery rule.
    """
    try:
        m = match_name_address(text)
    except TimeoutError as e:
        raise GrammarMismatchError(f"timed out parsing email address: {text}", text) from e
    if m is None:
        raise GrammarMismatchError(f"could not parse email address: {text}", text)

    name = matched_name(m)
    if name:
        name = _clean_name(name)

    address = _clean_local(m.group("local")) + "@" + m.group("domain").lower()
    return name, address, text[m.end():].lstrip(" ")


def parse_one(text: str) -> tuple[ParsedAddress, str]:
    """Parse the address at the start of sanitized text.

    Returns the parsed address and the unparsed remainder with leading
    spaces removed.
    """
    # The address may be duplicated in the name part:
    #   "\"Example\" <ar1@example.com>" <ar@example.com>
    # then the match stops at the first pair of brackets and the
    # real address follows in the remainder. Matches are chained while
    # the remainder is not a list separator.
    chain = [_match_one(text)]
    while chain[-1][2] and not chain[-1][2].startswith(","):
        try:
            chain.append(_match_one(chain[-1][2]))
        except (GrammarMismatchError, EncodedWordError):
            # Not a further address, the chain ends at the previous match
            break

    # Resolved right to left: a nameless match replaces the one before it
    right = None
    for name, address, unparsed in reversed(chain):
        if right is not None and not right.name:
            logger.debug("Using address %s following %s in %r", right.address, address, text)
            address = right.address
            unparsed = right_unparsed
        if name == address:
            name = ""
        right, right_unparsed = ParsedAddress(name=name, address=address), unparsed

    return right, right_unparsed


def parse_address(raw: str) -> ParsedAddress:
    """Parse exactly one email address, optionally with display name.

    If the name part is identical to the address part it is not returned.
    """
    addr = sanitize(raw)
    if not addr:
        raise EmptyAddressError("empty email address", raw or "")

    parsed, unparsed = parse_one(addr)
    unparsed = unparsed.strip()
    if unparsed:
        raise TrailingCharactersError(
            f"parsed email address {addr} as {parsed} with unexpected remaining characters: {unparsed}",
            addr,
            parsed,
            unparsed,
        )
    return parsed


def is_valid_address(raw: str) -> bool:
    try:
        parse_address(raw)
    except ValueError:
        return False
    return True


def address_part(raw: str) -> str:
    """Return the normalized local@domain part of raw."""
    return parse_address(raw).address


def name_part(raw: str) -> str:
    return parse_address(raw).name


def local_part(raw: str) -> str:
    """Return the normalized part of the address before the @."""
    address = parse_address(raw).address
    return address[:address.index("@")]


def domain_part(raw: str) -> str:
    """Return the text after the last @ without parsing the address.

    Trailing brackets and whitespace are removed, case is kept.
    """
    s = raw or ""
    s = s[s.rfind("@") + 1:]
    return s.rstrip("> \t\r\n")
