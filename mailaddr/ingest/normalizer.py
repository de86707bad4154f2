"""Address normalization, de-duplication and identity heuristics."""

import re
from typing import Iterable

from mailaddr.ingest.address_list import parse_address_list
from mailaddr.ingest.email_parser import format_address, parse_address

# Common distribution list naming, shared with the polars address dimension
DISTRIBUTION_LIST_PATTERN = (
    r"(?i)^(?:all[-_.]?|everyone|staff|team|group|dept|department)"
    r"|[-_.](?:list|all|group|team|dept)@"
    r"|^dl[-_.]"
    r"|undisclosed"
)
_DL_RE = re.compile(DISTRIBUTION_LIST_PATTERN)


def normalize_address(raw: str) -> str:
    """Parse an address and render it with lower-cased address part.

    'With Name <With.Name@test.com>' becomes '"With Name" <with.name@test.com>'.
    """
    return format_address(parse_address(raw))


def normalize_address_list(raw: str) -> list[str]:
    """Parse a list and return its formatted entries without duplicates.

    Duplicates are detected by address part; the first occurrence wins.
    """
    seen = set()
    normalized = []
    for parsed in parse_address_list(raw):
        if parsed.address in seen:
            continue
        seen.add(parsed.address)
        normalized.append(format_address(parsed))
    return normalized


def normalized_address_list(raw: str) -> str:
    """Re-join all parsed entries of a list with ', ', duplicates included."""
    return join_addresses(*(format_address(p) for p in parse_address_list(raw)))


def is_normalized_address_list(raw: str) -> bool:
    try:
        return normalized_address_list(raw) == raw
    except ValueError:
        return False


def unique_address_parts(addrs: Iterable[str]) -> list[str]:
    """Return the sorted unique address parts, skipping unparseable entries."""
    unique = set()
    for addr in addrs:
        try:
            unique.add(parse_address(addr).address)
        except ValueError:
            continue
    return sorted(unique)


def join_addresses(*addrs: str) -> str:
    """Join addresses into one list value, skipping empty ones."""
    return ", ".join(a for a in addrs if a)


def normalize_name(name: str) -> str:
    """Clean up a display name: remove extra quotes, whitespace, reorder Last, First."""
    name = name.strip().strip('"').strip("'").strip()
    name = re.sub(r"\s+", " ", name)

    # If name is "Last, First" format, reorder to "First Last"
    if "," in name and "@" not in name:
        last, first = (part.strip() for part in name.split(",", 1))
        if first and last:
            name = f"{first} {last}"

    return name


def is_distribution_list(address: str, name: str = "") -> bool:
    """Heuristic check if an address is a distribution list."""
    return bool(_DL_RE.search(address) or (name and _DL_RE.search(name)))


def is_internal(address: str, internal_domains: Iterable[str]) -> bool:
    """Check if a normalized address belongs to one of the internal domains."""
    domain = address.rsplit("@", 1)[-1]
    return any(domain == d.lower() for d in internal_domains)
