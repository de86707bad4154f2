"""Find address-shaped substrings in free text such as bodies or OCR output."""

import logging

from mailaddr.ingest.grammar import iter_addresses
from mailaddr.ingest.normalizer import unique_address_parts
from mailaddr.ingest.sanitizer import sanitize

logger = logging.getLogger(__name__)


def find_all_addresses(text: str | None) -> list[str]:
    """Return all addresses without name part found in text.

    Addresses are returned as found, not normalized, in the order they
    appear. A match timeout ends the scan early with what was found so far.
    """
    text = sanitize(text)
    found = []
    if not text:
        return found
    try:
        for m in iter_addresses(text):
            found.append(m.group(0))
    except TimeoutError:
        logger.warning(
            "Address scan timed out after %d matches in %d characters of text",
            len(found),
            len(text),
        )
    return found


def find_unique_addresses(text: str | None) -> list[str]:
    """Return the sorted unique normalized addresses found in text."""
    return unique_address_parts(find_all_addresses(text))
