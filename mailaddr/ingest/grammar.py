"""Pattern fragments of the permissive name + address grammar.

Addresses found in real headers break RFC 5322 in many ways (umlauts in the
local part, wrong quoting, encoded names without quotes), so every fragment
here is deliberately wider than the RFC. Each fragment is a plain pattern
string that can be compiled and tested on its own; NAME_ADDRESS composes
them into the single anchored pattern used by the parser.

Patterns are compiled once at import and only read afterwards. Matching goes
through the `regex` engine so every call can carry a timeout.
"""

import regex

from mailaddr.config import get_parser_config

# Characters seen in the wild in local and domain parts beyond 7bit ASCII
UMLAUT_CHARS = (
    "àáâãäåæāăąçćĉċčďđèéêëēĕėęěĝğġģĥħìíîïĩīĭįıðĵķĸĺļľłñńņňŋòóôõöøōŏőœŕŗřśŝşšţťŧ"
    "ùúûüũūŭůűųŵýŷÿźżžþß"
    "ÀÁÂÃÄÅÆĀĂĄÇĆĈĊČĎĐÈÉÊËĒĔĖĘĚĜĞĠĢĤĦÌÍÎÏĨĪĬĮIÐĴĶĸĹĻĽŁÑŃŅŇŊÒÓÔÕÖØŌŎŐŒŔŖŘŚŜŞŠŢŤŦ"
    "ÙÚÛÜŨŪŬŮŰŲŴÝŶŸŹŻŽÞSS"
)

ATEXT_SPECIAL_CHARS = r"!#$%&'*+\-/=?^_{|}~`" + UMLAUT_CHARS

_ATEXT_CHARS = r"a-zA-Z0-9" + ATEXT_SPECIAL_CHARS

# One run of atext, may contain but not start with a dot
ATEXT = r"[" + _ATEXT_CHARS + r"][." + _ATEXT_CHARS + r"]*"

# Single char first so that "x@" is not swallowed by a longer atext attempt
LOCAL_PART = r"'?(?:[ \t]?(?P<local>[a-zA-Z0-9.]|" + ATEXT + r'|"[^"]+"))'

DOMAIN_CHARS = r"a-zA-Z0-9" + UMLAUT_CHARS
DOMAIN_PART = r"(?P<domain>[" + DOMAIN_CHARS + r"][\-." + DOMAIN_CHARS + r"]*\.[a-zA-Z]{2,})"

QUOTED_NAME_PART = r'"(?P<quoted_name>[^"]*)"[ \t]*<?'
UNQUOTED_NAME_PART = r"(?P<unquoted_name>[^<@]*[^<@\s]|[^<,]*[^<,\s])[ \t]*<"
# Example: =?utf-8?b?wqFIb2xhLCBzZcOxb3Ih?= <
# Tokens exclude "?" so the three runs cannot trade characters while backtracking
_ENCODED_TOKEN = r"[\x21-\x3e\x40-\x7e]+"
ENCODED_NAME_PART = (
    r"(?P<encoded_name>=\?" + _ENCODED_TOKEN + r"\?" + _ENCODED_TOKEN + r"\?" + _ENCODED_TOKEN + r"\?=)[ \t]*<"
)
EMPTY_NAME_PART = r"<?"

NAME_PART = (
    "(?:" + "|".join([QUOTED_NAME_PART, UNQUOTED_NAME_PART, ENCODED_NAME_PART, EMPTY_NAME_PART]) + ")"
)

# Address without name part
ADDRESS = ATEXT + "@" + DOMAIN_PART

# Unanchored scans start only where an atext run begins (after its leading
# dots) or where the previous match ended. Later starts inside the same run
# would reach the same "@".
ADDRESS_START = r"(?:\G|(?<![." + _ATEXT_CHARS + r"]))\.*\K"

# Optional name, address, then optional closing quote and bracket
NAME_ADDRESS = "^" + NAME_PART + LOCAL_PART + "@" + DOMAIN_PART + r"\s?'?>?"

NAME_GROUPS = ("quoted_name", "unquoted_name", "encoded_name")

ADDRESS_RE = regex.compile(ADDRESS_START + ADDRESS)
NAME_ADDRESS_RE = regex.compile(NAME_ADDRESS)

LOCAL_PART_RE = regex.compile(LOCAL_PART)
DOMAIN_PART_RE = regex.compile(DOMAIN_PART)
QUOTED_NAME_RE = regex.compile(QUOTED_NAME_PART)
UNQUOTED_NAME_RE = regex.compile(UNQUOTED_NAME_PART)
ENCODED_NAME_RE = regex.compile(ENCODED_NAME_PART)


def match_name_address(text: str):
    """Match an optional name and one address at the start of text.

    Returns a match object or None. Raises TimeoutError when the match
    takes longer than the configured timeout.
    """
    return NAME_ADDRESS_RE.match(text, timeout=get_parser_config().match_timeout)


def iter_addresses(text: str):
    """Iterate over non-overlapping name-less address matches in text."""
    return ADDRESS_RE.finditer(text, timeout=get_parser_config().match_timeout)


def matched_name(m) -> str:
    """Return the text of whichever name alternative matched, or ''."""
    for group in NAME_GROUPS:
        value = m.group(group)
        if value is not None:
            return value
    return ""
