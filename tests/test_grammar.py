"""Tests for the grammar fragments."""

import pytest
import regex

from mailaddr.config import ParserConfig
from mailaddr.ingest import grammar
from mailaddr.ingest.grammar import (
    ADDRESS_RE,
    DOMAIN_PART_RE,
    ENCODED_NAME_RE,
    LOCAL_PART_RE,
    QUOTED_NAME_RE,
    UNQUOTED_NAME_RE,
    match_name_address,
    matched_name,
)


def _fullmatch(pattern, text):
    return pattern.fullmatch(text) is not None


class TestDomainPart:
    @pytest.mark.parametrize("domain", [
        "domonda.com",
        "mail-billwerk.co.uk",
        "7examples.com",
        "t.pl",
        "xbüro-yy-zzz.de",
        "belivethisßällm.bHt",
        "xx.consulting",
    ])
    def test_valid(self, domain):
        assert _fullmatch(DOMAIN_PART_RE, domain)

    @pytest.mark.parametrize("domain", ["-example.com", ".example.com", "example", "example.c", "example.c0m"])
    def test_invalid(self, domain):
        assert not _fullmatch(DOMAIN_PART_RE, domain)


class TestLocalPart:
    @pytest.mark.parametrize("local", [
        "x",
        "erik.unger",
        "er+vk+baurauslagen+wirklich",
        "_underscore",
        "alte.mücke",
        "A!#$%&'*+-/=?^_{|}~",
        '"Unger, Erik"',
        "'stupid",
    ])
    def test_valid(self, local):
        assert _fullmatch(LOCAL_PART_RE, local)

    def test_dot_only_as_single_char(self):
        assert _fullmatch(LOCAL_PART_RE, ".")
        assert not _fullmatch(LOCAL_PART_RE, ".erik")

    def test_comma_not_allowed_unquoted(self):
        assert not _fullmatch(LOCAL_PART_RE, "unger,erik")


class TestNameParts:
    def test_quoted_name(self):
        m = QUOTED_NAME_RE.match('"Unger, Erik" <')
        assert m.group("quoted_name") == "Unger, Erik"

    def test_quoted_name_bracket_optional(self):
        assert QUOTED_NAME_RE.fullmatch('"Erik"')

    def test_unquoted_name_needs_bracket(self):
        assert UNQUOTED_NAME_RE.fullmatch("Erik Unger <").group("unquoted_name") == "Erik Unger"
        assert not UNQUOTED_NAME_RE.fullmatch("Erik Unger")

    def test_unquoted_name_may_contain_at(self):
        m = UNQUOTED_NAME_RE.fullmatch("erik.unger@domonda.com <")
        assert m.group("unquoted_name") == "erik.unger@domonda.com"

    def test_encoded_name(self):
        m = ENCODED_NAME_RE.match("=?utf-8?b?wqFIb2xhLCBzZcOxb3Ih?= <")
        assert m.group("encoded_name") == "=?utf-8?b?wqFIb2xhLCBzZcOxb3Ih?="

    def test_encoded_name_needs_four_markers(self):
        assert not ENCODED_NAME_RE.match("=?utf-8?wqFIb2xh?= <")


class TestAddressPattern:
    def test_search(self):
        m = ADDRESS_RE.search("write to erik@domonda.com today")
        assert m.group(0) == "erik@domonda.com"

    def test_no_leading_dot(self):
        assert ADDRESS_RE.search(".@domonda.com") is None


class TestMatchNameAddress:
    def test_anchored(self):
        assert match_name_address("x erik@domonda.com") is None

    def test_groups(self):
        m = match_name_address('"Erik Unger" <erik@domonda.com>')
        assert matched_name(m) == "Erik Unger"
        assert m.group("local") == "erik"
        assert m.group("domain") == "domonda.com"
        assert m.end() == len('"Erik Unger" <erik@domonda.com>')

    def test_no_name(self):
        m = match_name_address("<erik@domonda.com>")
        assert matched_name(m) == ""

    def test_uses_configured_timeout(self, monkeypatch):
        seen = {}

        class FakePattern:
            def match(self, text, timeout=None):
                seen["timeout"] = timeout
                return None

        monkeypatch.setattr(grammar, "NAME_ADDRESS_RE", FakePattern())
        monkeypatch.setattr(grammar, "get_parser_config", lambda: ParserConfig(match_timeout=0.25))
        assert match_name_address("erik@domonda.com") is None
        assert seen["timeout"] == 0.25

    def test_fragments_compile_standalone(self):
        for fragment in (grammar.ATEXT, grammar.ADDRESS, grammar.NAME_PART, grammar.NAME_ADDRESS):
            regex.compile(fragment)
