"""Tests for the command line entry point."""

import json

import pytest

from mailaddr.cli import main


def test_parse(capsys):
    assert main(["parse", '"Erik Unger" <Erik@Domonda.com>']) == 0
    assert json.loads(capsys.readouterr().out) == {"name": "Erik Unger", "address": "erik@domonda.com"}


def test_parse_error(capsys):
    assert main(["parse", "Hello World!"]) == 1
    assert capsys.readouterr().err.startswith("error: could not parse email address")


def test_parse_list(capsys):
    assert main(["parse-list", "a@example.com, B <B@example.com>"]) == 0
    assert json.loads(capsys.readouterr().out) == [
        {"name": "", "address": "a@example.com"},
        {"name": "B", "address": "b@example.com"},
    ]


def test_normalize(capsys):
    assert main(["normalize", "a@example.com, A@Example.com, B <b@example.com>"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a@example.com", '"B" <b@example.com>']


def test_find(capsys, tmp_path):
    text_file = tmp_path / "body.txt"
    text_file.write_text("Contact Hello@world.com or for@example.com.", encoding="utf-8")
    assert main(["find", str(text_file)]) == 0
    assert capsys.readouterr().out.splitlines() == ["Hello@world.com", "for@example.com"]


def test_ingest(capsys, tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "headers.csv").write_text(
        "Date,From,To\n"
        '11/30/2010 13:27,"Hopp, Bryan" <BHopp@spokanecounty.org>,Ted Warne <tedw@pro-msi.com>\n',
        encoding="utf-8",
    )
    output_dir = tmp_path / "out"
    argv = [
        "ingest",
        "--data-dir", str(data_dir),
        "--output-dir", str(output_dir),
        "--internal-domain", "spokanecounty.org",
    ]
    assert main(argv) == 0
    assert capsys.readouterr().out.startswith("1 messages, 2 address rows, 2 unique addresses")
    assert (output_dir / "message_fact.parquet").exists()
    assert (output_dir / "address_dim.parquet").exists()


def test_unknown_log_level():
    with pytest.raises(SystemExit):
        main(["--log-level", "LOUD", "parse", "a@example.com"])
