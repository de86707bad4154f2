"""Command line entry point.

    mailaddr parse '"Erik Unger" <Erik@Domonda.com>'
    mailaddr parse-list 'a@example.com, B <b@example.com>'
    mailaddr normalize 'a@example.com, A@Example.com'
    mailaddr find message.txt
    mailaddr ingest --data-dir data --output-dir output
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from mailaddr.config import AppConfig
from mailaddr.errors import AddressError
from mailaddr.ingest.address_list import parse_address_list
from mailaddr.ingest.email_parser import parse_address
from mailaddr.ingest.finder import find_all_addresses
from mailaddr.ingest.normalizer import normalize_address_list
from mailaddr.ingest.pipeline import run_ingestion
from mailaddr.log import configure_logging
from mailaddr.transform.fact_tables import build_tables

logger = logging.getLogger(__name__)


def _cmd_parse(args) -> None:
    parsed = parse_address(args.address)
    print(json.dumps(dataclasses.asdict(parsed), ensure_ascii=False))


def _cmd_parse_list(args) -> None:
    parsed = parse_address_list(args.address_list)
    print(json.dumps([dataclasses.asdict(p) for p in parsed], ensure_ascii=False))


def _cmd_normalize(args) -> None:
    for addr in normalize_address_list(args.address_list):
        print(addr)


def _cmd_find(args) -> None:
    if args.file is None:
        text = sys.stdin.read()
    else:
        text = Path(args.file).read_text(encoding="utf-8", errors="replace")
    for addr in find_all_addresses(text):
        print(addr)


def _cmd_ingest(args) -> None:
    config = AppConfig(data_dir=args.data_dir, output_dir=args.output_dir)
    dataset = config.default_dataset
    if args.internal_domain:
        dataset.internal_domains = args.internal_domain
    dataset.well_formed = args.well_formed

    message_fact = run_ingestion(config, dataset)
    address_fact, address_dim = build_tables(message_fact, config, dataset)
    print(f"{len(message_fact)} messages, {len(address_fact)} address rows, "
          f"{len(address_dim)} unique addresses written to {config.output_dir}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailaddr",
        description="Lenient email address and address list parsing",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Parse a single address and print it as JSON")
    p.add_argument("address")
    p.set_defaults(func=_cmd_parse)

    p = sub.add_parser("parse-list", help="Parse a comma separated address list as JSON")
    p.add_argument("address_list")
    p.set_defaults(func=_cmd_parse_list)

    p = sub.add_parser("normalize", help="Print normalized unique list entries one per line")
    p.add_argument("address_list")
    p.set_defaults(func=_cmd_normalize)

    p = sub.add_parser("find", help="Print all addresses found in a text file or stdin")
    p.add_argument("file", nargs="?", default=None)
    p.set_defaults(func=_cmd_find)

    p = sub.add_parser("ingest", help="Parse header CSVs into parquet tables")
    p.add_argument("--data-dir", type=Path, default=Path("data"))
    p.add_argument("--output-dir", type=Path, default=Path("output"))
    p.add_argument(
        "--internal-domain",
        action="append",
        default=[],
        help="Domain counted as internal, may be repeated",
    )
    p.add_argument(
        "--well-formed",
        action="store_true",
        help="Read the CSVs with csv.DictReader instead of the spill-over parser",
    )
    p.set_defaults(func=_cmd_ingest)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint, returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    try:
        args.func(args)
    except AddressError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
