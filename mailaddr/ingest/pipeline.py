"""Orchestrates ingestion: header CSVs → message_fact.parquet."""

import logging
from datetime import timezone
from pathlib import Path

import polars as pl

from mailaddr.config import AppConfig, DatasetConfig
from mailaddr.errors import AddressError
from mailaddr.ingest.address_list import parse_address_list
from mailaddr.ingest.column_mapper import ColumnMapping, parse_dict_csv
from mailaddr.ingest.csv_parser import parse_csv
from mailaddr.ingest.date_parser import parse_timestamp
from mailaddr.ingest.email_parser import parse_address

logger = logging.getLogger(__name__)

MESSAGE_FACT_SCHEMA = {
    "msg_id": pl.Int64,
    "timestamp": pl.Datetime,
    "from_name": pl.String,
    "from_address": pl.String,
    "to_names": pl.List(pl.String),
    "to_addresses": pl.List(pl.String),
    "n_recipients": pl.Int64,
}


def _iter_rows(csv_path: Path, dataset: DatasetConfig):
    if dataset.well_formed:
        return parse_dict_csv(csv_path, ColumnMapping.from_dataset(dataset))
    return parse_csv(csv_path)


def parse_row(row: dict, dataset: DatasetConfig) -> dict | None:
    """Parse one CSV row into a message record.

    Returns None when the date cannot be parsed. Raises AddressError when
    the From value or the To list is malformed.
    """
    ts = parse_timestamp(row["date"], dataset.date_format)
    if ts is None:
        return None
    # Header dates with offset are stored as naive UTC next to naive export dates
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)

    sender = parse_address(row["from_raw"])

    to_names = []
    to_addresses = []
    seen = set()
    for recipient in parse_address_list(row["to_raw"]):
        if recipient.address in seen:
            continue
        seen.add(recipient.address)
        to_names.append(recipient.name)
        to_addresses.append(recipient.address)

    return {
        "timestamp": ts,
        "from_name": sender.name,
        "from_address": sender.address,
        "to_names": to_names,
        "to_addresses": to_addresses,
        "n_recipients": len(to_addresses),
    }


def _ingest_single_csv(csv_path: Path, dataset: DatasetConfig, start_msg_id: int) -> tuple[pl.DataFrame, int, int]:
    """Parse a single CSV file. Returns (DataFrame, next_msg_id, error_count)."""
    records = []
    msg_id = start_msg_id
    parse_errors = 0

    for row in _iter_rows(csv_path, dataset):
        try:
            record = parse_row(row, dataset)
        except AddressError as e:
            logger.debug("Skipping row in %s: %s", csv_path.name, e)
            parse_errors += 1
            continue
        if record is None:
            logger.debug("Skipping row in %s: unparseable date %r", csv_path.name, row["date"])
            parse_errors += 1
            continue

        record["msg_id"] = msg_id
        records.append(record)
        msg_id += 1

    df = pl.DataFrame(records, schema=MESSAGE_FACT_SCHEMA)
    return df, msg_id, parse_errors


def add_time_columns(df: pl.DataFrame) -> pl.DataFrame:
    """Add week_id, hour and day_of_week derived from timestamp."""
    return df.with_columns([
        pl.col("timestamp").dt.strftime("%G-W%V").alias("week_id"),
        pl.col("timestamp").dt.hour().alias("hour"),
        (pl.col("timestamp").dt.weekday() - 1).cast(pl.Int32).alias("day_of_week"),
    ])


def run_ingestion(config: AppConfig = None, dataset: DatasetConfig = None, write: bool = True) -> pl.DataFrame:
    """Run the ingestion pipeline across all CSV files of the dataset.

    Rows with an unparseable date, From address or To list are skipped and
    counted. With write=True the result is stored as message_fact.parquet in
    the output directory.
    """
    if config is None:
        config = AppConfig()
    if dataset is None:
        dataset = config.default_dataset

    if not dataset.csv_paths:
        logger.warning("No CSV files found for dataset %s", dataset.name)
        return add_time_columns(pl.DataFrame(schema=MESSAGE_FACT_SCHEMA))

    dfs = []
    total_errors = 0
    next_id = 0

    for csv_path in dataset.csv_paths:
        logger.info("Ingesting %s...", csv_path.name)
        chunk_df, next_id, errors = _ingest_single_csv(csv_path, dataset, next_id)
        dfs.append(chunk_df)
        total_errors += errors
        logger.info("  %d messages, %d errors", len(chunk_df), errors)

    logger.info("Ingestion complete: %d total messages, %d total errors skipped", next_id, total_errors)

    df = add_time_columns(pl.concat(dfs))
    if write:
        df.write_parquet(config.output_path(config.message_fact_file))
    return df
