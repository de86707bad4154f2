"""Build address_fact and address_dim from message_fact."""

import polars as pl

from mailaddr.config import AppConfig, DatasetConfig
from mailaddr.ingest.normalizer import DISTRIBUTION_LIST_PATTERN

ADDRESS_FACT_SCHEMA = {
    "msg_id": pl.Int64,
    "role": pl.String,
    "name": pl.String,
    "address": pl.String,
}


def build_address_fact(message_fact: pl.DataFrame) -> pl.DataFrame:
    """One row per address occurrence: the sender and every recipient."""
    senders = message_fact.select([
        "msg_id",
        pl.lit("from").alias("role"),
        pl.col("from_name").alias("name"),
        pl.col("from_address").alias("address"),
    ])

    # Messages to placeholder lists explode to a null recipient, drop them
    recipients = (
        message_fact.select(["msg_id", "to_names", "to_addresses"])
        .explode(["to_names", "to_addresses"])
        .filter(pl.col("to_addresses").is_not_null())
        .select([
            "msg_id",
            pl.lit("to").alias("role"),
            pl.col("to_names").alias("name"),
            pl.col("to_addresses").alias("address"),
        ])
    )

    return pl.concat([
        senders.cast(ADDRESS_FACT_SCHEMA),
        recipients.cast(ADDRESS_FACT_SCHEMA),
    ]).sort(["msg_id", "role"], maintain_order=True)


def build_address_dim(address_fact: pl.DataFrame, dataset: DatasetConfig) -> pl.DataFrame:
    """One row per normalized address with counts and identity flags."""
    counts = address_fact.group_by("address").agg([
        (pl.col("role") == "from").sum().cast(pl.Int64).alias("sent"),
        (pl.col("role") == "to").sum().cast(pl.Int64).alias("received"),
    ])

    # Most frequent display name, ties broken alphabetically
    names = (
        address_fact.filter(pl.col("name") != "")
        .group_by(["address", "name"])
        .agg(pl.len().alias("n"))
        .sort(["address", "n", "name"], descending=[False, True, False])
        .group_by("address", maintain_order=True)
        .agg(pl.col("name").first().alias("display_name"))
    )

    dim = counts.join(names, on="address", how="left").with_columns(
        pl.col("display_name").fill_null("")
    )

    internal_domains = pl.Series([d.lower() for d in dataset.internal_domains], dtype=pl.String)
    domain_expr = pl.col("address").str.split("@").list.last()
    return dim.with_columns([
        domain_expr.alias("domain"),
        domain_expr.is_in(internal_domains).alias("is_internal"),
        (
            pl.col("address").str.contains(DISTRIBUTION_LIST_PATTERN)
            | pl.col("display_name").str.contains(DISTRIBUTION_LIST_PATTERN)
        ).alias("is_distribution_list"),
    ]).sort("address")


def build_tables(message_fact: pl.DataFrame, config: AppConfig, dataset: DatasetConfig, write: bool = True):
    """Build both tables and optionally write them next to message_fact."""
    address_fact = build_address_fact(message_fact)
    address_dim = build_address_dim(address_fact, dataset)
    if write:
        address_fact.write_parquet(config.output_path(config.address_fact_file))
        address_dim.write_parquet(config.output_path(config.address_dim_file))
    return address_fact, address_dim
