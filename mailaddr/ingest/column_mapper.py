"""Configurable column mapping for well-formed header CSVs."""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from mailaddr.config import DatasetConfig


@dataclass
class ColumnMapping:
    """Maps CSV column names to expected internal names."""
    date: str = "Date"
    from_addr: str = "From"
    to_addr: str = "To"

    @classmethod
    def from_dataset(cls, dataset: DatasetConfig) -> "ColumnMapping":
        return cls(date=dataset.date_col, from_addr=dataset.from_col, to_addr=dataset.to_col)

    def map_row(self, row: dict) -> dict:
        """Map a raw row dict to internal field names."""
        return {
            "date": row.get(self.date) or "",
            "from_raw": row.get(self.from_addr) or "",
            "to_raw": row.get(self.to_addr) or "",
        }


def parse_dict_csv(csv_path: Path, mapping: ColumnMapping = None) -> Iterator[dict]:
    """Read a properly quoted CSV with a header row and yield mapped rows."""
    if mapping is None:
        mapping = ColumnMapping()
    with open(csv_path, "r", encoding="utf-8", errors="replace", newline="") as f:
        for row in csv.DictReader(f):
            yield mapping.map_row(row)
