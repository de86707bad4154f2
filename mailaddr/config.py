"""Configuration dataclasses for address parsing and header ingestion."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

MATCH_TIMEOUT_ENV = "MAILADDR_MATCH_TIMEOUT"


@dataclass(frozen=True)
class ParserConfig:
    """Settings shared by every parse call in the process."""
    match_timeout: float = 1.0  # seconds per regex match

    @classmethod
    def from_env(cls) -> "ParserConfig":
        raw = os.environ.get(MATCH_TIMEOUT_ENV, "").strip()
        if not raw:
            return cls()
        try:
            timeout = float(raw)
        except ValueError as e:
            raise ValueError(f"{MATCH_TIMEOUT_ENV} must be a number of seconds, got {raw!r}") from e
        if timeout <= 0:
            raise ValueError(f"{MATCH_TIMEOUT_ENV} must be positive, got {raw!r}")
        return cls(match_timeout=timeout)


@lru_cache(maxsize=1)
def get_parser_config() -> ParserConfig:
    """Return the process-wide parser settings, read from the environment once."""
    return ParserConfig.from_env()


@dataclass
class DatasetConfig:
    """Configuration for a set of header-export CSV files."""
    name: str
    csv_paths: list[Path] = field(default_factory=list)
    date_col: str = "Date"
    from_col: str = "From"
    to_col: str = "To"
    date_format: str = "%m/%d/%Y %H:%M"
    well_formed: bool = False  # quoted CSV readable by csv.DictReader
    internal_domains: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    """Top-level configuration for the ingestion pipeline and CLI."""
    project_root: Path = field(default_factory=Path.cwd)
    data_dir: Path = field(default=None)
    output_dir: Path = field(default=None)

    message_fact_file: str = "message_fact.parquet"
    address_fact_file: str = "address_fact.parquet"
    address_dim_file: str = "address_dim.parquet"

    def __post_init__(self):
        if self.data_dir is None:
            self.data_dir = self.project_root / "data"
        if self.output_dir is None:
            self.output_dir = self.project_root / "output"

    def output_path(self, filename: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / filename

    def discover_csv_files(self) -> list[Path]:
        """Find all CSV files in the data directory, sorted by name."""
        if not self.data_dir.exists():
            return []
        return sorted(self.data_dir.glob("*.csv"))

    @property
    def default_dataset(self) -> DatasetConfig:
        return DatasetConfig(
            name="all-data",
            csv_paths=self.discover_csv_files(),
        )
