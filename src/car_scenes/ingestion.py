from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from .logging_config import get_logger, log_event


DEFAULT_DATASET_NAME = "cars2017.csv"

COLUMN_MAKE = "Make"
COLUMN_FUEL = "Fuel"
COLUMN_CYLINDERS = "EngineCylinders"
COLUMN_HIGHWAY_MPG = "AverageHighwayMPG"
COLUMN_CITY_MPG = "AverageCityMPG"

REQUIRED_COLUMNS = (
    COLUMN_MAKE,
    COLUMN_FUEL,
    COLUMN_CYLINDERS,
    COLUMN_HIGHWAY_MPG,
    COLUMN_CITY_MPG,
)
NUMERIC_COLUMNS = (COLUMN_CYLINDERS, COLUMN_HIGHWAY_MPG, COLUMN_CITY_MPG)

_logger = get_logger("car_scenes.ingestion")


class DatasetLoadError(RuntimeError):
    """The source table could not be read into records."""


class EmptyDatasetError(DatasetLoadError):
    """The source table parsed cleanly but holds no usable records."""


@dataclass(frozen=True)
class Record:
    make: str
    fuel: str
    cylinders: int
    highway_mpg: float
    city_mpg: float


class DatasetLoader:
    def __init__(self, csv_path: Path | str) -> None:
        self.csv_path = Path(csv_path).expanduser().resolve()
        self._records: tuple[Record, ...] | None = None
        self.dropped_rows = 0

    def load_frame(self) -> pd.DataFrame:
        if not self.csv_path.exists():
            raise DatasetLoadError(f"Dataset not found: {self.csv_path}")

        try:
            df = pd.read_csv(self.csv_path, dtype=str, keep_default_na=False)
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
            raise DatasetLoadError(f"Could not parse dataset {self.csv_path}: {exc}") from exc
        except pd.errors.EmptyDataError as exc:
            raise EmptyDatasetError(f"Dataset is empty: {self.csv_path}") from exc

        df.columns = [str(col).strip() for col in df.columns]
        missing = sorted(set(REQUIRED_COLUMNS) - set(df.columns))
        if missing:
            raise DatasetLoadError(f"Dataset missing required columns: {missing}")

        df = df.loc[:, list(REQUIRED_COLUMNS)].copy()
        for col in (COLUMN_MAKE, COLUMN_FUEL):
            df[col] = df[col].str.strip()
        for col in NUMERIC_COLUMNS:
            df[col] = pd.to_numeric(df[col].str.strip(), errors="coerce")
        return df

    def load_records(self) -> tuple[Record, ...]:
        if self._records is not None:
            return self._records

        df = self.load_frame()
        numeric = df.loc[:, list(NUMERIC_COLUMNS)].to_numpy(dtype=np.float64)
        finite = np.isfinite(numeric).all(axis=1)
        # Cylinder counts must be whole numbers; fractional values are malformed.
        whole_cylinders = np.equal(np.mod(np.nan_to_num(numeric[:, 0]), 1), 0)
        valid = finite & whole_cylinders
        self.dropped_rows = int((~valid).sum())
        if self.dropped_rows:
            log_event(
                _logger,
                "warning",
                "dataset_rows_dropped",
                path=str(self.csv_path),
                dropped_rows=self.dropped_rows,
            )

        records = tuple(
            Record(
                make=str(row[COLUMN_MAKE]),
                fuel=str(row[COLUMN_FUEL]),
                cylinders=int(row[COLUMN_CYLINDERS]),
                highway_mpg=float(row[COLUMN_HIGHWAY_MPG]),
                city_mpg=float(row[COLUMN_CITY_MPG]),
            )
            for _, row in df.loc[valid].iterrows()
        )
        if not records:
            raise EmptyDatasetError(f"Dataset has no usable records: {self.csv_path}")

        log_event(
            _logger,
            "info",
            "dataset_loaded",
            path=str(self.csv_path),
            records=len(records),
        )
        self._records = records
        return records
