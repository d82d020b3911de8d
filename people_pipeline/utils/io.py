"""File I/O utilities for reading and writing pipeline data."""

import logging
from pathlib import Path

import pandas as pd

type FilePath = str | Path

logger = logging.getLogger(__name__)

READ_ENCODINGS = ("utf-8", "latin-1", "cp1252")


def read_export_file(path: FilePath, **read_kwargs) -> pd.DataFrame:
    """Read a single CSV export, handling encoding quirks."""
    for encoding in READ_ENCODINGS:
        try:
            return pd.read_csv(path, encoding=encoding, **read_kwargs)
        except UnicodeDecodeError:
            continue
    raise ValueError(f"Could not decode {path}")


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> Path:
    """Write a DataFrame to the specified format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            df.to_csv(path, index=False)
        case "parquet":
            df.to_parquet(path, index=False)
        case "json":
            df.to_json(path, orient="records", indent=2, date_format="iso")
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    logger.info("Wrote %d rows to %s", len(df), path)
    return path

