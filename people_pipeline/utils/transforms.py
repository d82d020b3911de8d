"""Common data transformation utilities."""

import pandas as pd

type ColumnMapping = dict[str, str]


def snake_case(name) -> str:
    return str(name).strip().lower().replace(" ", "_").replace("-", "_")


def normalize_columns(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> pd.DataFrame:
    """Normalize column names to snake_case and apply optional mapping."""
    df = df.copy()
    df.columns = [snake_case(col) for col in df.columns]

    if mapping:
        df = df.rename(columns=mapping)

    return df


def merge_datasets(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: str | list[str] | None = None,
    how: str = "left",
    **merge_kwargs,
) -> pd.DataFrame:
    """Merge two datasets, rejecting join types the reports never use."""
    match how:
        case "left" | "right" | "inner" | "outer":
            return pd.merge(left, right, on=on, how=how, **merge_kwargs)
        case other:
            raise ValueError(f"Unsupported merge type: {other}")


def full_name(df: pd.DataFrame, first: str = "first_name", last: str = "last_name") -> pd.Series:
    """Display name as ``first last``, tolerating missing parts."""
    first_part = df[first].fillna("").astype(str).str.strip()
    last_part = df[last].fillna("").astype(str).str.strip()
    return (first_part + " " + last_part).str.strip()
