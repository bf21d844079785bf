"""Load the cleaned AKC breed table from CSV."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from breed_finder.data.schemas import FEATURE_NAMES, NAME_COLUMNS, SOURCE_COLUMNS
from breed_finder.errors import DataError

logger = logging.getLogger(__name__)


def load_breed_table(csv_path: Path) -> pd.DataFrame:
    """Read the cleaned breed CSV into a DataFrame.

    The breed name column is renamed to ``name``. R exports write it as an
    unnamed leading column, which pandas reads as ``Unnamed: 0``. No rows
    are dropped here; see ``build_population``.

    Args:
        csv_path: Path to the cleaned CSV file.

    Returns:
        DataFrame with a ``name`` column and the six feature columns.

    Raises:
        DataError: If the file is missing or required columns are absent.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise DataError(f"Breed data file not found: {csv_path}")

    logger.info("Loading breed table from %s", csv_path)
    df = pd.read_csv(csv_path)

    name_column = next((c for c in NAME_COLUMNS if c in df.columns), None)
    if name_column is None:
        raise DataError(
            f"No breed name column in {csv_path}; expected one of {NAME_COLUMNS}"
        )
    if name_column != "name":
        df = df.rename(columns={name_column: "name"})

    missing = [
        SOURCE_COLUMNS[feature]
        for feature in FEATURE_NAMES
        if SOURCE_COLUMNS[feature] not in df.columns and feature not in df.columns
    ]
    if missing:
        raise DataError(
            f"Missing feature columns in {csv_path}: {', '.join(missing)}",
            column=missing[0],
        )

    logger.info("Loaded %d rows with %d columns", len(df), len(df.columns))
    return df
