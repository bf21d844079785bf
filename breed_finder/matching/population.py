"""Build the deduplicated, complete breed population used for matching."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from breed_finder.data.schemas import (
    FEATURE_NAMES,
    NAME_COLUMNS,
    SOURCE_COLUMNS,
    BreedRecord,
)
from breed_finder.errors import DataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeaturePopulation:
    """Ordered, immutable set of complete breed records.

    Position in ``records`` is the identity used by the neighbor index.

    Args:
        records: Breed records with unique names, in population order.
    """

    records: tuple[BreedRecord, ...]
    matrix: np.ndarray = field(init=False, repr=False, compare=False)
    _positions: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        positions: dict[str, int] = {}
        for position, record in enumerate(self.records):
            if record.name in positions:
                raise DataError(
                    f"Duplicate breed name in population: {record.name!r}",
                    breed=record.name,
                )
            positions[record.name] = position

        matrix = np.array(
            [record.feature_vector() for record in self.records],
            dtype=float,
        ).reshape(len(self.records), len(FEATURE_NAMES))
        matrix.setflags(write=False)

        object.__setattr__(self, "matrix", matrix)
        object.__setattr__(self, "_positions", positions)

    @property
    def size(self) -> int:
        return len(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def position_of(self, name: str) -> int | None:
        """Return the population position of ``name``, or None if absent."""
        return self._positions.get(name)

    def record_at(self, position: int) -> BreedRecord:
        return self.records[position]


def build_population(
    records: pd.DataFrame | Iterable[Mapping[str, Any]],
) -> FeaturePopulation:
    """Build a FeaturePopulation from raw breed rows.

    Rows are deduplicated by breed name (first occurrence wins), rows
    missing any of the six features are dropped, and the remaining
    feature values are coerced to float.

    Args:
        records: DataFrame or iterable of row mappings. Feature values are
            read from the dataset column names (``trainability_value``...)
            or from the plain feature names.

    Returns:
        FeaturePopulation in order of first appearance.

    Raises:
        DataError: If a row has no breed name, or a kept row holds a value
            that cannot be coerced to a finite number.
    """
    if isinstance(records, pd.DataFrame):
        rows: Iterable[Mapping[str, Any]] = records.to_dict(orient="records")
    else:
        rows = records

    first_seen: dict[str, Mapping[str, Any]] = {}
    total = 0
    for row in rows:
        total += 1
        name = _row_name(row)
        if name not in first_seen:
            first_seen[name] = row

    complete: list[BreedRecord] = []
    dropped: list[str] = []
    for name, row in first_seen.items():
        raw = {feature: _feature_value(row, feature) for feature in FEATURE_NAMES}
        if any(_is_missing(value) for value in raw.values()):
            dropped.append(name)
            continue
        values = {
            feature: _coerce(name, feature, value) for feature, value in raw.items()
        }
        complete.append(BreedRecord(name=name, **values))

    if dropped:
        logger.debug("Dropped incomplete breeds: %s", ", ".join(dropped))
    logger.info(
        "Built population: %d rows, %d unique breeds, %d complete, %d dropped",
        total,
        len(first_seen),
        len(complete),
        len(dropped),
    )
    return FeaturePopulation(records=tuple(complete))


def _row_name(row: Mapping[str, Any]) -> str:
    for key in NAME_COLUMNS:
        if key in row and not _is_missing(row[key]):
            return str(row[key])
    raise DataError(f"Row has no breed name: {dict(row)!r}", column="name")


def _feature_value(row: Mapping[str, Any], feature: str) -> Any:
    source = SOURCE_COLUMNS[feature]
    if source in row:
        return row[source]
    return row.get(feature)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Array-like values are not missing; coercion rejects them.
        return False


def _coerce(name: str, feature: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise DataError(
            f"Breed {name!r}: {SOURCE_COLUMNS[feature]} value {value!r} is not numeric",
            breed=name,
            column=SOURCE_COLUMNS[feature],
        ) from exc
    if not math.isfinite(number):
        raise DataError(
            f"Breed {name!r}: {SOURCE_COLUMNS[feature]} value {value!r} is not finite",
            breed=name,
            column=SOURCE_COLUMNS[feature],
        )
    return number
