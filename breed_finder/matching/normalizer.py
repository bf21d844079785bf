"""Z-score normalization fitted on a breed population."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from breed_finder.data.schemas import FEATURE_NAMES
from breed_finder.errors import DataError, DegenerateFeatureError
from breed_finder.matching.population import FeaturePopulation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizationStats:
    """Per-feature mean and sample standard deviation.

    Args:
        means: Feature means in FEATURE_NAMES order.
        stds: Feature standard deviations (ddof=1), all > 0.
        population_size: Number of records the stats were fit on.
    """

    means: tuple[float, ...]
    stds: tuple[float, ...]
    population_size: int

    def as_dict(self) -> dict[str, tuple[float, float]]:
        """Map each feature name to its ``(mean, std)`` pair."""
        return {
            name: (mean, std)
            for name, mean, std in zip(FEATURE_NAMES, self.means, self.stds, strict=True)
        }


def fit(population: FeaturePopulation) -> NormalizationStats:
    """Fit normalization stats on every record of ``population``.

    Args:
        population: Population to fit on.

    Returns:
        NormalizationStats for the population.

    Raises:
        DataError: If the population is empty.
        DegenerateFeatureError: If there are fewer than two records or a
            feature has zero or overflowing standard deviation.
    """
    if population.size == 0:
        raise DataError("Cannot fit normalization on an empty population")
    if population.size < 2:
        raise DegenerateFeatureError(
            "Cannot fit normalization on a single breed: "
            "standard deviation needs at least two records",
            features=FEATURE_NAMES,
        )

    matrix = population.matrix
    with np.errstate(over="ignore", invalid="ignore"):
        means = matrix.mean(axis=0)
        stds = matrix.std(axis=0, ddof=1)

    overflowed = ~np.isfinite(means) | ~np.isfinite(stds)
    if overflowed.any():
        names = tuple(
            name for name, bad in zip(FEATURE_NAMES, overflowed, strict=True) if bad
        )
        raise DegenerateFeatureError(
            f"Feature(s) too large to normalize across {population.size} breeds: "
            f"{', '.join(names)}",
            features=names,
        )

    # Compare values directly: rounding in the mean can leave a constant
    # column with a tiny non-zero std.
    flat = (matrix == matrix[0]).all(axis=0) | (stds == 0)
    constant = tuple(
        name for name, is_flat in zip(FEATURE_NAMES, flat, strict=True) if is_flat
    )
    if constant:
        raise DegenerateFeatureError(
            f"Zero-variance feature(s) across {population.size} breeds: "
            f"{', '.join(constant)}",
            features=constant,
        )

    logger.debug("Fitted normalization on %d breeds", population.size)
    return NormalizationStats(
        means=tuple(float(m) for m in means),
        stds=tuple(float(s) for s in stds),
        population_size=population.size,
    )


def transform(
    stats: NormalizationStats,
    vector: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """Z-score ``vector`` with fitted ``stats``.

    Args:
        stats: Stats returned by ``fit``.
        vector: A single feature vector of length 6, or an ``n x 6`` matrix.

    Returns:
        Normalized array with the same shape as ``vector``.

    Raises:
        ValueError: If the trailing dimension is not the feature count.
    """
    values = np.asarray(vector, dtype=float)
    if values.ndim not in (1, 2) or values.shape[-1] != len(FEATURE_NAMES):
        raise ValueError(
            f"Expected {len(FEATURE_NAMES)} features per vector, got shape {values.shape}"
        )
    return (values - np.asarray(stats.means)) / np.asarray(stats.stds)
