"""Breed matching by example breed or by trait preferences."""

from __future__ import annotations

import logging
import math
import numbers
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from breed_finder.data.schemas import (
    FEATURE_NAMES,
    BreedMatch,
    MatchResponse,
    PreferenceRequest,
)
from breed_finder.errors import BreedNotFoundError, DataError, InvalidPreferenceError
from breed_finder.matching import neighbors, normalizer
from breed_finder.matching.neighbors import NeighborIndex
from breed_finder.matching.normalizer import NormalizationStats
from breed_finder.matching.population import FeaturePopulation, build_population

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MatchingSession:
    """Population, normalization stats and index built from one snapshot.

    Args:
        population: Complete, deduplicated breed records.
        stats: Stats fitted on ``population``.
        index: Index over ``population`` normalized with ``stats``.
    """

    population: FeaturePopulation
    stats: NormalizationStats
    index: NeighborIndex

    @property
    def population_size(self) -> int:
        return self.population.size

    @property
    def breed_names(self) -> list[str]:
        return [record.name for record in self.population.records]

    def match_by_example(self, breed_name: str, k: int) -> list[BreedMatch]:
        """Find the ``k`` breeds closest to an existing breed.

        The breed itself is never part of the result.

        Args:
            breed_name: Exact, case-sensitive breed name.
            k: Number of matches, between 1 and ``population_size - 1``.

        Returns:
            BreedMatch list by ascending distance.

        Raises:
            BreedNotFoundError: If ``breed_name`` is not in the population.
            InvalidKError: If ``k`` is out of range.
        """
        position = self.population.position_of(breed_name)
        if position is None:
            raise BreedNotFoundError(breed_name)
        neighbors.check_k(k, self.population_size - 1)

        hits = neighbors.query(self.index, self.index.vectors[position], k + 1)
        hits = [(pos, distance) for pos, distance in hits if pos != position][:k]
        return self._to_matches(hits)

    def match_by_preference(
        self,
        preference_vector: Sequence[Any] | Mapping[str, Any],
        k: int,
    ) -> list[BreedMatch]:
        """Find the ``k`` breeds closest to a set of raw trait values.

        The preferences are normalized with the population's stats.

        Args:
            preference_vector: Six values in FEATURE_NAMES order, or a
                mapping keyed by feature name.
            k: Number of matches, between 1 and ``population_size``.

        Returns:
            BreedMatch list by ascending distance.

        Raises:
            InvalidPreferenceError: If a value is missing, not a finite number,
                or too large to measure a distance from.
            InvalidKError: If ``k`` is out of range.
        """
        raw = validate_preferences(preference_vector)
        neighbors.check_k(k, self.population_size)

        with np.errstate(over="ignore", invalid="ignore"):
            query = normalizer.transform(self.stats, raw)
            hits = neighbors.query(self.index, query, k)
        if not np.isfinite(query).all() or not all(
            math.isfinite(distance) for _, distance in hits
        ):
            feature = _largest_feature(query)
            raise InvalidPreferenceError(
                f"Preference for {feature} is too far outside the breed data "
                f"to measure distances: {float(raw[FEATURE_NAMES.index(feature)]):g}",
                feature=feature,
            )
        return self._to_matches(hits)

    def _to_matches(self, hits: list[tuple[int, float]]) -> list[BreedMatch]:
        return [
            BreedMatch(breed=self.population.record_at(position), distance=distance)
            for position, distance in hits
        ]


def build_session(records: pd.DataFrame | Iterable[Mapping[str, Any]]) -> MatchingSession:
    """Build population, stats and index together from raw rows.

    Raises:
        DataError: If the rows cannot form a population or normalize to
            non-finite values.
        DegenerateFeatureError: If the population cannot be normalized.
    """
    population = build_population(records)
    stats = normalizer.fit(population)
    with np.errstate(over="ignore", invalid="ignore"):
        normalized = normalizer.transform(stats, population.matrix)
    finite = np.isfinite(normalized).all(axis=0)
    if not finite.all():
        column = FEATURE_NAMES[int(np.argmin(finite))]
        raise DataError(
            f"Normalized {column} values overflow; the breed data is out of range",
            column=column,
        )
    index = neighbors.build(normalized)
    logger.info("Matching session ready with %d breeds", population.size)
    return MatchingSession(population=population, stats=stats, index=index)


def _largest_feature(query: np.ndarray) -> str:
    """Name the feature whose normalized value is furthest from zero."""
    magnitudes = np.where(np.isfinite(query), np.abs(query), np.inf)
    return FEATURE_NAMES[int(np.argmax(magnitudes))]


def validate_preferences(
    preference_vector: Sequence[Any] | Mapping[str, Any],
) -> np.ndarray:
    """Check a raw preference vector and return it as a float array.

    Raises:
        InvalidPreferenceError: On wrong length, missing, non-numeric or
            non-finite values.
    """
    if isinstance(preference_vector, Mapping):
        missing = [name for name in FEATURE_NAMES if name not in preference_vector]
        if missing:
            raise InvalidPreferenceError(
                f"Missing preference for {missing[0]}", feature=missing[0]
            )
        values = [preference_vector[name] for name in FEATURE_NAMES]
    elif isinstance(preference_vector, (str, bytes)):
        raise InvalidPreferenceError("Preferences must be a sequence of numbers")
    else:
        try:
            values = list(preference_vector)
        except TypeError as exc:
            raise InvalidPreferenceError(
                "Preferences must be a sequence of numbers"
            ) from exc

    if len(values) != len(FEATURE_NAMES):
        raise InvalidPreferenceError(
            f"Expected {len(FEATURE_NAMES)} preferences "
            f"({', '.join(FEATURE_NAMES)}), got {len(values)}"
        )

    for name, value in zip(FEATURE_NAMES, values, strict=True):
        if value is None:
            raise InvalidPreferenceError(f"Missing preference for {name}", feature=name)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidPreferenceError(
                f"Preference for {name} is not numeric: {value!r}", feature=name
            )
        if not math.isfinite(value):
            raise InvalidPreferenceError(
                f"Preference for {name} is not a finite number: {value!r}",
                feature=name,
            )
    return np.array(values, dtype=float)


class BreedMatcher:
    """Query service holding the current matching session.

    ``reload`` builds a complete new session before replacing the old one,
    so each query runs against a single consistent snapshot.

    Args:
        session: Initial session, usually from ``build_session``.
        default_k: Match count used when a query does not give one.
    """

    def __init__(self, session: MatchingSession, default_k: int = 5) -> None:
        self._session = session
        self.default_k = default_k

    @classmethod
    def from_records(
        cls,
        records: pd.DataFrame | Iterable[Mapping[str, Any]],
        default_k: int = 5,
    ) -> BreedMatcher:
        return cls(build_session(records), default_k=default_k)

    @property
    def session(self) -> MatchingSession:
        return self._session

    @property
    def stats(self) -> NormalizationStats:
        return self._session.stats

    @property
    def population_size(self) -> int:
        return self._session.population_size

    def reload(self, records: pd.DataFrame | Iterable[Mapping[str, Any]]) -> None:
        """Rebuild the session from new rows and swap it in.

        On failure the current session stays in place.
        """
        session = build_session(records)
        self._session = session
        logger.info("Reloaded matching session: %d breeds", session.population_size)

    def match_by_example(self, breed_name: str, k: int) -> list[BreedMatch]:
        return self._session.match_by_example(breed_name, k)

    def match_by_preference(
        self,
        preference_vector: Sequence[Any] | Mapping[str, Any],
        k: int,
    ) -> list[BreedMatch]:
        return self._session.match_by_preference(preference_vector, k)

    def find_similar(self, breed_name: str, k: int | None = None) -> MatchResponse:
        """Run ``match_by_example`` and wrap the result in a MatchResponse."""
        start = time.monotonic()
        results = self.match_by_example(
            breed_name, k if k is not None else self.default_k
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        return MatchResponse(
            query=breed_name,
            query_type="example",
            results=results,
            total_hits=len(results),
            search_time_ms=round(elapsed_ms, 1),
        )

    def find_by_preferences(self, request: PreferenceRequest) -> MatchResponse:
        """Run ``match_by_preference`` and wrap the result in a MatchResponse."""
        start = time.monotonic()
        k = request.k if request.k is not None else self.default_k
        results = self.match_by_preference(request.to_vector(), k)
        elapsed_ms = (time.monotonic() - start) * 1000

        return MatchResponse(
            query=_describe_preferences(request),
            query_type="preference",
            results=results,
            total_hits=len(results),
            search_time_ms=round(elapsed_ms, 1),
        )


def _describe_preferences(request: PreferenceRequest) -> str:
    return ", ".join(
        f"{name}={value:g}"
        for name, value in zip(FEATURE_NAMES, request.to_vector(), strict=True)
    )
