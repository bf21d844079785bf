"""Typed errors raised by the breed matching engine."""

from __future__ import annotations


class BreedFinderError(Exception):
    """Base class for all breed finder errors."""


class DataError(BreedFinderError):
    """Input data is missing, malformed, or not numeric.

    Args:
        message: Human-readable description.
        breed: Breed name of the offending row, if known.
        column: Column that failed validation, if known.
    """

    def __init__(
        self,
        message: str,
        breed: str | None = None,
        column: str | None = None,
    ) -> None:
        super().__init__(message)
        self.breed = breed
        self.column = column


class DegenerateFeatureError(BreedFinderError):
    """A feature cannot be z-scored because it has no spread."""

    def __init__(self, message: str, features: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.features = features


class BreedNotFoundError(BreedFinderError):
    """The requested breed is not part of the population."""

    def __init__(self, breed: str) -> None:
        super().__init__(f"Breed not found: {breed!r}")
        self.breed = breed


class InvalidPreferenceError(BreedFinderError):
    """A preference vector is missing values or holds non-numeric ones."""

    def __init__(self, message: str, feature: str | None = None) -> None:
        super().__init__(message)
        self.feature = feature


class InvalidKError(BreedFinderError):
    """The requested neighbor count is outside the valid range."""

    def __init__(self, k: object, low: int, high: int) -> None:
        if high < low:
            message = f"Invalid k={k!r}: not enough breeds to return any match"
        else:
            message = f"Invalid k={k!r}: must be an integer in [{low}, {high}]"
        super().__init__(message)
        self.k = k
        self.low = low
        self.high = high
