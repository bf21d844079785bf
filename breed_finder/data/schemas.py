"""Pydantic models for breed records and match results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Feature order shared by records, stats, preference vectors and the index.
FEATURE_NAMES: tuple[str, ...] = (
    "popularity",
    "trainability",
    "demeanor",
    "energy_level",
    "min_height",
    "max_height",
)

# Columns that may hold the breed name, in order of preference. R exports
# write it as an unnamed leading column (`...1` in R, `Unnamed: 0` in pandas).
NAME_COLUMNS: tuple[str, ...] = ("name", "Breed", "breed", "...1", "Unnamed: 0")

# Column names used by the cleaned AKC dataset for each feature.
SOURCE_COLUMNS: dict[str, str] = {
    "popularity": "popularity",
    "trainability": "trainability_value",
    "demeanor": "demeanor_value",
    "energy_level": "energy_level_value",
    "min_height": "min_height",
    "max_height": "max_height",
}


class BreedRecord(BaseModel):
    """One complete breed row from the feature table."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Breed name, unique within a population")
    popularity: float = Field(description="AKC popularity rank")
    trainability: float = Field(description="Trainability score, 0 to 1")
    demeanor: float = Field(description="Demeanor score, 0 to 1")
    energy_level: float = Field(description="Energy level score, 0 to 1")
    min_height: float = Field(description="Minimum height in inches")
    max_height: float = Field(description="Maximum height in inches")

    def feature_vector(self) -> tuple[float, ...]:
        """Return the six features in FEATURE_NAMES order."""
        return tuple(getattr(self, name) for name in FEATURE_NAMES)


class BreedMatch(BaseModel):
    """A single ranked match returned to callers."""

    model_config = ConfigDict(frozen=True)

    breed: BreedRecord
    distance: float = Field(description="Euclidean distance in z-score space")


class MatchResponse(BaseModel):
    """Full response from a matching query."""

    query: str = Field(description="Breed name or a summary of the preferences")
    query_type: str = Field(description="'example' or 'preference'")
    results: list[BreedMatch] = Field(default_factory=list)
    total_hits: int = Field(default=0)
    search_time_ms: float = Field(default=0.0)


class PreferenceRequest(BaseModel):
    """Trait preferences submitted by a user, in raw feature units."""

    popularity: float
    trainability: float
    demeanor: float
    energy_level: float
    min_height: float
    max_height: float
    k: int | None = Field(default=None, description="Number of breeds to return")

    def to_vector(self) -> tuple[float, ...]:
        """Return the preferences in FEATURE_NAMES order."""
        return tuple(getattr(self, name) for name in FEATURE_NAMES)


class FeatureStats(BaseModel):
    """Fitted mean and standard deviation of one feature."""

    feature: str
    mean: float
    std: float


class StatsResponse(BaseModel):
    """Normalization statistics of the current population."""

    population_size: int
    features: list[FeatureStats] = Field(default_factory=list)
