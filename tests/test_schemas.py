"""Tests for breed_finder/data/schemas.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from breed_finder.data.schemas import (
    FEATURE_NAMES,
    SOURCE_COLUMNS,
    BreedMatch,
    BreedRecord,
    MatchResponse,
    PreferenceRequest,
)


class TestFeatureNames:
    """Tests for the feature ordering constants."""

    def test_six_features(self) -> None:
        """There should be six features in a fixed order."""
        assert FEATURE_NAMES == (
            "popularity",
            "trainability",
            "demeanor",
            "energy_level",
            "min_height",
            "max_height",
        )

    def test_every_feature_has_source_column(self) -> None:
        """Each feature should map to a dataset column."""
        assert set(SOURCE_COLUMNS) == set(FEATURE_NAMES)
        assert SOURCE_COLUMNS["trainability"] == "trainability_value"


class TestBreedRecord:
    """Tests for BreedRecord model."""

    def test_feature_vector_order(self, sample_breed_record: BreedRecord) -> None:
        """feature_vector should follow FEATURE_NAMES."""
        assert sample_breed_record.feature_vector() == (3.0, 1.0, 0.8, 0.8, 21.5, 24.0)

    def test_frozen(self, sample_breed_record: BreedRecord) -> None:
        """Records should be immutable."""
        with pytest.raises(ValidationError):
            sample_breed_record.popularity = 10  # type: ignore[misc]

    def test_missing_field_raises(self) -> None:
        """All six features are required."""
        with pytest.raises(ValidationError):
            BreedRecord(name="Pug", popularity=1)  # type: ignore[call-arg]

    def test_model_dump(self, sample_breed_record: BreedRecord) -> None:
        """model_dump should return all fields."""
        data = sample_breed_record.model_dump()
        assert data["name"] == "Golden Retriever"
        assert data["max_height"] == 24.0


class TestMatchResponse:
    """Tests for MatchResponse model."""

    def test_empty_response(self) -> None:
        """Defaults should describe an empty result."""
        response = MatchResponse(query="Pug", query_type="example")
        assert response.results == []
        assert response.total_hits == 0
        assert response.search_time_ms == 0.0

    def test_serialization(self, sample_breed_record: BreedRecord) -> None:
        """Responses should serialize matches with their distance."""
        response = MatchResponse(
            query="Labrador Retriever",
            query_type="example",
            results=[BreedMatch(breed=sample_breed_record, distance=0.25)],
            total_hits=1,
        )
        data = response.model_dump()
        assert data["results"][0]["distance"] == 0.25
        assert data["results"][0]["breed"]["name"] == "Golden Retriever"


class TestPreferenceRequest:
    """Tests for PreferenceRequest model."""

    def test_to_vector(self) -> None:
        """to_vector should follow FEATURE_NAMES."""
        request = PreferenceRequest(
            popularity=50,
            trainability=0.5,
            demeanor=0.4,
            energy_level=0.3,
            min_height=20,
            max_height=30,
        )
        assert request.to_vector() == (50.0, 0.5, 0.4, 0.3, 20.0, 30.0)
        assert request.k is None

    def test_non_numeric_rejected(self) -> None:
        """Non-numeric trait values should fail validation."""
        with pytest.raises(ValidationError):
            PreferenceRequest(
                popularity="lots",  # type: ignore[arg-type]
                trainability=0.5,
                demeanor=0.4,
                energy_level=0.3,
                min_height=20,
                max_height=30,
            )
