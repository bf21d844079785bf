"""Shared test fixtures for the Breed Finder test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from breed_finder.data.schemas import BreedRecord
from breed_finder.matching.matcher import BreedMatcher, MatchingSession, build_session


def _row(
    name: str,
    popularity: float,
    trainability: float,
    demeanor: float,
    energy: float,
    min_height: float,
    max_height: float,
) -> dict:
    """Build a raw row using the cleaned dataset's column names."""
    return {
        "name": name,
        "popularity": popularity,
        "trainability_value": trainability,
        "demeanor_value": demeanor,
        "energy_level_value": energy,
        "min_height": min_height,
        "max_height": max_height,
    }


@pytest.fixture
def toy_rows() -> list[dict]:
    """Four well-separated breeds; Golden and Labrador are the nearest pair."""
    return [
        _row("Golden Retriever", 3, 1.0, 0.8, 0.8, 21.5, 24.0),
        _row("Labrador Retriever", 1, 1.0, 0.8, 0.8, 21.5, 24.5),
        _row("Chihuahua", 33, 0.4, 0.6, 0.6, 5.0, 8.0),
        _row("Great Dane", 17, 0.6, 1.0, 0.4, 28.0, 32.0),
    ]


@pytest.fixture
def raw_rows(toy_rows: list[dict]) -> list[dict]:
    """Dataset-like rows with a duplicate and an incomplete record."""
    return [
        *toy_rows,
        _row("Chihuahua", 99, 0.1, 0.1, 0.1, 4.0, 5.0),
        _row("Akita", 47, None, 0.6, 0.6, 24.0, 28.0),
        _row("Beagle", 6, 0.6, 0.6, 0.8, 13.0, 15.0),
    ]


@pytest.fixture
def twin_rows(toy_rows: list[dict]) -> list[dict]:
    """Toy rows plus two breeds with bit-identical features."""
    return [
        *toy_rows,
        _row("Twin A", 50, 0.5, 0.5, 0.5, 15.0, 18.0),
        _row("Twin B", 50, 0.5, 0.5, 0.5, 15.0, 18.0),
    ]


@pytest.fixture
def session(toy_rows: list[dict]) -> MatchingSession:
    """Matching session built from the toy breeds."""
    return build_session(toy_rows)


@pytest.fixture
def matcher(raw_rows: list[dict]) -> BreedMatcher:
    """Breed matcher built from the dataset-like rows."""
    return BreedMatcher.from_records(raw_rows, default_k=2)


@pytest.fixture
def sample_breed_record() -> BreedRecord:
    """Create a sample BreedRecord for testing."""
    return BreedRecord(
        name="Golden Retriever",
        popularity=3,
        trainability=1.0,
        demeanor=0.8,
        energy_level=0.8,
        min_height=21.5,
        max_height=24.0,
    )


@pytest.fixture
def breed_csv(tmp_path: Path, raw_rows: list[dict]) -> Path:
    """Write the dataset-like rows as an R-style CSV with an unnamed name column."""
    header = [
        "",
        "popularity",
        "trainability_value",
        "demeanor_value",
        "energy_level_value",
        "min_height",
        "max_height",
    ]
    lines = [",".join(header)]
    for row in raw_rows:
        values = [row["name"]] + [
            "" if row[column] is None else str(row[column]) for column in header[1:]
        ]
        lines.append(",".join(values))

    csv_path = tmp_path / "cleaned_data.csv"
    csv_path.write_text("\n".join(lines) + "\n")
    return csv_path
