"""Central application configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Central application configuration.

    Reads from environment variables with sensible defaults.
    Relative paths are resolved against the working directory.
    """

    # Data
    data_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("BREED_DATA_PATH", "data/cleaned_data.csv")
        )
    )

    # Matching
    default_k: int = 5
    max_k: int = 10

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))


def get_config() -> Config:
    """Get application configuration.

    Returns:
        Config instance with values from environment or defaults.
    """
    return Config()
