#!/usr/bin/env python3
"""Breed Finder: single entry point.

Loads the cleaned AKC breed table, builds the matching session, and either
prints the breeds most similar to one breed or serves the JSON API.

Usage:
    python main.py
    python main.py --data data/cleaned_data.csv --port 8000
    python main.py --similar-to "Golden Retriever" --k 5
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("breed-finder")


def _format_matches(matches: list) -> str:
    """Render ranked matches as a plain-text table."""
    rows = [
        {"rank": rank, "breed": m.breed.name, "distance": round(m.distance, 4)}
        for rank, m in enumerate(matches, start=1)
    ]
    return pd.DataFrame(rows).to_string(index=False)


def main() -> None:
    """Load data, build the matcher, then print matches or serve the API."""
    parser = argparse.ArgumentParser(description="Dog breed similarity finder")
    parser.add_argument(
        "--data", type=Path, default=None, help="Path to the cleaned breed CSV"
    )
    parser.add_argument(
        "--similar-to",
        type=str,
        default=None,
        help="Print the breeds most similar to this breed and exit",
    )
    parser.add_argument(
        "--k", type=int, default=None, help="Number of similar breeds"
    )
    parser.add_argument("--port", type=int, default=None, help="Server port")
    parser.add_argument("--host", type=str, default=None, help="Server host")
    args = parser.parse_args()

    from breed_finder.config import get_config
    from breed_finder.data.loader import load_breed_table
    from breed_finder.errors import BreedFinderError, InvalidKError
    from breed_finder.matching.matcher import BreedMatcher

    config = get_config()
    data_path = args.data or config.data_path

    try:
        table = load_breed_table(data_path)
        matcher = BreedMatcher.from_records(table, default_k=config.default_k)
    except BreedFinderError as exc:
        logger.error("Cannot build breed matcher: %s", exc)
        sys.exit(1)

    if args.similar_to:
        try:
            if args.k is not None and args.k > config.max_k:
                raise InvalidKError(args.k, 1, config.max_k)
            response = matcher.find_similar(args.similar_to, k=args.k)
        except BreedFinderError as exc:
            logger.error("%s", exc)
            sys.exit(1)
        print(f"Breeds most similar to {args.similar_to}:")
        print(_format_matches(response.results))
        return

    host = args.host or config.host
    port = args.port or config.port
    logger.info("Launching API on %s:%d", host, port)
    import uvicorn

    from breed_finder.api.app import create_app

    uvicorn.run(create_app(matcher), host=host, port=port)


if __name__ == "__main__":
    main()
