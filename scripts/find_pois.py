"""CLI entrypoint for finding the amenities a group of people can walk to."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Sequence, TextIO

import orjson

from walkshed.find import find_pois
from walkshed.logger import LoggingMode
from walkshed.poi import pois_to_feature_collection
from walkshed.request import Person, Request
from walkshed.search.cost import DEFAULT_WALKING_SPEED_MPS

# region Configuration

LOGGER = logging.getLogger(__name__)
MIN_COORDINATE_COMPONENTS = 2

# endregion Configuration


# region I/O Helpers


def echo(message: str = "", *, stream: TextIO | None = None) -> None:
    """Write a line to the chosen stream (stdout by default) and flush."""
    stream = stream or sys.stdout
    stream.write(f"{message}\n")
    stream.flush()


def load_request(path: Path) -> Request:
    """Read a request document of the form {"people": [...]}."""
    raw_contents = path.read_bytes()
    if not raw_contents.strip():
        raise ValueError("The request file is empty.")

    try:
        document = orjson.loads(raw_contents)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"Unable to parse JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise ValueError("Request must be a JSON object.")

    people = document.get("people")
    if not isinstance(people, list):
        raise ValueError("Request must contain a 'people' array.")

    speed = document.get("walking_speed_mps", DEFAULT_WALKING_SPEED_MPS)
    return Request(
        people=[extract_person(item, idx + 1) for idx, item in enumerate(people)],
        walking_speed_mps=positive_speed(speed, "Request walking_speed_mps"),
    )


def extract_person(item: object, index: int) -> Person:
    """Return a `Person` from one entry of the request's people array."""
    if not isinstance(item, dict):
        raise TypeError(f"Person #{index} must be an object.")

    home = item.get("home")
    if not isinstance(home, (list, tuple)):
        raise TypeError(f"Person #{index} home must be a [lon, lat] list.")
    if len(home) < MIN_COORDINATE_COMPONENTS:
        raise ValueError(f"Person #{index} is missing longitude/latitude values.")

    try:
        lon = float(home[0])
        lat = float(home[1])
        minutes = int(item["max_time_minutes"])
    except KeyError as exc:
        raise ValueError(f"Person #{index} is missing {exc.args[0]!r}.") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Person #{index} has non-numeric fields.") from exc

    speed = item.get("walking_speed_mps")
    return Person(
        name=str(item.get("name", f"person-{index}")),
        home=(lon, lat),
        max_time_minutes=minutes,
        walking_speed_mps=(
            None
            if speed is None
            else positive_speed(speed, f"Person #{index} walking_speed_mps")
        ),
    )


def positive_speed(value: object, label: str) -> float:
    """Return `value` as a finite, positive walking speed."""
    try:
        speed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} must be numeric.") from exc
    if not math.isfinite(speed) or speed <= 0:
        raise ValueError(f"{label} must be a positive number.")
    return speed


# endregion I/O Helpers


# region CLI


def run_cli(args: argparse.Namespace) -> None:
    """Answer one request file against a graph file and print the POIs."""
    try:
        request = load_request(args.request)
    except (TypeError, ValueError) as exc:
        echo(f"Invalid request: {exc}", stream=sys.stderr)
        sys.exit(1)

    pois = find_pois(
        request,
        graph_path=args.graph,
        workers=args.workers,
        logging_mode=args.logging,
    )
    LOGGER.info("Found %d POIs for %d people", len(pois), len(request.people))

    if args.geojson:
        document: object = pois_to_feature_collection(pois)
    else:
        document = [poi.to_dict() for poi in pois]
    echo(orjson.dumps(document, option=orjson.OPT_INDENT_2).decode())


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments."""
    parser = argparse.ArgumentParser(
        description="List the amenities each person can reach on foot.",
    )
    parser.add_argument(
        "--graph",
        type=Path,
        default=None,
        help="Node-link JSON graph file (default: $WALKSHED_GRAPH or assets/).",
    )
    parser.add_argument(
        "--request",
        type=Path,
        required=True,
        help="JSON file with a 'people' array of {name, home, max_time_minutes}.",
    )
    parser.add_argument(
        "--geojson",
        action="store_true",
        help="Emit a GeoJSON FeatureCollection instead of a POI list.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Run per-person searches on this many threads.",
    )
    parser.add_argument(
        "--logging",
        choices=[mode.value for mode in LoggingMode],
        default=LoggingMode.NONE.value,
        help="Pipeline phase logging verbosity.",
    )
    parser.set_defaults(func=run_cli)
    return parser.parse_args(argv)


def _configure_logging() -> None:
    """Configure a simple logging formatter for CLI runs."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    _configure_logging()
    args = parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()

# endregion CLI
