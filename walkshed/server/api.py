"""Flask API surface for exposing walkshed queries."""

from __future__ import annotations

import math

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from walkshed.geo import Coordinate
from walkshed.graph.model import Graph
from walkshed.poi import pois_to_feature_collection
from walkshed.request import Person, Request
from walkshed.search.aggregate import aggregate_pois
from walkshed.search.cost import DEFAULT_WALKING_SPEED_MPS
from walkshed.setup import setup_graph

GRAPH_CONFIG_KEY = "WALKSHED_GRAPH"
WORKERS_CONFIG_KEY = "WALKSHED_WORKERS"


def create_app(graph: Graph | None = None, workers: int | None = None) -> Flask:
    """Build the Flask app around a preloaded graph.

    The graph is loaded from the configured default location when not given.
    """
    app = Flask(__name__)
    app.config[GRAPH_CONFIG_KEY] = graph if graph is not None else setup_graph()
    app.config[WORKERS_CONFIG_KEY] = workers
    app.after_request(_inject_cors)
    app.add_url_rule(
        "/api/pois",
        view_func=find_pois_view,
        methods=["POST", "OPTIONS"],
    )
    return app


def _parse_coordinate(payload: object, label: str) -> Coordinate:
    """Validate that payload looks like {'lat': float, 'lon': float}."""
    if not isinstance(payload, dict):
        msg = f"{label} must be an object with 'lat' and 'lon'."
        raise BadRequest(msg)

    lat = payload.get("lat")
    lon = payload.get("lon")
    if not _is_number(lat) or not _is_number(lon):
        msg = f"{label} must include numeric 'lat' and 'lon' fields."
        raise BadRequest(msg)

    return (float(lon), float(lat))


def _parse_speed(payload: object, label: str) -> float:
    if not _is_number(payload) or payload <= 0:  # type: ignore[operator]
        msg = f"{label} must be a positive number."
        raise BadRequest(msg)
    return float(payload)  # type: ignore[arg-type]


def _parse_person(payload: object, index: int) -> Person:
    label = f"people[{index}]"
    if not isinstance(payload, dict):
        msg = f"{label} must be an object."
        raise BadRequest(msg)

    name = payload.get("name")
    if not isinstance(name, str) or not name:
        msg = f"{label}.name must be a non-empty string."
        raise BadRequest(msg)

    minutes = payload.get("max_time_minutes")
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes < 0:
        msg = f"{label}.max_time_minutes must be a non-negative integer."
        raise BadRequest(msg)

    speed = payload.get("walking_speed_mps")
    return Person(
        name=name,
        home=_parse_coordinate(payload.get("home"), f"{label}.home"),
        max_time_minutes=minutes,
        walking_speed_mps=(
            None if speed is None else _parse_speed(speed, f"{label}.walking_speed_mps")
        ),
    )


def _parse_request(payload: dict[str, object]) -> Request:
    people = payload.get("people")
    if not isinstance(people, list) or not people:
        msg = "people must be a non-empty array of persons."
        raise BadRequest(msg)

    speed = payload.get("walking_speed_mps")
    return Request(
        people=[_parse_person(item, index) for index, item in enumerate(people)],
        walking_speed_mps=(
            DEFAULT_WALKING_SPEED_MPS
            if speed is None
            else _parse_speed(speed, "walking_speed_mps")
        ),
    )


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _inject_cors(response: Response) -> Response:
    """Allow simple cross-origin requests from the browser frontend."""
    response.headers.setdefault("Access-Control-Allow-Origin", "*")
    response.headers.setdefault("Access-Control-Allow-Headers", "Content-Type")
    response.headers.setdefault("Access-Control-Allow-Methods", "POST, OPTIONS")
    return response


def find_pois_view() -> Response:
    """Return the amenities each requested person can walk to."""
    if request.method == "OPTIONS":
        return Response("", status=204)

    raw_payload = request.get_json(silent=True)
    if not isinstance(raw_payload, dict):
        msg = "Request body must be a JSON object."
        raise BadRequest(msg)

    query = _parse_request(raw_payload)
    pois = aggregate_pois(
        current_app.config[GRAPH_CONFIG_KEY],
        query,
        workers=current_app.config[WORKERS_CONFIG_KEY],
    )

    if request.args.get("format") == "geojson":
        return jsonify(pois_to_feature_collection(pois))
    return jsonify({"pois": [poi.to_dict() for poi in pois]})


if __name__ == "__main__":  # pragma: no cover
    create_app().run()
