import pytest
from conftest import amenity, straight
from shapely.geometry import LineString

from walkshed.graph.io import deserialize_graph, load_graph, serialize_graph, write_graph
from walkshed.graph.model import Graph, Intersection, Road


def test_other_side_of_road(line_graph):
    road = line_graph.roads[10]
    assert road.other_side(1) == 2
    assert road.other_side(2) == 1
    assert road.length == pytest.approx(134.112)


def test_other_side_rejects_foreign_intersection(line_graph):
    with pytest.raises(ValueError, match="not an endpoint"):
        line_graph.roads[10].other_side(3)


def test_roads_per_intersection_lists_parallel_roads():
    a = Intersection(1, 0.0, 0.0)
    b = Intersection(2, 10.0, 0.0)
    graph = Graph.build([a, b], [straight(1, a, b), straight(2, b, a)])

    assert [road.id for road in graph.roads_per_intersection(1)] == [1, 2]
    assert list(graph.roads_per_intersection(2)) == list(
        graph.roads_per_intersection(1),
    )


def test_road_with_unknown_endpoint_is_rejected():
    a = Intersection(1, 0.0, 0.0)
    bad = Road(1, (1, 99), LineString([(0, 0), (1, 1)]))
    with pytest.raises(ValueError, match="unknown intersections"):
        Graph.build([a], [bad])


def test_road_with_unknown_amenity_is_rejected():
    a = Intersection(1, 0.0, 0.0)
    b = Intersection(2, 10.0, 0.0)
    with pytest.raises(ValueError, match="unknown amenities"):
        Graph.build([a, b], [straight(1, a, b, [42])])


def test_duplicate_road_ids_are_rejected():
    a = Intersection(1, 0.0, 0.0)
    b = Intersection(2, 10.0, 0.0)
    with pytest.raises(ValueError, match="Duplicate road id"):
        Graph.build([a, b], [straight(1, a, b), straight(1, b, a)])


def test_written_graph_loads_back(line_graph, tmp_path):
    path = tmp_path / "nested" / "graph.json"
    write_graph(line_graph, path)

    loaded = load_graph(path)

    assert loaded.intersections == line_graph.intersections
    assert set(loaded.roads) == {10, 11}
    assert loaded.roads[10].endpoints == (1, 2)
    assert loaded.roads[10].amenities == (1,)
    assert loaded.roads[10].length == pytest.approx(134.112)
    assert loaded.amenities[1].name == "Corner Pharmacy"
    assert loaded.amenities[3].name is None
    assert loaded.amenities[1].point.equals(line_graph.amenities[1].point)
    assert loaded.mercator.crs == line_graph.mercator.crs


def test_missing_coordinates_fall_back_to_straight_segment(line_graph):
    data = serialize_graph(line_graph)
    for edge in data["edges"]:
        del edge["coordinates"]

    graph = deserialize_graph(data)

    assert graph.roads[10].length == pytest.approx(134.112)
    assert graph.roads[11].length == pytest.approx(100.0)


def test_serialized_graph_carries_amenities_and_crs():
    a = Intersection(1, 0.0, 0.0)
    b = Intersection(2, 10.0, 0.0)
    graph = Graph.build([a, b], [straight(7, a, b, [5])], [amenity(5, 5.0, 0.0)])

    data = serialize_graph(graph)

    assert data["graph"]["crs"] == "EPSG:3857"
    assert data["graph"]["amenities"][0]["kind"] == "cafe"
    assert data["edges"][0]["key"] == 7
    assert data["edges"][0]["amenities"] == [5]


def test_missing_graph_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_graph(tmp_path / "absent.json")


def test_corrupt_graph_file(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Unable to parse graph file"):
        load_graph(path)


def test_graph_fields_cannot_be_reassigned(line_graph):
    from dataclasses import FrozenInstanceError

    with pytest.raises(FrozenInstanceError):
        line_graph.roads = {}
    with pytest.raises(FrozenInstanceError):
        line_graph.mercator = None


def test_road_lengths_are_ground_meters(detour_graph):
    assert detour_graph.road_length(detour_graph.roads[20]) == pytest.approx(210.0)
    assert detour_graph.road_length(detour_graph.roads[21]) == pytest.approx(5.0)
    assert detour_graph.network.edges[1, 2, 20]["length_m"] == pytest.approx(210.0)
