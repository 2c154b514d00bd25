from conftest import home_at

from walkshed.find import find_pois
from walkshed.graph.io import write_graph
from walkshed.request import Person, Request
from walkshed.setup import GRAPH_ENV_VAR, default_graph_path


def test_find_pois_with_loaded_graph(line_graph):
    request = Request([Person("ana", home_at(line_graph, 0, 0), 2)])
    (poi,) = find_pois(request, graph=line_graph)
    assert poi.times_per_person == [("ana", 100)]


def test_find_pois_loads_graph_file(line_graph, tmp_path, capsys):
    path = tmp_path / "graph.json"
    write_graph(line_graph, path)
    request = Request([Person("ana", home_at(line_graph, 0, 0), 2)])

    pois = find_pois(request, graph_path=path, logging_mode="info")

    assert [poi.kind for poi in pois] == ["pharmacy"]
    out = capsys.readouterr().out.splitlines()
    assert out[:2] == ["[INFO]\tgraph.setup.start", "[INFO]\tgraph.setup.complete"]
    assert out[2].startswith("[INFO]\tgraph.stats\tintersections=4")


def test_graph_path_can_come_from_environment(line_graph, tmp_path, monkeypatch):
    path = tmp_path / "env-graph.json"
    write_graph(line_graph, path)
    monkeypatch.setenv(GRAPH_ENV_VAR, str(path))

    assert default_graph_path() == path
    request = Request([Person("ana", home_at(line_graph, 0, 0), 2)])
    assert len(find_pois(request)) == 1


def test_default_graph_path_without_environment(monkeypatch):
    monkeypatch.delenv(GRAPH_ENV_VAR, raising=False)
    assert default_graph_path().name == "walk_graph.json"
