import json

import pytest

from task_frontier.core.engine import evaluate
from task_frontier.core.model import UNKNOWN
from task_frontier.core.validate.validate_graph import validate_graph
from task_frontier.core.errors import GraphLoadError
from task_frontier.core.io.load_graph import CANVAS_SCHEMA_VERSION, load_graph


def test_load_yaml_success():
    raw = load_graph("examples/basic-graph.yaml")
    assert raw["schema_version"] == "0.1.0"
    assert isinstance(raw["nodes"], list)
    assert isinstance(raw["edges"], list)
    assert raw["__file__"].endswith("basic-graph.yaml")


def test_load_canvas_export_is_normalized():
    raw = load_graph("examples/canvas-export.json")
    assert raw["schema_version"] == CANVAS_SCHEMA_VERSION
    by_id = {n["id"]: n for n in raw["nodes"]}
    assert by_id["task-1"] == {"id": "task-1", "title": "Research Phase", "status": "done"}
    assert by_id["task-2"]["estimate"] == {"value": 2.0, "unit": "days"}
    assert by_id["task-4"]["estimate"] == {"value": 1, "unit": "weeks"}
    assert "estimate" not in by_id["task-3"]
    assert {"from": "task-2", "to": "task-4"} in raw["edges"]


def test_load_missing_file():
    try:
        load_graph("examples/does-not-exist.yaml")
        assert False, "expected GraphLoadError"
    except GraphLoadError as e:
        assert e.code == "E_FILE_NOT_FOUND"


def test_load_unsupported_format(tmp_path):
    p = tmp_path / "graph.txt"
    p.write_text("hello", encoding="utf-8")
    try:
        load_graph(str(p))
        assert False, "expected GraphLoadError"
    except GraphLoadError as e:
        assert e.code == "E_UNSUPPORTED_FORMAT"


def test_load_bad_json_and_top_level(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")
    try:
        load_graph(str(bad))
        assert False, "expected GraphLoadError"
    except GraphLoadError as e:
        assert e.code == "E_JSON_PARSE"

    listy = tmp_path / "list.yaml"
    listy.write_text("- a\n- b\n", encoding="utf-8")
    try:
        load_graph(str(listy))
        assert False, "expected GraphLoadError"
    except GraphLoadError as e:
        assert e.code == "E_INVALID_TOP_LEVEL"


def _canvas_with_estimate(tmp_path, value):
    doc = {
        "nodes": [
            {"id": "a", "data": {"title": "A", "status": "todo", "estimatedTime": value, "estimatedTimeUnit": "days"}},
            {"id": "b", "data": {"title": "B", "status": "todo", "estimatedTime": "2"}},
        ],
        "edges": [{"source": "a", "target": "b"}],
    }
    p = tmp_path / "canvas.json"
    p.write_text(json.dumps(doc), encoding="utf-8")
    return str(p)


@pytest.mark.parametrize("value", ["abc", "-2", -2, 0, "0", "", "  ", True, None, "nan"])
def test_canvas_unusable_estimate_means_unknown(tmp_path, value):
    raw = load_graph(_canvas_with_estimate(tmp_path, value))
    by_id = {n["id"]: n for n in raw["nodes"]}
    assert "estimate" not in by_id["a"]
    assert by_id["b"]["estimate"] == {"value": 2.0, "unit": "days"}

    graph, errors = validate_graph(raw)
    assert errors == []
    assert graph is not None
    assert evaluate("b", graph).times == {"b": UNKNOWN}
