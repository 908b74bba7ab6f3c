"""Tests for parsing generated canvas structures."""

import pytest

from canvasintent.errors import CanvasFormatError
from canvasintent.structure import extract_canvas_json, sanitize_canvas_data, validate_canvas_data

VALID = '{"nodes": [{"id": "a", "x": 0, "y": 0, "width": 200, "height": 80, "text": "Start"}], "edges": []}'


def test_raw_json():
    data = extract_canvas_json(VALID)
    assert data["nodes"][0]["type"] == "text"


def test_fenced_json():
    response = f"Here is the flowchart:\n```json\n{VALID}\n```\nEnjoy!"
    assert extract_canvas_json(response)["nodes"][0]["id"] == "a"


def test_json_inside_prose():
    assert extract_canvas_json(f"Sure! {VALID} Let me know.")["edges"] == []


def test_missing_edges_default_to_empty():
    data = extract_canvas_json('{"nodes": []}')
    assert data == {"nodes": [], "edges": []}


@pytest.mark.parametrize(
    "response,message",
    [
        ("no json here", "JSON parse error"),
        ('{"edges": []}', "missing nodes array"),
        ('{"nodes": [{"x": 0, "y": 0, "width": 1, "height": 1}]}', "Node 0: missing id"),
        ('{"nodes": [{"id": "a", "x": 0, "width": 1, "height": 1}]}', "missing x/y"),
        ('{"nodes": [{"id": "a", "x": 0, "y": 0, "width": 0, "height": 1}]}', "missing width/height"),
        ('{"nodes": [], "edges": [{"id": "e", "fromNode": "a"}]}', "Edge 0: missing fromNode/toNode"),
    ],
)
def test_invalid_structures(response, message):
    with pytest.raises(CanvasFormatError, match=message):
        extract_canvas_json(response)


def test_validate_rejects_non_objects():
    with pytest.raises(CanvasFormatError):
        validate_canvas_data(["nodes"])


def _node(node_id, text="x", node_type="text"):
    return {"id": node_id, "type": node_type, "x": 0, "y": 0, "width": 10, "height": 10, "text": text}


def test_sanitize():
    data = {
        "nodes": [_node("a"), _node("b"), _node("blank", "  "), _node("lonely"), _node("g", node_type="group")],
        "edges": [
            {"id": "e1", "fromNode": "a", "toNode": "b"},
            {"id": "e2", "fromNode": "a", "toNode": "blank"},
            {"id": "e3", "fromNode": "ghost", "toNode": "b"},
        ],
    }
    cleaned, stats = sanitize_canvas_data(data)

    assert [n["id"] for n in cleaned["nodes"]] == ["a", "b", "g"]
    assert [e["id"] for e in cleaned["edges"]] == ["e1"]
    assert (stats.removed_empty_nodes, stats.removed_orphan_nodes, stats.removed_invalid_edges) == (1, 1, 2)
    assert len(data["nodes"]) == 5


def test_sanitize_keeps_orphans_when_asked_or_unconnected():
    data = {"nodes": [_node("a"), _node("b")], "edges": []}
    cleaned, stats = sanitize_canvas_data(data)
    assert len(cleaned["nodes"]) == 2
    assert stats.removed_orphan_nodes == 0

    data["edges"] = [{"id": "e", "fromNode": "a", "toNode": "a"}]
    data["nodes"].append(_node("c"))
    cleaned, _ = sanitize_canvas_data(data, remove_orphan_nodes=False)
    assert len(cleaned["nodes"]) == 3
