"""Tests for the document model."""

import pytest

from canvasintent.models import Document, FileKind, Node, NodeKind

from tests.factories import edge, file, group, text


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Node(id="a", kind=NodeKind.TEXT, x=0, y=0, width=-1, height=10)


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        Document(nodes=(text("a", "x"), text("a", "y")))


def test_lookup_and_order():
    doc = Document(nodes=[text("a", "1"), text("b", "2"), text("c", "3")], edges=[edge("e", "a", "b")])

    assert "b" in doc
    assert "z" not in doc
    assert doc.get("c").text == "3"
    assert doc.get("z") is None
    assert [n.id for n in doc.in_document_order(["c", "a", "missing"])] == ["a", "c"]
    assert isinstance(doc.nodes, tuple)


def test_file_kind_classification():
    assert file("i", "pics/A.PNG").file_kind == FileKind.IMAGE
    assert file("p", "paper.pdf").file_kind == FileKind.PDF
    assert file("m", "notes/a.md").file_kind == FileKind.MARKDOWN
    assert file("o", "data.csv").file_kind == FileKind.OTHER
    assert text("t", "hi").file_kind is None


def test_groups_listed_in_document_order():
    doc = Document(nodes=[group("g2", "B", 0, 0, 10, 10), text("t", "x"), group("g1", "A", 0, 0, 10, 10)])
    assert [g.id for g in doc.groups] == ["g2", "g1"]


def test_bbox_spans_geometry():
    box = text("a", "x", x=10, y=20, w=30, h=40).bbox
    assert (box.min_x, box.min_y, box.max_x, box.max_y) == (10, 20, 40, 60)
