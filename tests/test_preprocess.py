"""Tests for selection preprocessing."""

import pytest

from canvasintent.models import Document, ImageLoadConfig, Mode
from canvasintent.pipeline import preprocess

from tests.factories import file, group, link, text

CONFIG = ImageLoadConfig(quality=70, max_dimension=512)


@pytest.fixture
def mixed_doc() -> Document:
    return Document(
        nodes=[
            text("t", "Describe the scene", x=1000, y=0),
            file("img", "img/cat.png", x=1000, y=200),
            file("pdf", "docs/spec.pdf", x=1000, y=400),
            file("md", "notes/brief.md", x=1000, y=600),
            link("url", "https://example.com/ref", x=1000, y=800),
            file("csv", "data/table.csv", x=1000, y=1000),
        ]
    )


ALL_IDS = ["t", "img", "pdf", "md", "url", "csv"]


def test_image_mode_skips_context_only_files(mixed_doc, loader):
    result = preprocess(mixed_doc, ALL_IDS, Mode.IMAGE, loader, CONFIG)

    assert [n.id for n in result.effective_nodes] == ["t", "img"]
    assert result.skipped_files == [
        "docs/spec.pdf",
        "notes/brief.md",
        "[Link] https://example.com/ref",
        "data/table.csv",
    ]
    assert any("Skipped 4 file(s) in image mode" in w for w in result.warnings)
    assert any("spec.pdf" in w and "table.csv" in w for w in result.warnings)


@pytest.mark.parametrize("mode", [Mode.CHAT, Mode.NODE])
def test_chat_and_node_modes_keep_context_files(mixed_doc, loader, mode):
    result = preprocess(mixed_doc, ALL_IDS, mode, loader, CONFIG)

    assert [n.id for n in result.effective_nodes] == ["t", "img", "pdf", "md", "url"]
    assert result.skipped_files == ["data/table.csv"]


def test_content_is_loaded(mixed_doc, loader, codec):
    result = preprocess(mixed_doc, ALL_IDS, Mode.CHAT, loader, CONFIG)
    by_id = {n.id: n for n in result.effective_nodes}

    assert by_id["md"].file_content == "# Brief\nMake it blue."
    assert by_id["pdf"].pdf_base64
    assert by_id["pdf"].mime_type == "application/pdf"
    assert by_id["img"].base64 and by_id["img"].mime_type == "image/webp"
    assert by_id["url"].content == "https://example.com/ref"
    assert codec.calls == [("img/cat.png", 70, 512)]
    assert result.image_count == 1
    assert result.text_count == 4


def test_load_failures_degrade_to_warnings(loader):
    doc = Document(
        nodes=[
            file("gone", "img/missing.png"),
            file("bad", "img/broken.png", x=200),
            file("nomd", "notes/none.md", x=400),
        ]
    )
    result = preprocess(doc, ["gone", "bad", "nomd"], Mode.CHAT, loader, CONFIG)

    assert [n.id for n in result.effective_nodes] == ["gone", "bad", "nomd"]
    assert all(n.base64 is None for n in result.effective_nodes if n.is_image)
    assert result.effective_nodes[2].file_content is None
    assert len(result.warnings) == 3
    assert any("missing.png" in w for w in result.warnings)
    assert any("broken.png" in w for w in result.warnings)


def test_group_expands_to_members_in_document_order(loader):
    doc = Document(
        nodes=[
            file("img", "img/cat.png", x=50, y=50),
            group("g", "Characters", 0, 0, 600, 600),
            text("t", "caption", x=300, y=300),
            text("outside", "far away", x=2000, y=2000),
        ]
    )
    result = preprocess(doc, ["g"], Mode.CHAT, loader, CONFIG)

    assert [n.id for n in result.effective_nodes] == ["img", "t"]
    assert all(n.is_group_member and n.group_id == "g" for n in result.effective_nodes)
    assert result.group_labels == {"g": "Characters"}


def test_directly_selected_nodes_merge_with_group_members(loader):
    doc = Document(
        nodes=[
            group("g", "Scene", 0, 0, 300, 300),
            text("inside", "a", x=10, y=10),
            text("outside", "b", x=1000, y=1000),
        ]
    )
    result = preprocess(doc, ["outside", "inside", "g"], Mode.CHAT, loader, CONFIG)

    assert [n.id for n in result.effective_nodes] == ["inside", "outside"]
    assert result.effective_nodes[0].is_group_member
    assert not result.effective_nodes[1].is_group_member


def test_unknown_selection_id_warns(loader):
    doc = Document(nodes=[text("t", "hello")])
    result = preprocess(doc, ["t", "ghost"], Mode.CHAT, loader, CONFIG)

    assert [n.id for n in result.effective_nodes] == ["t"]
    assert result.warnings == ["Selected node ghost not found in canvas"]


def test_empty_selection(loader):
    result = preprocess(Document(), [], Mode.CHAT, loader, CONFIG)
    assert result.effective_nodes == []
    assert result.warnings == []
