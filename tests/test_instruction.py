"""Tests for the instruction fallback chain and context serialization."""

from canvasintent.models import ConvertedNode, Mode
from canvasintent.pipeline import build_context_text, resolve_instruction
from canvasintent.pipeline.instruction import DEFAULT_INSTRUCTIONS, InstructionSource

from tests.factories import file, link, text


def _convert(*nodes):
    return [ConvertedNode.from_node(n) for n in nodes]


def test_typed_input_wins_over_text_nodes():
    nodes = _convert(text("t", "Summarize this."))
    result = resolve_instruction("  Make it shorter  ", nodes, set(), Mode.CHAT)

    assert result.instruction == "Make it shorter"
    assert result.used_as_instruction_ids == frozenset()
    assert result.source == InstructionSource.USER


def test_text_node_becomes_instruction():
    nodes = _convert(text("t", "Summarize this."), file("img", "img/cat.png"))
    result = resolve_instruction("", nodes, set(), Mode.CHAT)

    assert result.instruction == "Summarize this."
    assert "t" in result.used_as_instruction_ids
    assert result.source == InstructionSource.NODES


def test_label_nodes_are_not_reused_and_text_is_joined():
    nodes = _convert(text("a", " first "), text("label", "character ref"), text("b", "second"), text("blank", "  "))
    result = resolve_instruction(None, nodes, {"label"}, Mode.IMAGE)

    assert result.instruction == "first\n\nsecond"
    assert result.used_as_instruction_ids == frozenset({"a", "b"})


def test_mode_specific_presets():
    seen = set()
    for mode in Mode:
        result = resolve_instruction("   ", [], set(), mode)
        assert result.instruction == DEFAULT_INSTRUCTIONS[mode]
        assert result.source == InstructionSource.DEFAULT
        seen.add(result.instruction)
    assert len(seen) == 3


def test_context_headers_and_separator():
    md = ConvertedNode.from_node(file("md", "notes/brief.md"))
    md.file_content = "Make it blue."
    pdf = ConvertedNode.from_node(file("pdf", "docs/spec.pdf"))
    pdf.pdf_base64 = "JVBERi0="
    img = ConvertedNode.from_node(file("img", "img/cat.png"))
    img.base64 = "Y2F0"
    nodes = [
        ConvertedNode.from_node(text("t", "hello")),
        img,
        md,
        pdf,
        ConvertedNode.from_node(link("l", "https://example.com", label="docs")),
    ]

    context = build_context_text(nodes, set())

    assert context.split("\n\n---\n\n") == [
        "[Text Node]\nhello",
        "[File: brief.md]\nMake it blue.",
        "[PDF: spec.pdf] (Content provided as inline PDF attachment)",
        "[Link: https://example.com]\ndocs",
    ]


def test_context_skips_excluded_and_unloaded_nodes():
    unloaded = ConvertedNode.from_node(file("md", "notes/brief.md"))
    nodes = [ConvertedNode.from_node(text("t", "used")), unloaded, ConvertedNode.from_node(text("u", "kept"))]

    assert build_context_text(nodes, {"t"}) == "[Text Node]\nkept"
    assert build_context_text([], set()) == ""


def test_blank_markdown_is_not_context():
    empty = ConvertedNode.from_node(file("md", "notes/empty.md"))
    empty.file_content = ""
    blank = ConvertedNode.from_node(file("ws", "notes/blank.md"))
    blank.file_content = "  \n"

    assert build_context_text([empty, blank], set()) == ""
