"""Instruction fallback: typed input, then selection text, then a preset."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from canvasintent.models import ConvertedNode, Mode, NodeKind

DEFAULT_INSTRUCTIONS = {
    Mode.CHAT: "Summarize the selected content.",
    Mode.IMAGE: "Generate an image based on these references.",
    Mode.NODE: "Generate a flowchart or structure based on the context.",
}

DEFAULT_EDIT_INSTRUCTION = "Polish this text."


class InstructionSource(str, Enum):
    USER = "user"
    NODES = "nodes"
    DEFAULT = "default"


@dataclass(frozen=True)
class InstructionResult:
    instruction: str
    used_as_instruction_ids: frozenset[str]
    source: InstructionSource


def resolve_instruction(
    user_input: str | None,
    nodes: Sequence[ConvertedNode],
    used_as_label_ids: Iterable[str],
    mode: Mode,
) -> InstructionResult:
    """Pick the instruction sent to the model.

    Args:
        user_input: Raw text the user typed (may be empty)
        nodes: Effective nodes, document order
        used_as_label_ids: Text nodes already consumed as image roles
        mode: Active mode, selects the preset

    Returns:
        InstructionResult with the ids of nodes folded into the instruction
    """
    if user_input and user_input.strip():
        return InstructionResult(user_input.strip(), frozenset(), InstructionSource.USER)

    labels = set(used_as_label_ids)
    parts: list[str] = []
    used: set[str] = set()
    for node in nodes:
        if node.kind != NodeKind.TEXT or node.id in labels:
            continue
        if node.content and node.content.strip():
            parts.append(node.content.strip())
            used.add(node.id)

    if parts:
        return InstructionResult("\n\n".join(parts), frozenset(used), InstructionSource.NODES)

    return InstructionResult(DEFAULT_INSTRUCTIONS[Mode(mode)], frozenset(), InstructionSource.DEFAULT)
