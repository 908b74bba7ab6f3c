"""Resolution pipeline: preprocess, roles, instruction, context, edit."""

from canvasintent.pipeline.context import build_context_text
from canvasintent.pipeline.instruction import resolve_instruction
from canvasintent.pipeline.loading import ContentLoader, extract_embedded_images, save_generated_image
from canvasintent.pipeline.preprocess import preprocess
from canvasintent.pipeline.resolver import IntentResolver
from canvasintent.pipeline.roles import DEFAULT_ROLE, assign_roles, normalize_role

__all__ = [
    "DEFAULT_ROLE",
    "ContentLoader",
    "IntentResolver",
    "assign_roles",
    "build_context_text",
    "extract_embedded_images",
    "normalize_role",
    "preprocess",
    "resolve_instruction",
    "save_generated_image",
]
