"""Intent resolution entry points.

``IntentResolver.resolve`` handles multi-node selections;
``IntentResolver.resolve_for_edit`` handles a text span edited inside a
single node. Both are single-pass and hold no state between calls, so one
resolver can serve any number of concurrent callers.
"""

import logging
from typing import Iterable, Optional

from canvasintent.config import Settings, get_settings
from canvasintent.errors import ContentLoadError, ImageCodecError
from canvasintent.graph import Direction, EdgeIndex, Neighbor, bfs_neighbors, edges_within
from canvasintent.models import (
    Document,
    EditContext,
    ImageLoadConfig,
    ImageWithRole,
    Mode,
    NodeEditIntent,
    NodeKind,
    ResolvedIntent,
)
from canvasintent.pipeline.context import CONTEXT_SEPARATOR, build_context_text
from canvasintent.pipeline.instruction import (
    DEFAULT_EDIT_INSTRUCTION,
    InstructionSource,
    resolve_instruction,
)
from canvasintent.pipeline.loading import ContentLoader
from canvasintent.pipeline.preprocess import preprocess
from canvasintent.pipeline.roles import assign_roles, normalize_role
from canvasintent.protocols import ContentStore, ImageCodec
from canvasintent.utils.filetypes import FileKind, file_name, mime_type_for

logger = logging.getLogger(__name__)


class IntentResolver:
    """Resolves canvas selections into model-ready payloads."""

    def __init__(
        self,
        store: ContentStore,
        codec: ImageCodec,
        settings: Optional[Settings] = None,
    ):
        """Initialize the resolver.

        Args:
            store: Content store for file nodes
            codec: Image codec for resize/encode
            settings: Limits and defaults; falls back to environment settings
        """
        self.loader = ContentLoader(store, codec)
        self.settings = settings or get_settings()

    def resolve(
        self,
        document: Document,
        selection_ids: Iterable[str],
        user_input: str = "",
        mode: Mode | str = Mode.CHAT,
        image_config: Optional[ImageLoadConfig] = None,
    ) -> ResolvedIntent:
        """Resolve a multi-node selection.

        Args:
            document: Canvas snapshot (never modified)
            selection_ids: Selected node ids, groups included
            user_input: Instruction typed by the user, may be empty
            mode: chat, image or node
            image_config: Compression parameters (default from settings)

        Returns:
            ResolvedIntent; check ``can_generate`` before calling a model
        """
        mode = Mode(mode)
        config = image_config or self.settings.image_load_config()
        max_role_length = self.settings.max_role_length

        prepared = preprocess(document, selection_ids, mode, self.loader, config)
        warnings = list(prepared.warnings)
        nodes = prepared.effective_nodes
        edges = edges_within(document, (node.id for node in nodes))

        assignment = assign_roles(nodes, edges, prepared.group_labels, max_length=max_role_length)
        instruction = resolve_instruction(user_input, nodes, assignment.label_source_ids, mode)

        # With nothing typed and every text node already a label, the text
        # is the instruction; roles fall back past those nodes
        if instruction.source == InstructionSource.DEFAULT and assignment.label_source_ids:
            instruction = resolve_instruction(user_input, nodes, (), mode)
            assignment = assign_roles(
                nodes,
                edges,
                prepared.group_labels,
                excluded_sources=instruction.used_as_instruction_ids,
                max_length=max_role_length,
            )

        excluded = assignment.label_source_ids | instruction.used_as_instruction_ids

        images = [
            ImageWithRole(
                base64=node.base64,
                mime_type=node.mime_type or mime_type_for(node.file_path or ""),
                role=assignment.role_for(node.id),
                node_id=node.id,
            )
            for node in nodes
            if node.is_image and node.base64
        ]
        images = self._cap_images(images, warnings, "Selected images")

        context_text = build_context_text(nodes, excluded)

        can_generate = (
            bool(images)
            or bool(context_text)
            or (instruction.source != InstructionSource.DEFAULT and bool(instruction.instruction.strip()))
        )

        logger.debug(
            f"Resolved {mode.value} intent: {len(images)} images, "
            f"instruction {len(instruction.instruction)} chars ({instruction.source.value}), "
            f"context {len(context_text)} chars, {len(warnings)} warnings, can_generate={can_generate}"
        )

        return ResolvedIntent(
            nodes=nodes,
            edges=edges,
            images=images,
            instruction=instruction.instruction,
            context_text=context_text,
            warnings=warnings,
            skipped_files=list(prepared.skipped_files),
            can_generate=can_generate,
        )

    def resolve_for_edit(
        self,
        document: Document,
        edit_context: EditContext,
        user_input: str = "",
        image_config: Optional[ImageLoadConfig] = None,
    ) -> NodeEditIntent:
        """Resolve an in-place edit of a text span inside one node.

        Upstream neighbors supply background material and images;
        downstream neighbors supply constraints the edit must respect.
        """
        config = image_config or self.settings.image_load_config()
        instruction = (user_input or "").strip() or DEFAULT_EDIT_INSTRUCTION
        intent = NodeEditIntent(
            target_text=edit_context.selected_text,
            pre_text=edit_context.pre_text,
            post_text=edit_context.post_text,
            instruction=instruction,
        )

        if edit_context.node_id not in document:
            intent.warnings.append(f"Node {edit_context.node_id} not found in canvas")
            return intent

        index = EdgeIndex.for_document(document)
        node_map = document.node_map()
        upstream = bfs_neighbors(
            edit_context.node_id, Direction.UPSTREAM, index, node_map, self.settings.max_upstream_nodes
        )
        downstream = bfs_neighbors(
            edit_context.node_id, Direction.DOWNSTREAM, index, node_map, self.settings.max_downstream_nodes
        )

        upstream_parts: list[str] = []
        images: list[ImageWithRole] = []
        for neighbor in upstream:
            node = neighbor.node
            if node.file_kind == FileKind.IMAGE:
                image = self._load_neighbor_image(neighbor, config, intent.warnings)
                if image is not None:
                    images.append(image)
                continue
            part = self._render_neighbor(neighbor, intent.warnings)
            if part is not None:
                upstream_parts.append(part)

        downstream_parts = []
        for neighbor in downstream:
            if neighbor.node.file_kind == FileKind.IMAGE:
                continue
            part = self._render_neighbor(neighbor, intent.warnings)
            if part is not None:
                downstream_parts.append(part)

        intent.images = self._cap_images(images, intent.warnings, "Upstream images")
        intent.upstream_context = CONTEXT_SEPARATOR.join(upstream_parts)
        intent.downstream_context = CONTEXT_SEPARATOR.join(downstream_parts)
        intent.can_edit = len(edit_context.selected_text) > 0

        logger.debug(
            f"Resolved edit of {edit_context.node_id}: {len(upstream)} upstream, "
            f"{len(downstream)} downstream, {len(intent.images)} images"
        )
        return intent

    def _cap_images(self, images: list[ImageWithRole], warnings: list[str], what: str) -> list[ImageWithRole]:
        limit = self.settings.max_reference_images
        if len(images) > limit:
            warnings.append(
                f"{what} ({len(images)}) exceed the limit ({limit}). First {limit} will be used."
            )
            return images[:limit]
        return images

    def _load_neighbor_image(
        self, neighbor: Neighbor, config: ImageLoadConfig, warnings: list[str]
    ) -> Optional[ImageWithRole]:
        path = neighbor.node.file or ""
        try:
            data, mime_type = self.loader.load_image(path, config)
        except (ContentLoadError, ImageCodecError) as e:
            logger.warning(f"Failed to read image {path}: {e}")
            warnings.append(f"Could not load {file_name(path)}: {e}")
            return None
        role = neighbor.label or f"Reference (distance {neighbor.distance})"
        return ImageWithRole(
            base64=data,
            mime_type=mime_type,
            role=normalize_role(role, self.settings.max_role_length),
            node_id=neighbor.node.id,
        )

    def _render_neighbor(self, neighbor: Neighbor, warnings: list[str]) -> Optional[str]:
        """Render a text, markdown or link neighbor; other kinds yield None."""
        node = neighbor.node
        prefix = f"[{neighbor.label}] " if neighbor.label else ""

        if node.kind == NodeKind.TEXT:
            if not node.text or not node.text.strip():
                return None
            return f"{prefix}{node.text}"

        if node.kind == NodeKind.LINK and node.url:
            return f"{prefix}[Link: {node.url}]"

        if node.file_kind == FileKind.MARKDOWN:
            try:
                content = self.loader.load_text(node.file)
            except ContentLoadError as e:
                logger.warning(f"Failed to read markdown {node.file}: {e}")
                warnings.append(f"Could not load {file_name(node.file)}: {e}")
                return None
            return f"{prefix}[File: {file_name(node.file)}]\n{content}"

        return None
