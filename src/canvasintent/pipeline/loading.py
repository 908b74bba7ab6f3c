"""Content loading through the store and codec collaborators."""

import base64
import binascii
import logging
import re
import time
from pathlib import PurePosixPath

from canvasintent.errors import ContentLoadError, ImageCodecError
from canvasintent.models import ConvertedNode, ImageLoadConfig, ImageWithRole
from canvasintent.protocols import ContentStore, ImageCodec
from canvasintent.utils.filetypes import IMAGE_EXTENSIONS, file_name, mime_type_for

logger = logging.getLogger(__name__)

# ![[image.png]] style embeds in markdown
EMBED_PATTERN = re.compile(
    r"!\[\[([^\]|#]+\.(?:" + "|".join(ext.lstrip(".") for ext in sorted(IMAGE_EXTENSIONS)) + r"))(?:[|#][^\]]*)?\]\]",
    re.IGNORECASE,
)

DATA_URL_PREFIX = re.compile(r"^data:[\w/+.-]+;base64,")


class ContentLoader:
    """Loads file bodies and encoded images for converted nodes.

    Every load goes through the ContentStore; images additionally go
    through the ImageCodec. Failures surface as ContentLoadError or
    ImageCodecError from the ``load_*`` methods, while ``fill`` turns
    them into warning strings.
    """

    def __init__(self, store: ContentStore, codec: ImageCodec):
        self.store = store
        self.codec = codec

    def load_text(self, path: str) -> str:
        return self.store.read_text(path)

    def load_pdf(self, path: str) -> str:
        """Read a PDF and return it base64-encoded."""
        return base64.b64encode(self.store.read_binary(path)).decode("ascii")

    def load_image(self, path: str, config: ImageLoadConfig) -> tuple[str, str]:
        """Read, downscale and encode an image.

        Returns:
            Tuple of (base64 string, MIME type)
        """
        data = self.store.read_binary(path)
        return self.codec.resize_and_encode(
            data, config.quality, config.max_dimension, path=path
        )

    def fill(self, node: ConvertedNode, config: ImageLoadConfig, warnings: list[str]) -> None:
        """Load whatever content node needs, recording failures in warnings."""
        path = node.file_path
        if not path:
            return
        try:
            if node.is_image:
                node.base64, node.mime_type = self.load_image(path, config)
            elif node.is_pdf:
                node.pdf_base64 = self.load_pdf(path)
                node.mime_type = mime_type_for(path)
            elif node.is_markdown:
                node.file_content = self.load_text(path)
                node.content = node.file_content
        except (ContentLoadError, ImageCodecError) as e:
            logger.warning(f"Failed to load {path}: {e}")
            warnings.append(f"Could not load {file_name(path)}: {e}")


def resolve_embed_path(store: ContentStore, note_path: str, embed: str) -> str | None:
    """Resolve an embed target against the vault root, then the note's folder."""
    if store.exists(embed):
        return embed
    folder = str(PurePosixPath(note_path).parent)
    if folder and folder != ".":
        relative = f"{folder}/{embed}"
        if store.exists(relative):
            return relative
    return None


def extract_embedded_images(
    loader: ContentLoader,
    content: str,
    note_path: str,
    config: ImageLoadConfig,
    max_images: int = 14,
) -> list[ImageWithRole]:
    """Load the images a markdown note embeds with ``![[...]]``.

    Args:
        loader: Content loader for the vault
        content: Markdown text of the note
        note_path: Vault path of the note (for relative embeds)
        config: Image compression parameters
        max_images: Stop after this many images

    Returns:
        Images in order of appearance, role set to the embed's file name
    """
    images: list[ImageWithRole] = []
    for match in EMBED_PATTERN.finditer(content):
        if len(images) >= max_images:
            logger.debug(f"Image limit ({max_images}) reached, skipping remaining embeds")
            break
        embed = match.group(1).strip()
        resolved = resolve_embed_path(loader.store, note_path, embed)
        if resolved is None:
            continue
        try:
            data, mime_type = loader.load_image(resolved, config)
        except (ContentLoadError, ImageCodecError) as e:
            logger.warning(f"Failed to read embedded image {embed}: {e}")
            continue
        images.append(
            ImageWithRole(base64=data, mime_type=mime_type, role=file_name(resolved), node_id=resolved)
        )
    return images


def save_generated_image(store: ContentStore, payload: str, note_path: str) -> str:
    """Write a generated image next to a note.

    Args:
        store: Writable content store
        payload: Base64 image data, with or without a data: URL prefix
        note_path: Vault path of the note the image belongs to

    Returns:
        Vault path of the written file
    """
    try:
        data = base64.b64decode(DATA_URL_PREFIX.sub("", payload.strip()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageCodecError(f"invalid base64 payload: {e}") from e

    name = f"ai-generated-{int(time.time() * 1000)}.png"
    folder = str(PurePosixPath(note_path).parent)
    path = name if folder in ("", ".") else f"{folder}/{name}"
    store.write_binary(path, data)
    return path
