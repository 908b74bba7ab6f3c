"""Pillow-based image codec."""

import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

from canvasintent.errors import ImageCodecError
from canvasintent.utils.filetypes import file_extension

logger = logging.getLogger(__name__)


class PillowImageCodec:
    """Image codec using the Pillow library.

    Downscales to fit within a square of ``max_dimension`` (aspect ratio
    preserved, never upscaled) and re-encodes as WebP. SVG is vector data
    and is passed through unchanged.
    """

    OUTPUT_FORMAT = "WEBP"
    OUTPUT_MIME_TYPE = "image/webp"

    def resize_and_encode(
        self, data: bytes, quality: int, max_dimension: int, path: str = ""
    ) -> tuple[str, str]:
        """Downscale and re-encode an image.

        Args:
            data: Raw image bytes
            quality: Encoder quality (0-100)
            max_dimension: Largest allowed width or height in pixels
            path: Source path, used for SVG detection and error messages

        Returns:
            Tuple of (base64 string, MIME type)
        """
        if not data:
            raise ImageCodecError("empty image data", path or None)

        if file_extension(path) == ".svg":
            return base64.b64encode(data).decode("ascii"), "image/svg+xml"

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                original_size = img.size
                target_size = self.target_size(img.width, img.height, max_dimension)
                if target_size != original_size:
                    img = img.resize(target_size, Image.Resampling.LANCZOS)
                    logger.debug(
                        f"Scaled {path or 'image'} from "
                        f"{original_size[0]}x{original_size[1]} to "
                        f"{target_size[0]}x{target_size[1]}"
                    )
                if img.mode not in ("RGB", "RGBA"):
                    img = img.convert("RGBA" if "A" in img.getbands() else "RGB")

                buffer = io.BytesIO()
                img.save(buffer, format=self.OUTPUT_FORMAT, quality=max(0, min(100, quality)))
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageCodecError(str(e), path or None) from e

        return base64.b64encode(buffer.getvalue()).decode("ascii"), self.OUTPUT_MIME_TYPE

    @staticmethod
    def target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
        """Compute the output size that fits inside max_dimension."""
        if width <= max_dimension and height <= max_dimension:
            return width, height
        scale = min(max_dimension / width, max_dimension / height)
        return max(1, round(width * scale)), max(1, round(height * scale))
