"""Protocol for image resize/encode providers."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ImageCodec(Protocol):
    """Protocol for turning raw image bytes into a bounded payload.

    Allows swapping the Pillow implementation for a remote service or a
    test double.
    """

    def resize_and_encode(
        self, data: bytes, quality: int, max_dimension: int, path: str = ""
    ) -> tuple[str, str]:
        """Downscale and re-encode an image.

        Returns: (base64 payload without data: prefix, MIME type).
        Raises ImageCodecError on failure.
        """
        ...
