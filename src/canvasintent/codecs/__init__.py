"""Image codecs for bounded image payloads."""

from canvasintent.codecs.pillow_codec import PillowImageCodec

__all__ = ["PillowImageCodec"]
