"""Turn encoded image bytes into a flat RGB or RGBA pixel buffer using Pillow."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from loguru import logger
from PIL import Image

from dominant_color.errors import ConversionError

_ALPHA_MODES = frozenset({"RGBA", "RGBa", "LA", "La", "PA"})

# 16-bit and 32-bit integer modes that Pillow would clip, not scale, when converting to 8 bits
_WIDE_MODES = frozenset({"I", "I;16", "I;16L", "I;16B", "I;16N"})


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """Decoded pixels, row-major, ``channels`` bytes per pixel.

    Attributes:
        data: Interleaved channel bytes, ``R G B`` or ``R G B A`` per pixel.
        channels: 3 for opaque images, 4 when an alpha channel is present.
        width: Image width in pixels.
        height: Image height in pixels.
    """

    data: bytes
    channels: int
    width: int
    height: int

    @property
    def pixel_count(self) -> int:
        return len(self.data) // self.channels


def has_alpha(image: Image.Image) -> bool:
    """Whether ``image`` carries transparency that should weight its pixels."""
    if image.mode in _ALPHA_MODES:
        return True
    return "transparency" in image.info


def from_image(image: Image.Image) -> PixelBuffer:
    """Flatten an open Pillow image into a :class:`PixelBuffer`.

    Every mode is normalized to ``RGBA`` when it has transparency and to
    ``RGB`` otherwise, so grayscale, palette and CMYK inputs all work. 16-bit
    grayscale is scaled down to 8 bits first.
    """
    if image.mode in _WIDE_MODES:
        logger.debug("scaling {} image down to 8 bits", image.mode)
        image = image.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    target = "RGBA" if has_alpha(image) else "RGB"
    if image.mode != target:
        logger.debug("converting {} image to {}", image.mode, target)
        image = image.convert(target)
    width, height = image.size
    return PixelBuffer(
        data=image.tobytes(),
        channels=len(target),
        width=width,
        height=height,
    )


def decode(buffer: bytes) -> PixelBuffer:
    """Decode ``buffer`` with Pillow.

    Raises:
        ConversionError: If ``buffer`` is not bytes-like or Pillow cannot
            identify or load it.
    """
    if not isinstance(buffer, (bytes, bytearray, memoryview)):
        raise ConversionError(f"expected a bytes-like object, got {type(buffer).__name__}")
    try:
        with Image.open(BytesIO(buffer)) as image:
            image.load()
            logger.debug("decoded {} image, mode {}, size {}", image.format, image.mode, image.size)
            return from_image(image)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ConversionError("Unable to convert image") from exc
