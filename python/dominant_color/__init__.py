"""`dominant_color` finds the single most representative color of an image.

Pixels are subsampled, grouped into coarse hue bands (or RGB cubes) weighted by
their alpha, and the heaviest group is averaged into one ``0xRRGGBB`` integer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Self, overload

from loguru import logger
from PIL import Image

from dominant_color._core import (
    DEFAULT_MAX_SAMPLES,
    DEFAULT_STRATEGY,
    _ClusterInfo,
    _DebugInfo,
    _dominant,
    _dominant_debug,
    check_params,
)
from dominant_color._decode import decode, from_image
from dominant_color.config import STRATEGIES
from dominant_color.errors import (
    ConversionError,
    DominantColorError,
    EmptyImageError,
    ErrorKind,
)

__all__ = [
    "get_dominant_color",
    "dominant_color_of",
    "try_get_dominant_color",
    "RGB",
    "Cluster",
    "DebugInfo",
    "DominantColorResult",
    "ErrorKind",
    "DominantColorError",
    "ConversionError",
    "EmptyImageError",
    "DEFAULT_MAX_SAMPLES",
    "DEFAULT_STRATEGY",
    "STRATEGIES",
]

logger.disable(__name__)


@dataclass(frozen=True, slots=True)
class RGB:
    """An sRGB color with red, green, and blue components in the [0, 255] range."""

    r: int
    g: int
    b: int

    @classmethod
    def from_packed(cls, color: int) -> Self:
        """Unpack a ``0xRRGGBB`` integer as returned by :func:`get_dominant_color`."""
        if not 0 <= color <= 0xFFFFFF:
            raise ValueError(f"packed color must be in [0, 0xFFFFFF], got {color:#x}")
        return cls((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)

    @property
    def packed(self) -> int:
        return self.r << 16 | self.g << 8 | self.b

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


@dataclass(frozen=True, slots=True)
class Cluster:
    """Debug details about one bucket of sampled pixels.

    Attributes:
        key: The bucket key: a hue band in ``[0, 32)`` for the ``"hue"`` strategy,
            an RGB cube index in ``[0, 64)`` for ``"rgb"``.
        rgb: The weighted average color of the pixels in the bucket.
        weight: The sum of the alpha-derived weights of the pixels in the bucket.
            Opaque pixels contribute 1.0 each.
        share: ``weight`` as a fraction of the total weight of all buckets.
    """

    key: int
    rgb: RGB
    weight: float
    share: float

    @classmethod
    def _from_core(cls, info: _ClusterInfo) -> Self:
        return cls(key=info.key, rgb=RGB(*info.rgb), weight=info.weight, share=info.share)


@dataclass(frozen=True, slots=True)
class DebugInfo:
    """Debug info returned when called with ``with_debug=True``.

    Attributes:
        clusters: Every bucket that received weight, ordered by key.
        selected: The bucket the dominant color was taken from. It has the largest
            weight; on equal weight the lowest key wins.
        sampled_pixels: How many pixels were inspected.
        stride: The step between inspected pixels.
        strategy: The clustering strategy that was used.
    """

    clusters: list[Cluster]
    selected: Cluster
    sampled_pixels: int
    stride: int
    strategy: str

    @classmethod
    def _from_core(cls, debug: _DebugInfo) -> Self:
        clusters = [Cluster._from_core(info) for info in debug.clusters]
        selected = next(c for c in clusters if c.key == debug.selected_key)
        return cls(
            clusters=clusters,
            selected=selected,
            sampled_pixels=debug.sampled_pixels,
            stride=debug.stride,
            strategy=debug.strategy,
        )


@dataclass(frozen=True, slots=True)
class DominantColorResult:
    """Outcome of :func:`try_get_dominant_color`: a color or the kind of failure.

    Exactly one of ``color`` and ``error`` is set.
    """

    color: int | None = None
    error: ErrorKind | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        if (self.color is None) == (self.error is None):
            raise ValueError("exactly one of color and error must be set")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """Return the color, or raise the error this result stands for."""
        if self.error is ErrorKind.DECODE_FAILURE:
            raise ConversionError(self.message)
        if self.error is ErrorKind.EMPTY_INPUT:
            raise EmptyImageError(self.message)
        return self.color  # type: ignore[return-value]


@overload
def get_dominant_color(
    buffer: bytes,
    *,
    strategy: str = ...,
    max_samples: int = ...,
    with_debug: Literal[True],
) -> tuple[int, DebugInfo]: ...


@overload
def get_dominant_color(
    buffer: bytes,
    *,
    strategy: str = ...,
    max_samples: int = ...,
    with_debug: Literal[False] = ...,
) -> int: ...


def get_dominant_color(
    buffer: bytes,
    *,
    strategy: str = DEFAULT_STRATEGY,
    max_samples: int = DEFAULT_MAX_SAMPLES,
    with_debug: bool = False,
) -> int | tuple[int, DebugInfo]:
    """Calculate the dominant color of an encoded image.

    Any format Pillow can open is accepted. Returns the color packed as
    ``0xRRGGBB`` (red in bits 16-23, green in 8-15, blue in 0-7).

    Pass ``with_debug=True`` to also receive a :class:`DebugInfo` describing the
    buckets that were built.

    Args:
        buffer: The encoded image (PNG, JPEG, GIF, WebP, ...).
        strategy: ``"hue"`` groups pixels into 32 hue bands and averages hue,
            saturation and lightness within a band. ``"rgb"`` groups pixels by the
            top two bits of each channel (64 cubes) and averages RGB directly.
        max_samples: Upper bound on the number of pixels inspected. Larger images
            are visited with a fixed stride, so the result is deterministic.
        with_debug: If ``True``, return a ``(color, debug_info)`` tuple.

    Returns:
        The packed color, or a tuple of the packed color and a :class:`DebugInfo`
        if ``with_debug=True``.

    Raises:
        ConversionError: If the bytes can't be decoded as an image.
        EmptyImageError: If the image has no pixels or all sampled pixels are fully
            transparent.
        ValueError: If ``strategy`` or ``max_samples`` is invalid.
    """
    check_params(strategy, max_samples)
    pixels = decode(buffer)
    if with_debug:
        color, raw_debug = _dominant_debug(pixels, strategy, max_samples)
        return color, DebugInfo._from_core(raw_debug)
    return _dominant(pixels, strategy, max_samples)


def dominant_color_of(
    image: Image.Image,
    *,
    strategy: str = DEFAULT_STRATEGY,
    max_samples: int = DEFAULT_MAX_SAMPLES,
) -> RGB:
    """Calculate the dominant color of an already opened PIL image.

    Images of any mode are accepted: images with transparency are weighted by
    their alpha, everything else is treated as opaque.

    Raises:
        EmptyImageError: If the image has no pixels or all sampled pixels are fully
            transparent.
        ValueError: If ``strategy`` or ``max_samples`` is invalid.
    """
    return RGB.from_packed(_dominant(from_image(image), strategy, max_samples))


def try_get_dominant_color(
    buffer: bytes,
    *,
    strategy: str = DEFAULT_STRATEGY,
    max_samples: int = DEFAULT_MAX_SAMPLES,
) -> DominantColorResult:
    """Like :func:`get_dominant_color`, but report failures as a value.

    Decoding and empty-image failures are returned as a :class:`DominantColorResult`
    whose ``error`` says which one happened. Invalid parameters still raise
    ``ValueError``.
    """
    try:
        color = get_dominant_color(buffer, strategy=strategy, max_samples=max_samples)
    except DominantColorError as exc:
        return DominantColorResult(error=exc.kind, message=str(exc))
    return DominantColorResult(color=color)
