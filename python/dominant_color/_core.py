"""Sampling, bucketing and reduction behind :func:`dominant_color.get_dominant_color`.

Pixels are visited with a fixed stride so that at most ``max_samples`` of them
are inspected. Each visited pixel is mapped to a cluster key and its color
components are added, scaled by its alpha-derived weight, to that cluster's
running sums. The heaviest cluster wins and its weighted average is the
dominant color.
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass, field

from loguru import logger

from dominant_color._decode import PixelBuffer
from dominant_color.config import STRATEGIES, config
from dominant_color.errors import EmptyImageError

DEFAULT_MAX_SAMPLES: int = config.MAX_SAMPLES
DEFAULT_STRATEGY: str = config.STRATEGY

Components = tuple[float, float, float]


class HueSpace:
    """Hue/saturation/lightness components, keyed by 32 hue bands."""

    name = "hue"
    n_keys = 32

    @staticmethod
    def map(r: int, g: int, b: int) -> tuple[int, Components]:
        h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)  # noqa: E741
        # hue fraction on a 0-255 scale, top 5 bits select the band
        key = min(int(h * 256), 255) >> 3
        return key, (h, s, l)

    @staticmethod
    def to_rgb(components: Components) -> Components:
        h, s, l = components  # noqa: E741
        r, g, b = colorsys.hls_to_rgb(h, l, s)
        return r * 255.0, g * 255.0, b * 255.0


class CubeSpace:
    """Raw RGB components, keyed by the top two bits of every channel."""

    name = "rgb"
    n_keys = 64

    @staticmethod
    def map(r: int, g: int, b: int) -> tuple[int, Components]:
        key = (r >> 6) << 4 | (g >> 6) << 2 | (b >> 6)
        return key, (float(r), float(g), float(b))

    @staticmethod
    def to_rgb(components: Components) -> Components:
        return components


_SPACES: dict[str, type[HueSpace] | type[CubeSpace]] = {
    HueSpace.name: HueSpace,
    CubeSpace.name: CubeSpace,
}


@dataclass(slots=True)
class Bucket:
    """Weighted running sums for every sampled pixel sharing ``key``."""

    key: int
    sums: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    weight: float = 0.0

    def add(self, components: Components, weight: float) -> None:
        self.sums[0] += components[0] * weight
        self.sums[1] += components[1] * weight
        self.sums[2] += components[2] * weight
        self.weight += weight

    def mean(self) -> Components:
        if self.weight <= 0.0:
            raise EmptyImageError(f"cluster {self.key} has no weight")
        return (
            self.sums[0] / self.weight,
            self.sums[1] / self.weight,
            self.sums[2] / self.weight,
        )


@dataclass(frozen=True, slots=True)
class _ClusterInfo:
    key: int
    rgb: tuple[int, int, int]
    weight: float
    share: float


@dataclass(frozen=True, slots=True)
class _DebugInfo:
    clusters: list[_ClusterInfo]
    selected_key: int
    sampled_pixels: int
    stride: int
    strategy: str


def check_params(strategy: str, max_samples: int) -> None:
    """Raise ``ValueError`` for an unknown strategy or a non-positive ceiling."""
    if not config.validate_strategy(strategy):
        raise ValueError(f"strategy must be one of {STRATEGIES}, got {strategy!r}")
    if not config.validate_max_samples(max_samples):
        raise ValueError(f"max_samples must be a positive integer, got {max_samples!r}")


def stride_for(pixel_count: int, max_samples: int = DEFAULT_MAX_SAMPLES) -> int:
    """Step between visited pixels so that roughly ``max_samples`` are visited."""
    return max(1, pixel_count // max_samples)


def sample_indices(pixel_count: int, max_samples: int = DEFAULT_MAX_SAMPLES) -> range:
    return range(0, pixel_count, stride_for(pixel_count, max_samples))


def accumulate(
    pixels: PixelBuffer,
    strategy: str = DEFAULT_STRATEGY,
    max_samples: int = DEFAULT_MAX_SAMPLES,
) -> tuple[dict[int, Bucket], int]:
    """Fold the sampled pixels of ``pixels`` into buckets.

    Returns the buckets by key and the number of pixels that were sampled.
    """
    space = _SPACES[strategy]
    data = pixels.data
    channels = pixels.channels
    indices = sample_indices(pixels.pixel_count, max_samples)
    logger.debug(
        "sampling {} of {} pixels with stride {}",
        len(indices),
        pixels.pixel_count,
        indices.step,
    )

    buckets: dict[int, Bucket] = {}
    for i in indices:
        offset = i * channels
        r, g, b = data[offset], data[offset + 1], data[offset + 2]
        weight = data[offset + 3] / 255.0 if channels == 4 else 1.0
        key, components = space.map(r, g, b)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket(key)
        bucket.add(components, weight)
    return buckets, len(indices)


def select(buckets: dict[int, Bucket]) -> Bucket:
    """Return the heaviest bucket, preferring the lowest key on equal weight.

    Raises:
        EmptyImageError: If no bucket has a positive weight.
    """
    candidates = [bucket for bucket in buckets.values() if bucket.weight > 0.0]
    if not candidates:
        raise EmptyImageError("no pixel with non-zero alpha was sampled")
    return max(candidates, key=lambda bucket: (bucket.weight, -bucket.key))


def to_channel(value: float) -> int:
    return min(255, max(0, round(value)))


def pack(r: int, g: int, b: int) -> int:
    return r << 16 | g << 8 | b


def reduce_rgb(bucket: Bucket, strategy: str = DEFAULT_STRATEGY) -> tuple[int, int, int]:
    """Average ``bucket`` and convert it back to 8-bit RGB channels."""
    r, g, b = _SPACES[strategy].to_rgb(bucket.mean())
    return to_channel(r), to_channel(g), to_channel(b)


def _dominant(pixels: PixelBuffer, strategy: str, max_samples: int) -> int:
    color, _ = _dominant_debug(pixels, strategy, max_samples)
    return color


def _dominant_debug(
    pixels: PixelBuffer,
    strategy: str,
    max_samples: int,
) -> tuple[int, _DebugInfo]:
    check_params(strategy, max_samples)
    buckets, sampled = accumulate(pixels, strategy, max_samples)
    winner = select(buckets)
    color = pack(*reduce_rgb(winner, strategy))
    logger.debug(
        "{} clusters, selected key {} with weight {:.3f}, color #{:06X}",
        len(buckets),
        winner.key,
        winner.weight,
        color,
    )

    total = sum(bucket.weight for bucket in buckets.values())
    clusters = [
        _ClusterInfo(
            key=bucket.key,
            rgb=reduce_rgb(bucket, strategy),
            weight=bucket.weight,
            share=bucket.weight / total,
        )
        for bucket in sorted(buckets.values(), key=lambda bucket: bucket.key)
        if bucket.weight > 0.0
    ]
    debug = _DebugInfo(
        clusters=clusters,
        selected_key=winner.key,
        sampled_pixels=sampled,
        stride=stride_for(pixels.pixel_count, max_samples),
        strategy=strategy,
    )
    return color, debug
