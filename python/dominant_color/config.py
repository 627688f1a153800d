"""Environment-driven defaults for ``dominant_color``."""

import os

from loguru import logger

STRATEGIES: tuple[str, ...] = ("hue", "rgb")

_DEFAULT_MAX_SAMPLES = 50_000
_DEFAULT_STRATEGY = "hue"


def _env_max_samples() -> int:
    raw = os.environ.get("DOMINANT_COLOR_MAX_SAMPLES")
    if raw is None:
        return _DEFAULT_MAX_SAMPLES
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(
            "DOMINANT_COLOR_MAX_SAMPLES={!r} is not a positive integer, using {}",
            raw,
            _DEFAULT_MAX_SAMPLES,
        )
        return _DEFAULT_MAX_SAMPLES
    return value


def _env_strategy() -> str:
    raw = os.environ.get("DOMINANT_COLOR_STRATEGY")
    if raw is None:
        return _DEFAULT_STRATEGY
    value = raw.strip().lower()
    if value not in STRATEGIES:
        logger.warning(
            "DOMINANT_COLOR_STRATEGY={!r} is not one of {}, using {!r}",
            raw,
            STRATEGIES,
            _DEFAULT_STRATEGY,
        )
        return _DEFAULT_STRATEGY
    return value


class Config:
    """Defaults for the keyword-only parameters of the public functions.

    Read once from the environment when the package is imported. Invalid
    values are logged and replaced by the built-in defaults.
    """

    # Sampling ceiling: at most this many pixels are inspected per image
    MAX_SAMPLES: int = _env_max_samples()

    # "hue" clusters on 32 hue bands, "rgb" on a 64-cell RGB cube
    STRATEGY: str = _env_strategy()

    @classmethod
    def validate_strategy(cls, strategy: str) -> bool:
        """Validate strategy parameter."""
        return strategy in STRATEGIES

    @classmethod
    def validate_max_samples(cls, max_samples: int) -> bool:
        """Validate sampling ceiling parameter."""
        return isinstance(max_samples, int) and not isinstance(max_samples, bool) and max_samples >= 1


config = Config()
