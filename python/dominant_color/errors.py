"""Errors raised by ``dominant_color`` and their discriminating kinds."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Why a dominant color could not be computed."""

    DECODE_FAILURE = "decode_failure"
    EMPTY_INPUT = "empty_input"


class DominantColorError(ValueError):
    """Base class for every failure reported by this package."""

    kind: ErrorKind


class ConversionError(DominantColorError):
    """The input bytes could not be decoded into an image."""

    kind = ErrorKind.DECODE_FAILURE


class EmptyImageError(DominantColorError):
    """No sampled pixel carried any weight, so there is nothing to select.

    Raised for images without pixels and for images whose sampled pixels are
    all fully transparent.
    """

    kind = ErrorKind.EMPTY_INPUT
