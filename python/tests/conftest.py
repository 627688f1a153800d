from collections.abc import Callable
from io import BytesIO

import pytest
from PIL import Image


def _encode(image: Image.Image, format: str = "PNG") -> bytes:
    buf = BytesIO()
    image.save(buf, format=format)
    return buf.getvalue()


@pytest.fixture
def encode() -> Callable[..., bytes]:
    """Encode a PIL image to bytes (PNG unless another ``format`` is given)."""
    return _encode
