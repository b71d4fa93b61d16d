"""Conversions between uploaded bytes, PIL images and data URLs."""

import base64
import io

from PIL import Image, UnidentifiedImageError


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded RGB or RGBA image.

    Raises:
        ValueError: If the bytes are not a readable image.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValueError(f"Cannot decode image: {e}") from e

    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    return image


def image_to_base64(image: Image.Image) -> str:
    """Convert a PIL Image to a base64 PNG data URL."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    buffer.seek(0)
    base64_data = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{base64_data}"
