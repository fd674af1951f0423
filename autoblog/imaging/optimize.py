"""Resize/encode hero images with Pillow and account for the size change."""

from __future__ import annotations

import io
import os

from PIL import Image, ImageOps

from autoblog.storage.compression_log import LOG_FILENAME, record_compression


def save_and_optimize_image(
    data: bytes,
    output_path: str,
    *,
    width: int = 1920,
    height: int = 1080,
    quality: int = 80,
    fmt: str = "png",
    log_compression: bool = True,
) -> int:
    """Cover-crop `data` to width x height, write it, return the encoded size.

    Raises OSError (PIL.UnidentifiedImageError) when `data` is not an image.
    """
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    with Image.open(io.BytesIO(data)) as src:
        img = ImageOps.fit(src.convert("RGB"), (width, height), method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))

    buf = io.BytesIO()
    if fmt.lower() in ("jpeg", "jpg"):
        img.save(buf, format="JPEG", quality=quality, optimize=True)
    else:
        img.save(buf, format="PNG", optimize=True)
    optimized = buf.getvalue()

    with open(output_path, "wb") as f:
        f.write(optimized)

    if log_compression:
        log_path = os.path.join(os.path.dirname(output_path), LOG_FILENAME)
        record_compression(output_path, len(data), len(optimized), log_path)
    return len(optimized)
