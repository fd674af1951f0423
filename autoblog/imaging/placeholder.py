"""Offline placeholder hero image: diagonal two-stop gradient plus soft circles."""

from __future__ import annotations

import io
import os

from PIL import Image, ImageChops, ImageDraw

WIDTH = 1920
HEIGHT = 1080
GRADIENT_START = (0x66, 0x7E, 0xEA)
GRADIENT_END = (0x76, 0x4B, 0xA2)

# (cx, cy, radius, opacity)
CIRCLES = [
    (960, 540, 100, 0.10),
    (1200, 300, 60, 0.05),
    (720, 780, 80, 0.05),
]


def _diagonal_mask(width: int, height: int) -> Image.Image:
    """L-mode mask running 0 at the top-left corner to 255 at the bottom-right."""
    vertical = Image.linear_gradient("L").resize((width, height))
    horizontal = Image.linear_gradient("L").transpose(Image.Transpose.TRANSPOSE).resize((width, height))
    return ImageChops.add(horizontal, vertical, scale=2.0)


def render_placeholder(width: int = WIDTH, height: int = HEIGHT) -> bytes:
    """PNG bytes of the placeholder. Same input, same pixels."""
    start = Image.new("RGBA", (width, height), GRADIENT_START + (255,))
    end = Image.new("RGBA", (width, height), GRADIENT_END + (255,))
    img = Image.composite(end, start, _diagonal_mask(width, height))

    overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    sx, sy = width / WIDTH, height / HEIGHT
    for cx, cy, r, opacity in CIRCLES:
        x, y, rr = cx * sx, cy * sy, r * min(sx, sy)
        draw.ellipse((x - rr, y - rr, x + rr, y + rr), fill=(255, 255, 255, round(255 * opacity)))
    img = Image.alpha_composite(img, overlay).convert("RGB")

    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def write_placeholder(output_path: str) -> int:
    """Render the placeholder to `output_path`; returns bytes written."""
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    data = render_placeholder()
    with open(output_path, "wb") as f:
        f.write(data)
    return len(data)
