"""Test doubles shared by the pipeline tests."""

import io
from typing import List, Optional

from PIL import Image

from autoblog.generation.gemini_client import GeminiError
from autoblog.imaging.hero import HeroImageStrategy
from autoblog.ingestion.sources import BaseSource


class FakeGeminiClient:
    """Stands in for GeminiClient. Text replies are consumed in order."""

    def __init__(self, texts: Optional[List[object]] = None, image: object = None):
        self.texts = list(texts or [])
        self.image = image
        self.prompts: List[str] = []
        self.image_prompts: List[str] = []

    def generate_text(self, prompt: str, *, grounded: bool = True) -> str:
        self.prompts.append(prompt)
        if not self.texts:
            raise GeminiError("no scripted reply left")
        reply = self.texts.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def generate_image(self, prompt: str) -> bytes:
        self.image_prompts.append(prompt)
        if isinstance(self.image, Exception):
            raise self.image
        if self.image is None:
            raise GeminiError("Gemini response did not contain inline image data")
        return self.image


class StaticSource(BaseSource):
    def __init__(self, name, candidates=None, error=None):
        self.name = name
        self.candidates = list(candidates or [])
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.candidates)


class StaticImage(HeroImageStrategy):
    def __init__(self, data, name="static"):
        self.data = data
        self.name = name

    def produce(self, topic):
        return self.data


def png_bytes(size=(64, 36)) -> bytes:
    """A small but non-trivial PNG (noise does not compress below the size floor)."""
    buf = io.BytesIO()
    Image.effect_noise(size, 64).convert("RGB").save(buf, format="PNG")
    return buf.getvalue()
