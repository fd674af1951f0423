"""Thin Gemini wrapper. Every model call in the generator goes through here.

One attempt per call; callers decide whether a GeminiError degrades their
step or aborts the run.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.0-flash-preview-image-generation"


class GeminiError(Exception):
    """Raised when a Gemini call fails or returns nothing usable."""


def _decode_payload(data: Any) -> Optional[bytes]:
    if not data:
        return None
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str):
        try:
            return base64.b64decode(data, validate=False)
        except (binascii.Error, ValueError):
            return None
    return None


def first_image_payload(response: Any) -> Optional[bytes]:
    """Bytes of the first inline part whose MIME type is image/*, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is None:
            continue
        mime = getattr(inline, "mime_type", "") or ""
        if not mime.startswith("image/"):
            continue
        payload = _decode_payload(getattr(inline, "data", None))
        if payload:
            return payload
    return None


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        *,
        text_model: str = DEFAULT_TEXT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        client: Any = None,
    ):
        self.api_key = api_key
        self.text_model = text_model
        self.image_model = image_model
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise GeminiError("GEMINI_API_KEY env variable is required")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate_text(self, prompt: str, *, grounded: bool = True) -> str:
        """Single text generation; `grounded` enables Google Search grounding."""
        config = None
        if grounded:
            config = types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())])
        try:
            response = self.client.models.generate_content(
                model=self.text_model,
                contents=prompt,
                config=config,
            )
        except GeminiError:
            raise
        except Exception as e:
            raise GeminiError(f"{self.text_model} request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise GeminiError(f"{self.text_model} returned an empty response")
        return text

    def generate_image(self, prompt: str) -> bytes:
        try:
            response = self.client.models.generate_content(
                model=self.image_model,
                contents=prompt,
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except GeminiError:
            raise
        except Exception as e:
            raise GeminiError(f"{self.image_model} request failed: {e}") from e

        payload = first_image_payload(response)
        if payload is None:
            raise GeminiError("Gemini response did not contain inline image data")
        return payload
