"""Post metadata contract.

`metadata.json` is what the RSS/sitemap regenerator and the site renderer
read back for every post, so it is validated before anything is written.
"""

from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator


POST_METADATA_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["title", "description", "date", "readingTime", "image", "keywords", "slug"],
    "properties": {
        "title": {"type": "string", "minLength": 1},
        "description": {"type": "string", "minLength": 1},
        "date": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}$"},
        "readingTime": {"type": "string", "pattern": r"^[1-9]\d* min read$"},
        "image": {"type": "string", "pattern": r"^/assets/images/.+\.png$"},
        "keywords": {
            "type": "array",
            "maxItems": 10,
            "items": {"type": "string", "minLength": 4},
        },
        "slug": {
            "type": "string",
            "maxLength": 111,
            "pattern": r"^\d{4}-\d{2}-\d{2}-[a-z0-9]+(-[a-z0-9]+)*$",
        },
    },
    "additionalProperties": True,
}


_VALIDATOR = Draft202012Validator(POST_METADATA_SCHEMA)


def validate_post_metadata(payload: Dict[str, Any]) -> List[str]:
    """Return a list of human-readable validation errors (empty means valid)."""
    errors = []
    for e in sorted(_VALIDATOR.iter_errors(payload), key=lambda x: list(x.path)):
        path = ".".join(str(p) for p in e.path) if e.path else "<root>"
        errors.append(f"{path}: {e.message}")
    return errors
