"""Image compression accounting.

The log is a JSON object keyed by image basename, rewritten whole on every
update (last write wins per file).
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

LOG_FILENAME = ".compression-log.json"


def load_compression_log(log_path: str) -> Dict[str, Dict[str, Any]]:
    try:
        with open(log_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_compression_log(log_path: str, log: Dict[str, Dict[str, Any]]) -> None:
    os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
    with open(log_path, "w", encoding="utf-8") as f:
        json.dump(log, f, indent=2)


def compression_entry(original_size: int, compressed_size: int, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    savings = original_size - compressed_size
    percent = round(savings / original_size * 100, 1) if original_size > 0 else 0
    return {
        "originalSize": original_size,
        "compressedSize": compressed_size,
        "savings": savings,
        "savingsPercent": percent,
        "lastModified": (now or datetime.now(timezone.utc)).isoformat(),
    }


def record_compression(image_path: str, original_size: int, compressed_size: int, log_path: str) -> Dict[str, Any]:
    """Upsert the entry for `image_path`'s basename and persist the log."""
    log = load_compression_log(log_path)
    filename = os.path.basename(image_path)
    entry = compression_entry(original_size, compressed_size)
    log[filename] = entry
    save_compression_log(log_path, log)

    if entry["savings"] > 0:
        logger.info(
            f"Compressed {filename}: {original_size / 1024:.1f}KB -> "
            f"{compressed_size / 1024:.1f}KB ({entry['savingsPercent']}% saved)"
        )
    return entry


def compression_stats(log_path: str) -> Dict[str, Any]:
    entries = [e for e in load_compression_log(log_path).values() if isinstance(e, dict)]
    if not entries:
        return {
            "totalFiles": 0,
            "totalOriginalSize": 0,
            "totalCompressedSize": 0,
            "totalSavings": 0,
            "averageSavingsPercent": 0,
        }

    total_original = sum(int(e.get("originalSize", 0)) for e in entries)
    total_compressed = sum(int(e.get("compressedSize", 0)) for e in entries)
    average = sum(float(e.get("savingsPercent", 0)) for e in entries) / len(entries)
    return {
        "totalFiles": len(entries),
        "totalOriginalSize": total_original,
        "totalCompressedSize": total_compressed,
        "totalSavings": total_original - total_compressed,
        "averageSavingsPercent": round(average, 1),
    }
