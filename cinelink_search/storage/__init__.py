"""Durable key-value storage and JSON helpers shared by the stores."""

from __future__ import annotations

import json
import logging
from typing import Any

from cinelink_search.contracts import KeyValueStorage

logger = logging.getLogger(__name__)


async def load_json(storage: KeyValueStorage, key: str, default: Any = None) -> Any:
    """Read and decode a JSON blob. Missing or corrupt data yields ``default``."""
    raw = await storage.get_item(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Discarding corrupt storage entry %r", key)
        return default


async def save_json(storage: KeyValueStorage, key: str, value: Any) -> None:
    await storage.set_item(key, json.dumps(value, ensure_ascii=False))
