"""Utility functions for artifact serialization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(by_alias=True, exclude_none=True)
    return obj


def _dump_json(obj: object) -> bytes:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(payload, option=opts)


def _write_json(path: Path, obj: object) -> None:
    """Write ``obj`` through a sibling temp file so ``path`` is never partial."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_bytes(_dump_json(obj))
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def _load_json(path: Path) -> dict[str, Any] | None:
    """Load a JSON object, returning None when missing or unreadable."""
    if not path.exists():
        return None
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        logger.warning("Could not parse %s (%s), treating as empty", path, exc)
        return None
    if not isinstance(raw, dict):
        logger.warning("Expected a JSON object in %s, treating as empty", path)
        return None
    return raw
