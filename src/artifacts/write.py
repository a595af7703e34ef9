"""Loading and persisting index artifacts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from artifacts.models.artifacts.defines import DefineIndex
from artifacts.models.artifacts.index import FunctionIndex
from artifacts.utils import _dump_json, _load_json, _write_json

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_IndexT = TypeVar("_IndexT", bound=BaseModel)


def dump_index(index: BaseModel) -> bytes:
    """Serialized artifact bytes, exactly as ``write_index`` stores them."""
    return _dump_json(index)


def write_index(path: Path, index: BaseModel) -> None:
    """Fully rewrite the artifact at ``path``, replacing it in one step."""
    _write_json(path, index)


def _load_model(path: Path, model: type[_IndexT]) -> _IndexT | None:
    raw = _load_json(path)
    if raw is None:
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            "Existing index %s is malformed (%s), treating as empty", path, exc
        )
        return None


def load_function_index(path: Path) -> FunctionIndex | None:
    """Load a persisted function index; absent or corrupt files yield None."""
    return _load_model(path, FunctionIndex)


def load_define_index(path: Path) -> DefineIndex | None:
    """Load a persisted define index; absent or corrupt files yield None."""
    return _load_model(path, DefineIndex)


__all__ = ["dump_index", "load_define_index", "load_function_index", "write_index"]
