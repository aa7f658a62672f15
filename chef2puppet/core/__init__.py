"""Core utilities for chef2puppet."""

from chef2puppet.core.config import DEFAULT_SETTINGS, TranslatorSettings
from chef2puppet.core.errors import (
    Chef2PuppetError,
    ChefFileNotFoundError,
    InvalidCookbookError,
    ParseError,
)
from chef2puppet.core.path_utils import _normalize_path, _safe_join

__all__ = [
    "DEFAULT_SETTINGS",
    "Chef2PuppetError",
    "ChefFileNotFoundError",
    "InvalidCookbookError",
    "ParseError",
    "TranslatorSettings",
    "_normalize_path",
    "_safe_join",
]
