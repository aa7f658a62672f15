"""Translator configuration for chef2puppet."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from chef2puppet.core.constants import MODULE_DIRECTORIES


@dataclass(frozen=True)
class TranslatorSettings:
    """Rendering and layout settings shared by every translation."""

    header_indent: str = "  "
    body_indent: str = "    "
    recipe_suffix: str = ".rb"
    manifest_suffix: str = ".pp"
    file_source_prefix: str = "puppet:///"
    module_directories: tuple[str, ...] = field(default=MODULE_DIRECTORIES)

    @property
    def fragment_separator(self) -> str:
        """Separator placed between attribute fragments of one block."""
        return f",\n{self.body_indent}"


DEFAULT_SETTINGS = TranslatorSettings()


def load_translator_settings(**overrides: Any) -> TranslatorSettings:
    """
    Build translator settings from the defaults.

    Args:
        **overrides: Field values replacing the defaults.

    Returns:
        TranslatorSettings instance.

    Raises:
        TypeError: If an override names an unknown setting.

    """
    if not overrides:
        return DEFAULT_SETTINGS
    return replace(DEFAULT_SETTINGS, **overrides)
