"""chef2puppet: Chef cookbook to Puppet module translator."""

from pathlib import Path

import tomllib


# Read version from pyproject.toml
def _get_version() -> str:
    """Get version from pyproject.toml."""
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
        version = data.get("tool", {}).get("poetry", {}).get("version")
        return str(version) if version else "unknown"
    except OSError:
        return "unknown"


__version__ = _get_version()

from chef2puppet.converters.manifest import (  # noqa: E402
    RecipeTranslator,
    translate_recipe,
    translate_recipe_file,
)
from chef2puppet.generators.module import convert_cookbook  # noqa: E402

__all__ = [
    "RecipeTranslator",
    "convert_cookbook",
    "translate_recipe",
    "translate_recipe_file",
]
