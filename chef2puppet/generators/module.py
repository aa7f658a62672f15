"""Puppet module generation from a Chef cookbook."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from chef2puppet.core.config import DEFAULT_SETTINGS, TranslatorSettings
from chef2puppet.core.constants import MANIFESTS_DIRNAME, RECIPES_DIRNAME
from chef2puppet.core.errors import validate_cookbook_structure
from chef2puppet.core.logging import LogContext, get_logger, log_operation
from chef2puppet.core.path_utils import (
    _normalize_path,
    _safe_join,
    safe_is_file,
    safe_iterdir,
    safe_mkdir,
    safe_write_text,
)
from chef2puppet.converters.manifest import (
    RecipeTranslator,
    recipe_class_name,
    translate_recipe_file,
)
from chef2puppet.converters.mappings import DEFAULT_TABLES, MappingTables
from chef2puppet.parsers.metadata import read_cookbook_name

logger = get_logger(__name__)

RecipeCallback = Callable[[Path], None]
LayoutCallback = Callable[["ModuleLayout"], None]


@dataclass
class ModuleLayout:
    """Where a cookbook is read from and its Puppet module is written to."""

    cookbook_name: str
    cookbook_path: Path
    recipes_path: Path
    output_root: Path
    output_path: Path
    manifests: list[Path] = field(default_factory=list)


def plan_module(cookbook_path: str | Path, output_dir: str | Path) -> ModuleLayout:
    """
    Validate the cookbook and work out the module layout.

    Args:
        cookbook_path: Chef cookbook root directory.
        output_dir: Directory the Puppet module is created in.

    Returns:
        ModuleLayout for the conversion.

    Raises:
        ChefFileNotFoundError: If the cookbook, its recipes or metadata
            are missing.
        InvalidCookbookError: If the metadata has no usable name.

    """
    cookbook_root = _normalize_path(validate_cookbook_structure(cookbook_path))
    cookbook_name = read_cookbook_name(cookbook_root)
    output_root = _normalize_path(output_dir)
    return ModuleLayout(
        cookbook_name=cookbook_name,
        cookbook_path=cookbook_root,
        recipes_path=_safe_join(cookbook_root, RECIPES_DIRNAME),
        output_root=output_root,
        output_path=_safe_join(output_root, cookbook_name),
    )


def create_module_tree(
    layout: ModuleLayout, settings: TranslatorSettings = DEFAULT_SETTINGS
) -> None:
    """Create the fixed Puppet module directories."""
    safe_mkdir(layout.output_root, layout.output_root.parent, parents=True, exist_ok=True)
    for directory in settings.module_directories:
        target = _safe_join(layout.output_path, *directory.split("/"))
        safe_mkdir(target, layout.output_root, parents=True, exist_ok=True)


def list_recipes(layout: ModuleLayout) -> list[Path]:
    """Recipe files of the cookbook in name order."""
    return [
        path
        for path in safe_iterdir(layout.recipes_path, layout.cookbook_path)
        if safe_is_file(path, layout.cookbook_path)
    ]


def convert_recipes(
    layout: ModuleLayout,
    tables: MappingTables = DEFAULT_TABLES,
    settings: TranslatorSettings = DEFAULT_SETTINGS,
    on_recipe: RecipeCallback | None = None,
) -> list[Path]:
    """
    Translate every recipe and write one manifest per recipe.

    Recipes are processed one at a time; the first failure aborts the run.

    Args:
        layout: Module layout from ``plan_module``.
        tables: Mapping tables shared by all recipes.
        settings: Rendering settings.
        on_recipe: Called with each recipe path before it is translated.

    Returns:
        Paths of the written manifests.

    """
    translator = RecipeTranslator(tables, settings)
    manifests_dir = _safe_join(layout.output_path, MANIFESTS_DIRNAME)

    for recipe_path in list_recipes(layout):
        if on_recipe is not None:
            on_recipe(recipe_path)
        translation = translate_recipe_file(recipe_path, layout.cookbook_path, translator)
        manifest_name = recipe_class_name(recipe_path, settings) + settings.manifest_suffix
        manifest_path = _safe_join(manifests_dir, manifest_name)
        safe_write_text(manifest_path, layout.output_root, translation.text)
        logger.info(f"Wrote {manifest_path}")
        layout.manifests.append(manifest_path)

    return layout.manifests


@log_operation("convert_cookbook")
def convert_cookbook(
    cookbook_path: str | Path,
    output_dir: str | Path,
    tables: MappingTables = DEFAULT_TABLES,
    settings: TranslatorSettings = DEFAULT_SETTINGS,
    on_layout: LayoutCallback | None = None,
    on_recipe: RecipeCallback | None = None,
) -> ModuleLayout:
    """
    Convert a Chef cookbook into a Puppet module.

    Args:
        cookbook_path: Chef cookbook root directory.
        output_dir: Directory the Puppet module is created in.
        tables: Mapping tables shared by all recipes.
        settings: Rendering settings.
        on_layout: Called with the layout before any directory is created.
        on_recipe: Called with each recipe path before it is translated.

    Returns:
        ModuleLayout listing the written manifests.

    """
    layout = plan_module(cookbook_path, output_dir)
    if on_layout is not None:
        on_layout(layout)
    with LogContext(cookbook=layout.cookbook_name):
        create_module_tree(layout, settings)
        convert_recipes(layout, tables, settings, on_recipe)
    return layout
