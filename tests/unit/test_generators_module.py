"""Tests for Puppet module generation."""

from pathlib import Path

import pytest

from chef2puppet.core.config import load_translator_settings
from chef2puppet.core.constants import MODULE_DIRECTORIES
from chef2puppet.core.errors import ChefFileNotFoundError, ParseError
from chef2puppet.generators.module import (
    convert_cookbook,
    convert_recipes,
    create_module_tree,
    list_recipes,
    plan_module,
)


class TestPlanModule:
    """Test module layout planning."""

    def test_layout(self, make_cookbook, tmp_path: Path) -> None:
        """Test paths are derived from the cookbook name."""
        cookbook = make_cookbook({"default.rb": ""}, name="nginx")

        layout = plan_module(cookbook, tmp_path / "out")

        assert layout.cookbook_name == "nginx"
        assert layout.recipes_path == cookbook.resolve() / "recipes"
        assert layout.output_path == (tmp_path / "out").resolve() / "nginx"
        assert layout.manifests == []

    def test_missing_cookbook(self, tmp_path: Path) -> None:
        """Test a missing cookbook fails before anything is created."""
        with pytest.raises(ChefFileNotFoundError):
            plan_module(tmp_path / "missing", tmp_path / "out")

        assert not (tmp_path / "out").exists()


class TestModuleTree:
    """Test module directory creation."""

    def test_all_directories_are_created(self, make_cookbook, tmp_path: Path) -> None:
        """Test the fixed module layout."""
        layout = plan_module(make_cookbook({}), tmp_path / "out")

        create_module_tree(layout)

        for directory in MODULE_DIRECTORIES:
            assert (layout.output_path / directory).is_dir()

    def test_existing_tree_is_reused(self, make_cookbook, tmp_path: Path) -> None:
        """Test creating the tree twice is harmless."""
        layout = plan_module(make_cookbook({}), tmp_path / "out")

        create_module_tree(layout)
        create_module_tree(layout)

        assert (layout.output_path / "manifests").is_dir()


class TestConvertRecipes:
    """Test per-recipe manifest writing."""

    def test_recipes_in_name_order(self, make_cookbook, tmp_path: Path) -> None:
        """Test recipes are processed sorted by name, files only."""
        cookbook = make_cookbook(
            {"web.rb": "", "default.rb": "", "app.rb": ""}
        )
        (cookbook / "recipes" / "partials").mkdir()
        layout = plan_module(cookbook, tmp_path / "out")

        assert [p.name for p in list_recipes(layout)] == ["app.rb", "default.rb", "web.rb"]

    def test_manifest_per_recipe(self, make_cookbook, tmp_path: Path) -> None:
        """Test every recipe gets a manifest with a swapped suffix."""
        cookbook = make_cookbook(
            {"default.rb": "package 'nginx'\n", "notes.rb": "# nothing\n"}
        )
        layout = plan_module(cookbook, tmp_path / "out")
        create_module_tree(layout)
        seen: list[str] = []

        written = convert_recipes(layout, on_recipe=lambda path: seen.append(path.name))

        manifests = layout.output_path / "manifests"
        assert seen == ["default.rb", "notes.rb"]
        assert written == [manifests / "default.pp", manifests / "notes.pp"]
        assert (manifests / "default.pp").read_text().startswith("class default {\n")
        assert (manifests / "notes.pp").read_text() == "# nothing\n"

    def test_custom_manifest_suffix(self, make_cookbook, tmp_path: Path) -> None:
        """Test the manifest suffix comes from the settings."""
        settings = load_translator_settings(manifest_suffix=".puppet")
        layout = plan_module(make_cookbook({"default.rb": ""}), tmp_path / "out")
        create_module_tree(layout, settings)

        convert_recipes(layout, settings=settings)

        assert (layout.output_path / "manifests" / "default.puppet").is_file()


class TestConvertCookbook:
    """Test whole cookbook conversion."""

    def test_callbacks_and_result(self, make_cookbook, tmp_path: Path) -> None:
        """Test the layout and recipe callbacks run in order."""
        cookbook = make_cookbook({"default.rb": "package 'git'\n"}, name="tools")
        events: list[str] = []

        layout = convert_cookbook(
            cookbook,
            tmp_path / "out",
            on_layout=lambda plan: events.append(f"layout:{plan.cookbook_name}"),
            on_recipe=lambda path: events.append(f"recipe:{path.name}"),
        )

        assert events == ["layout:tools", "recipe:default.rb"]
        assert layout.manifests == [layout.output_path / "manifests" / "default.pp"]

    def test_parse_error_stops_the_run(self, make_cookbook, tmp_path: Path) -> None:
        """Test a failing recipe aborts the remaining ones."""
        cookbook = make_cookbook(
            {"a.rb": "package 'broken\n", "b.rb": "package 'git'\n"}
        )

        with pytest.raises(ParseError):
            convert_cookbook(cookbook, tmp_path / "out")

        assert not (tmp_path / "out" / "apache2" / "manifests" / "b.pp").exists()
