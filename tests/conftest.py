"""Pytest configuration and fixtures for chef2puppet tests."""

import json
import logging
from collections.abc import Callable
from pathlib import Path

import pytest

CookbookFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def restore_logging():
    """
    Restore logging configuration changed by a test.

    ``configure_logging`` replaces the root handlers, which would otherwise
    leak into later tests and hide records from ``caplog``.
    """
    root = logging.getLogger()
    package_logger = logging.getLogger("chef2puppet")
    handlers = list(root.handlers)
    root_level = root.level
    package_level = package_logger.level
    yield
    root.handlers[:] = handlers
    root.setLevel(root_level)
    package_logger.setLevel(package_level)


@pytest.fixture
def make_cookbook(tmp_path: Path) -> CookbookFactory:
    """
    Build a cookbook directory under ``tmp_path``.

    The returned factory takes a mapping of recipe file names to content and
    an optional cookbook name; it writes ``metadata.json`` and the recipes.
    """

    def factory(
        recipes: dict[str, str], name: str = "apache2", dirname: str = "cookbook"
    ) -> Path:
        cookbook = tmp_path / dirname
        (cookbook / "recipes").mkdir(parents=True)
        (cookbook / "metadata.json").write_text(
            json.dumps({"name": name, "version": "1.0.0"})
        )
        for filename, content in recipes.items():
            (cookbook / "recipes" / filename).write_text(content)
        return cookbook

    return factory
