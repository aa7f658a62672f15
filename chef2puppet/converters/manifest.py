"""
Chef recipe to Puppet manifest translation.

Walks a recipe's lines, passes comments through, parses each accumulated
statement block and renders the result inside a class named after the
recipe.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from chef2puppet.core.config import DEFAULT_SETTINGS, TranslatorSettings
from chef2puppet.core.constants import INCLUDE_RECIPE
from chef2puppet.core.logging import LogContext, get_logger
from chef2puppet.core.path_utils import safe_read_text
from chef2puppet.converters.expression import render_text
from chef2puppet.converters.mappings import DEFAULT_TABLES, MappingTables
from chef2puppet.converters.resource import ResourceBlockTranslator
from chef2puppet.parsers.ast import ResourceCall, Statement, UnsupportedStatement
from chef2puppet.parsers.recipe import BlockText, CommentLine, scan_recipe
from chef2puppet.parsers.statement import parse_statements

logger = get_logger(__name__)


class OutputBuffer:
    """Accumulates manifest text for one recipe in emission order."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def write(self, text: str) -> None:
        self._parts.append(text)

    def getvalue(self) -> str:
        return "".join(self._parts)

    def reset(self) -> None:
        self._parts = []


@dataclass(frozen=True)
class RecipeTranslation:
    """Result of translating one recipe."""

    class_name: str
    text: str
    class_opened: bool


class RecipeTranslator:
    """
    Translate whole recipes into Puppet manifests.

    A translator holds no per-recipe state; every call to ``translate``
    works on its own output buffer.
    """

    def __init__(
        self,
        tables: MappingTables = DEFAULT_TABLES,
        settings: TranslatorSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.tables = tables
        self.settings = settings
        self.resources = ResourceBlockTranslator(tables, settings)

    def translate(
        self, content: str, class_name: str, source_name: str = "<recipe>"
    ) -> RecipeTranslation:
        """
        Translate recipe text.

        Args:
            content: Recipe file content.
            class_name: Name of the wrapping Puppet class.
            source_name: Recipe name used in log messages and parse errors.

        Returns:
            RecipeTranslation with the manifest text.

        Raises:
            ParseError: If a statement block cannot be tokenized.

        """
        output = OutputBuffer()
        class_opened = False
        indent = self.settings.header_indent

        for event in scan_recipe(content.splitlines()):
            if isinstance(event, CommentLine):
                output.write(f"{indent if class_opened else ''}{event.text}\n")
                continue

            block = parse_statements(event.text, source_name, event.line_numbers)
            if block.unterminated_line is not None:
                logger.warning(
                    f"Dropping unterminated statement block in {source_name} "
                    f"starting at line {block.unterminated_line}"
                )

            if not class_opened:
                output.write(f"class {class_name} {{\n")
                class_opened = True

            for statement in block.statements:
                output.write(self._render(statement, source_name))

        if class_opened:
            output.write("}\n")

        return RecipeTranslation(
            class_name=class_name, text=output.getvalue(), class_opened=class_opened
        )

    def _render(self, statement: Statement, source_name: str) -> str:
        indent = self.settings.header_indent

        if isinstance(statement, UnsupportedStatement):
            logger.warning(
                f"Passing through unsupported code in {source_name} at line "
                f"{statement.line} as a comment"
            )
            return "".join(
                f"{indent}# {line.rstrip()}\n" for line in statement.source.splitlines()
            )

        if not isinstance(statement, ResourceCall):
            logger.warning(
                f"Ignoring top-level statement in {source_name} at line {statement.line}"
            )
            return ""

        logger.debug(
            f"Translating {statement.resource_type} resource at line {statement.line}"
        )
        if statement.resource_type == INCLUDE_RECIPE:
            return f"{indent}include {render_text(statement.name)}\n\n"

        return self.resources.translate(statement).render(self.settings, indent)


def recipe_class_name(recipe_path: Path, settings: TranslatorSettings = DEFAULT_SETTINGS) -> str:
    """Class name for a recipe: its file name without the recipe suffix."""
    name = recipe_path.name
    if name.endswith(settings.recipe_suffix):
        return name[: -len(settings.recipe_suffix)]
    return name


def translate_recipe_file(
    recipe_path: Path,
    base_path: Path,
    translator: RecipeTranslator | None = None,
) -> RecipeTranslation:
    """
    Read and translate one recipe file.

    Args:
        recipe_path: Path to the recipe (.rb) file.
        base_path: Trusted directory the recipe must live under.
        translator: Translator to use; a default one when omitted.

    Returns:
        RecipeTranslation for the file.

    Raises:
        ValueError: If the recipe path escapes ``base_path``.
        ParseError: If a statement block cannot be tokenized.

    """
    translator = translator or RecipeTranslator()
    with LogContext(recipe=recipe_path.name):
        content = safe_read_text(recipe_path, base_path, encoding="utf-8")
        return translator.translate(
            content,
            recipe_class_name(recipe_path, translator.settings),
            source_name=str(recipe_path),
        )


def translate_recipe(
    content: str,
    class_name: str,
    tables: MappingTables = DEFAULT_TABLES,
    settings: TranslatorSettings = DEFAULT_SETTINGS,
) -> str:
    """Translate recipe text and return the manifest text."""
    return RecipeTranslator(tables, settings).translate(content, class_name).text
