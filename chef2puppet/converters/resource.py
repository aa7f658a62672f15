"""Chef resource declaration to Puppet resource block conversion."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from chef2puppet.core.config import DEFAULT_SETTINGS, TranslatorSettings
from chef2puppet.core.constants import EXECUTE_RESOURCE, REGEX_SEPARATORS
from chef2puppet.core.logging import get_logger
from chef2puppet.converters.attribute import (
    AttributeStatement,
    AttributeStatementBuilder,
    quote,
)
from chef2puppet.converters.expression import render_command, render_text
from chef2puppet.converters.mappings import DEFAULT_TABLES, MappingTables
from chef2puppet.parsers.ast import (
    ArrayLiteral,
    AttributeCall,
    Expression,
    ResourceCall,
)

logger = get_logger(__name__)


@dataclass
class ManifestBlock:
    """Rendered pieces of one Puppet resource declaration."""

    puppet_type: str
    title: str
    statements: list[AttributeStatement] = field(default_factory=list)
    comment: str | None = None

    def has_statement(self, text: str) -> bool:
        """Check whether any statement starts with the given rendering."""
        return any(str(statement).startswith(text) for statement in self.statements)

    def render(self, settings: TranslatorSettings = DEFAULT_SETTINGS, indent: str = "") -> str:
        """
        Serialize the block.

        Args:
            settings: Rendering settings.
            indent: Indentation of the header and closing brace.

        Returns:
            Block text ending with a blank line.

        """
        lines = []
        if self.comment is not None:
            lines.append(f"{indent}# {self.comment}\n")
        lines.append(f"{indent}{self.puppet_type} {{ {self.title}:\n")
        body = settings.fragment_separator.join(str(s) for s in self.statements)
        lines.append(f"{settings.body_indent}{body};\n{indent}}}\n\n")
        return "".join(lines)


def render_title(name: Expression | None) -> str:
    """Render a resource name as a quoted Puppet title or title array."""
    if isinstance(name, ArrayLiteral):
        return "[" + ", ".join(quote(render_text(item)) for item in name.items) + "]"
    return quote(render_text(name))


class ResourceBlockTranslator:
    """Translate parsed resource declarations into manifest blocks."""

    def __init__(
        self,
        tables: MappingTables = DEFAULT_TABLES,
        settings: TranslatorSettings = DEFAULT_SETTINGS,
        builder: AttributeStatementBuilder | None = None,
    ) -> None:
        """
        Initialize the translator.

        Args:
            tables: Type and action mapping tables.
            settings: Rendering settings.
            builder: Attribute statement builder; one sharing the same
                tables and settings is created when omitted.

        """
        self.tables = tables
        self.settings = settings
        self.builder = builder or AttributeStatementBuilder(tables, settings)

    def translate(self, resource: ResourceCall) -> ManifestBlock:
        """
        Translate one resource declaration.

        Args:
            resource: Parsed top-level resource call.

        Returns:
            ManifestBlock for the declaration.

        """
        block = ManifestBlock(
            puppet_type=self.tables.translate_type(resource.resource_type),
            title=render_title(resource.name),
        )

        if resource.resource_type == EXECUTE_RESOURCE:
            self._use_command_as_title(resource, block)

        for statement in resource.body:
            if isinstance(statement, AttributeCall):
                block.statements.extend(
                    self.builder.build(statement, resource.resource_type)
                )
            else:
                logger.warning(
                    f"Ignoring statement in {resource.resource_type} resource "
                    f"(line {statement.line}): not an attribute call"
                )

        default_ensure = self.tables.default_ensure(resource.resource_type)
        if default_ensure and not block.has_statement(f"ensure => {quote(default_ensure)}"):
            block.statements.append(AttributeStatement("ensure", quote(default_ensure)))

        return block

    def _use_command_as_title(self, resource: ResourceCall, block: ManifestBlock) -> None:
        """Exec resources are identified by their command, not a label."""
        command = resource.find_attribute("command")
        if command is not None and command.args:
            command_text = render_command(command.args[0])
        else:
            command_text = render_command(resource.name)
        block.comment = re.sub(REGEX_SEPARATORS, " ", render_text(resource.name))
        block.title = quote(command_text)
