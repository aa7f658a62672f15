"""
Chef attribute call to Puppet attribute statement conversion.

Each attribute call inside a resource block renders to zero or more
``name => value`` statements. A handful of attribute names have dedicated
rules; everything else goes through the generic quoting rule.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from chef2puppet.core.config import DEFAULT_SETTINGS, TranslatorSettings
from chef2puppet.core.constants import (
    FILE_SOURCE_RESOURCES,
    REGEX_NUMERIC_VALUE,
    TEMPLATE_RESOURCE,
)
from chef2puppet.core.logging import get_logger
from chef2puppet.converters.expression import render_predicate, render_text
from chef2puppet.converters.mappings import DEFAULT_TABLES, MappingTables
from chef2puppet.parsers.ast import (
    ArrayLiteral,
    AttributeCall,
    Expression,
    NotificationRef,
)

logger = get_logger(__name__)

GUARD_ATTRIBUTES = {"not_if": "unless", "only_if": "onlyif"}


def quote(text: str) -> str:
    """Wrap text in single quotes, escaping embedded single quotes."""
    return "'" + text.replace("'", "\\'") + "'"


@dataclass(frozen=True)
class AttributeStatement:
    """One rendered ``name => value`` fragment of a Puppet resource body."""

    name: str
    value: str

    def __str__(self) -> str:
        return f"{self.name} => {self.value}"


AttributeRule = Callable[[AttributeCall, str], list[AttributeStatement]]


class AttributeStatementBuilder:
    """
    Render attribute calls as Puppet attribute statements.

    Rules are looked up by attribute name; unknown names fall through to the
    generic rule. Notification references found among the arguments of any
    call render as ``subscribe`` statements ahead of the call's own output.
    """

    def __init__(
        self,
        tables: MappingTables = DEFAULT_TABLES,
        settings: TranslatorSettings = DEFAULT_SETTINGS,
    ) -> None:
        """
        Initialize the builder.

        Args:
            tables: Type and action mapping tables.
            settings: Rendering settings.

        """
        self.tables = tables
        self.settings = settings
        self.rules: dict[str, AttributeRule] = {
            "source": self._source,
            "backup": self._backup,
            "to": self._to,
            "running": self._running,
            "action": self._action,
            "not_if": self._guard,
            "only_if": self._guard,
            "resources": self._consumed,
            "command": self._consumed,
            "subscribes": self._consumed,
            "notifies": self._consumed,
        }

    def build(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        """
        Render one attribute call.

        Args:
            call: Parsed attribute call.
            resource_type: Chef type of the enclosing resource.

        Returns:
            Rendered statements in emission order, possibly empty.

        """
        statements = self._subscriptions(call.args)
        rule = self.rules.get(call.name, self._generic)
        statements.extend(rule(call, resource_type))

        if call.block is not None and call.name not in GUARD_ATTRIBUTES:
            logger.warning(
                f"Ignoring nested block of '{call.name}' in {resource_type} "
                f"resource (line {call.line})"
            )
        return statements

    def _subscriptions(self, args: tuple[Expression, ...]) -> list[AttributeStatement]:
        statements = []
        for arg in args:
            if not isinstance(arg, NotificationRef):
                continue
            for target_type, target_name in arg.targets:
                puppet_type = self.tables.translate_type(target_type).capitalize()
                statements.append(
                    AttributeStatement("subscribe", f"{puppet_type}[{quote(target_name)}]")
                )
        return statements

    def _joined_args(self, call: AttributeCall) -> str:
        return " ".join(
            render_text(arg)
            for arg in call.args
            if not isinstance(arg, NotificationRef)
        )

    def _generic(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        value = self._joined_args(call)
        if re.match(REGEX_NUMERIC_VALUE, value):
            return [AttributeStatement(call.name, value)]
        return [AttributeStatement(call.name, quote(value))]

    def _source(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        value = self._joined_args(call)
        if resource_type == TEMPLATE_RESOURCE:
            return [AttributeStatement("content", f"template({quote(value)})")]
        if resource_type in FILE_SOURCE_RESOURCES:
            source_url = f"{self.settings.file_source_prefix}{value}"
            return [AttributeStatement("source", quote(source_url))]
        return self._generic(call, resource_type)

    def _backup(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        return [AttributeStatement("backup", self._joined_args(call))]

    def _to(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        return [AttributeStatement("ensure", quote(self._joined_args(call)))]

    def _running(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        return [AttributeStatement("ensure", "running")]

    def _action(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        actions: list[str] = []
        for arg in call.args:
            items = arg.items if isinstance(arg, ArrayLiteral) else (arg,)
            actions.extend(render_text(item) for item in items)
        return [
            AttributeStatement("ensure", quote(self.tables.translate_action(action)))
            for action in actions
        ]

    def _guard(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        if call.block is None:
            if call.args:
                logger.warning(
                    f"Skipping '{call.name}' without a block in {resource_type} "
                    f"resource (line {call.line}); only block guards are translated"
                )
            return []
        condition = render_predicate(call.block.last_expression)
        if not condition:
            return []
        return [AttributeStatement(GUARD_ATTRIBUTES[call.name], quote(condition))]

    def _consumed(self, call: AttributeCall, resource_type: str) -> list[AttributeStatement]:
        return []
