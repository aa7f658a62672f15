"""Immutable Chef to Puppet lookup tables."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from chef2puppet.core.constants import (
    ACTION_TO_ENSURE,
    DEFAULT_ACTIONS,
    RESOURCE_MAPPINGS,
)


def _freeze(table: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(table))


@dataclass(frozen=True)
class MappingTables:
    """
    Type, action and default-action tables.

    Built once by the entry point and passed by reference to every
    translation. Lookups never fail: unknown names pass through unchanged.
    """

    resource_types: Mapping[str, str] = field(
        default_factory=lambda: _freeze(RESOURCE_MAPPINGS)
    )
    actions: Mapping[str, str] = field(default_factory=lambda: _freeze(ACTION_TO_ENSURE))
    default_actions: Mapping[str, str] = field(
        default_factory=lambda: _freeze(DEFAULT_ACTIONS)
    )

    def __post_init__(self) -> None:
        for name in ("resource_types", "actions", "default_actions"):
            table = getattr(self, name)
            if not isinstance(table, MappingProxyType):
                object.__setattr__(self, name, _freeze(table))

    def translate_type(self, resource_type: str) -> str:
        """Puppet type for a Chef resource type, or the type itself."""
        return self.resource_types.get(resource_type, resource_type)

    def translate_action(self, action: str) -> str:
        """Puppet ensure value for a Chef action, or the action itself."""
        return self.actions.get(action, action)

    def default_ensure(self, resource_type: str) -> str | None:
        """
        Ensure value implied by a resource type's default action.

        Args:
            resource_type: Chef resource type.

        Returns:
            Translated default action, or None when the type has none.

        """
        action = self.default_actions.get(resource_type)
        if action is None:
            return None
        return self.translate_action(action)


DEFAULT_TABLES = MappingTables()
