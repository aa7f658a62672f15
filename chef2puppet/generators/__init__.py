"""Puppet module generators."""

from chef2puppet.generators.module import ModuleLayout, convert_cookbook, plan_module

__all__ = ["ModuleLayout", "convert_cookbook", "plan_module"]
