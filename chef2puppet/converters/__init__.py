"""Chef to Puppet converters."""

from chef2puppet.converters.attribute import AttributeStatement, AttributeStatementBuilder
from chef2puppet.converters.manifest import (
    OutputBuffer,
    RecipeTranslation,
    RecipeTranslator,
    translate_recipe,
    translate_recipe_file,
)
from chef2puppet.converters.mappings import DEFAULT_TABLES, MappingTables
from chef2puppet.converters.resource import ManifestBlock, ResourceBlockTranslator

__all__ = [
    "DEFAULT_TABLES",
    "AttributeStatement",
    "AttributeStatementBuilder",
    "ManifestBlock",
    "MappingTables",
    "OutputBuffer",
    "RecipeTranslation",
    "RecipeTranslator",
    "ResourceBlockTranslator",
    "translate_recipe",
    "translate_recipe_file",
]
