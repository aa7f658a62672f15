"""Chef recipe and metadata parsers."""

from chef2puppet.parsers.metadata import read_cookbook_name
from chef2puppet.parsers.recipe import BlockText, CommentLine, scan_recipe
from chef2puppet.parsers.statement import parse_statements

__all__ = [
    "BlockText",
    "CommentLine",
    "parse_statements",
    "read_cookbook_name",
    "scan_recipe",
]
