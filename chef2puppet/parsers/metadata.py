"""Chef cookbook metadata parser."""

import json
import re
from pathlib import Path

from chef2puppet.core import path_utils
from chef2puppet.core.constants import METADATA_FILENAME, METADATA_JSON_FILENAME
from chef2puppet.core.errors import ChefFileNotFoundError, InvalidCookbookError


def read_cookbook_name(cookbook_path: str | Path) -> str:
    """
    Read the cookbook name from its metadata.

    ``metadata.json`` is preferred; ``metadata.rb`` is used when no JSON
    metadata exists.

    Args:
        cookbook_path: Path to the cookbook root directory.

    Returns:
        The cookbook name.

    Raises:
        ChefFileNotFoundError: If the cookbook has no metadata file.
        InvalidCookbookError: If the metadata cannot be read or has no name.

    """
    root = path_utils._normalize_path(cookbook_path)
    json_path = path_utils._safe_join(root, METADATA_JSON_FILENAME)
    rb_path = path_utils._safe_join(root, METADATA_FILENAME)

    if json_path.is_file():
        metadata = _load_json_metadata(json_path, root)
    elif rb_path.is_file():
        metadata = _extract_metadata(_read_metadata(rb_path, root))
    else:
        raise ChefFileNotFoundError(json_path, "metadata")

    name = metadata.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidCookbookError(root, "metadata does not declare a name")
    return name.strip()


def _read_metadata(path: Path, root: Path) -> str:
    try:
        return path_utils.safe_read_text(path, root, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidCookbookError(root, f"cannot read {path.name}: {e}") from e


def _load_json_metadata(path: Path, root: Path) -> dict:
    """
    Load metadata.json.

    Args:
        path: Path to the metadata.json file.
        root: Cookbook root used for containment checks.

    Returns:
        Parsed metadata dictionary.

    Raises:
        InvalidCookbookError: If the file is not a JSON object.

    """
    try:
        data = json.loads(_read_metadata(path, root))
    except json.JSONDecodeError as e:
        raise InvalidCookbookError(root, f"{path.name} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidCookbookError(root, f"{path.name} is not a JSON object")
    return data


def _extract_metadata(content: str) -> dict[str, str]:
    """
    Extract the cookbook name from metadata.rb content.

    Args:
        content: Raw content of metadata.rb file.

    Returns:
        Dictionary holding ``name`` when the file declares one.

    """
    match = re.search(r"^\s*name\s+['\"]([^'\"]+)['\"]", content, re.MULTILINE)
    if match:
        return {"name": match.group(1)}
    return {}
