"""Error types with actionable messages and recovery suggestions."""

from pathlib import Path

from chef2puppet.core.constants import (
    METADATA_FILENAME,
    METADATA_JSON_FILENAME,
    RECIPES_DIRNAME,
)


def _display_path(path: str | Path) -> str:
    """
    Shorten a file path for error messages.

    Paths under the current working directory are shown relative to it,
    anything else is shown as given.

    Args:
        path: The file path to display.

    Returns:
        Path string suitable for user display.

    """
    path_str = str(path)
    if "\n" in path_str or "\r" in path_str:
        return "<resource>"

    try:
        return str(Path(path_str).resolve().relative_to(Path.cwd().resolve()))
    except (OSError, ValueError):
        return path_str


class Chef2PuppetError(Exception):
    """Base exception for chef2puppet with enhanced error messages."""

    def __init__(self, message: str, suggestion: str | None = None):
        """
        Initialize with message and optional recovery suggestion.

        Args:
            message: The error message describing what went wrong.
            suggestion: Optional suggestion for how to fix the error.

        """
        self.message = message
        self.suggestion = suggestion
        full_message = message
        if suggestion:
            full_message = f"{message}\n\nSuggestion: {suggestion}"
        super().__init__(full_message)


class ChefFileNotFoundError(Chef2PuppetError):
    """Raised when a required file or directory cannot be found."""

    def __init__(self, path: str | Path, file_type: str = "file"):
        """
        Initialize file not found error.

        Args:
            path: The path that was not found.
            file_type: Type of file (e.g., 'cookbook', 'recipe', 'metadata').

        """
        self.path = str(path)
        message = f"Could not find {file_type}: {_display_path(path)}"
        suggestion = (
            "Check that the path exists and you have read permissions. "
            "For cookbooks, point to the cookbook root directory containing "
            "metadata.json and a recipes directory."
        )
        super().__init__(message, suggestion)


class InvalidCookbookError(Chef2PuppetError):
    """Raised when a cookbook is invalid or malformed."""

    def __init__(self, path: str | Path, reason: str):
        """
        Initialize invalid cookbook error.

        Args:
            path: The cookbook path.
            reason: Why the cookbook is invalid.

        """
        self.path = str(path)
        self.reason = reason
        message = f"Invalid cookbook at {_display_path(path)}: {reason}"
        suggestion = (
            "Ensure the directory contains a Chef cookbook whose metadata "
            "declares a name, either as the 'name' field of metadata.json or "
            "a name line in metadata.rb."
        )
        super().__init__(message, suggestion)


class ParseError(Chef2PuppetError):
    """Raised when a recipe statement block cannot be tokenized or parsed."""

    def __init__(
        self, file_path: str, line_number: int | None = None, detail: str = ""
    ):
        """
        Initialize parse error.

        Args:
            file_path: The file that failed to parse.
            line_number: Optional line number where parsing failed.
            detail: Additional detail about the parse failure.

        """
        self.file_path = file_path
        self.line_number = line_number
        self.detail = detail
        location = f" at line {line_number}" if line_number else ""
        message = f"Failed to parse {_display_path(file_path)}{location}"
        if detail:
            message += f": {detail}"
        suggestion = (
            "Check that the recipe contains valid Chef Ruby DSL syntax. "
            "Only resource declarations are translated; other Ruby code "
            "needs manual conversion."
        )
        super().__init__(message, suggestion)


def validate_directory_exists(path: str | Path, dir_type: str = "directory") -> Path:
    """
    Validate that a directory exists and is readable.

    Args:
        path: Path to validate.
        dir_type: Type of directory for error messages.

    Returns:
        Path object if validation succeeds.

    Raises:
        ChefFileNotFoundError: If the directory doesn't exist.
        Chef2PuppetError: If the path is not a readable directory.

    """
    dir_path = Path(path)
    if not dir_path.exists():
        raise ChefFileNotFoundError(path, dir_type)
    if not dir_path.is_dir():
        raise Chef2PuppetError(
            f"Path is not a {dir_type}: {_display_path(path)}",
            f"Expected a directory but found a file. Check that you're "
            f"pointing to the {dir_type} directory, not a file within it.",
        )
    try:
        list(dir_path.iterdir())
    except PermissionError as e:
        raise Chef2PuppetError(
            f"Permission denied reading {dir_type}: {_display_path(path)}",
            "Ensure you have read and execute permissions on the directory. "
            "On Unix systems, try 'chmod +rx' on the directory.",
        ) from e
    return dir_path


def validate_cookbook_structure(path: str | Path) -> Path:
    """
    Validate that a path contains a translatable Chef cookbook.

    Args:
        path: Path to the cookbook root directory.

    Returns:
        Path object if validation succeeds.

    Raises:
        InvalidCookbookError: If the directory has no metadata.
        ChefFileNotFoundError: If the cookbook or its recipes are missing.

    """
    cookbook_path = validate_directory_exists(path, "cookbook")

    has_metadata = (cookbook_path / METADATA_JSON_FILENAME).exists() or (
        cookbook_path / METADATA_FILENAME
    ).exists()

    if not has_metadata:
        raise InvalidCookbookError(
            path, "No metadata.json or metadata.rb found in cookbook root"
        )

    validate_directory_exists(cookbook_path / RECIPES_DIRNAME, "recipes directory")
    return cookbook_path
