"""Path utility functions for safe filesystem operations."""

import os
from pathlib import Path


def _normalize_path(path_str: str | Path) -> Path:
    """
    Normalize a file path for safe filesystem operations.

    Resolves relative paths and symlinks to absolute paths.

    Args:
        path_str: Path string or Path object to normalize.

    Returns:
        Resolved absolute Path object.

    Raises:
        ValueError: If the path contains null bytes or is invalid.

    """
    if isinstance(path_str, Path):
        path_obj = path_str
    elif isinstance(path_str, str):
        if "\x00" in path_str:
            raise ValueError(f"Path contains null bytes: {path_str!r}")
        path_obj = Path(path_str)
    else:
        raise ValueError(f"Path must be a string or Path object, got {type(path_str)}")

    try:
        return path_obj.expanduser().resolve()
    except (OSError, RuntimeError) as e:
        raise ValueError(f"Invalid path {path_str}: {e}") from e


def _ensure_within_base_path(path_obj: Path, base_path: Path) -> Path:
    """
    Ensure a path stays within a trusted base directory.

    Args:
        path_obj: Path to validate.
        base_path: Trusted base directory.

    Returns:
        Resolved Path guaranteed to be contained within ``base_path``.

    Raises:
        ValueError: If the path escapes the base directory.

    """
    base_resolved = _normalize_path(base_path)
    candidate_resolved = _normalize_path(path_obj)

    try:
        candidate_resolved.relative_to(base_resolved)
    except ValueError as e:
        msg = f"Path traversal attempt: escapes {base_resolved}"
        raise ValueError(msg) from e

    return candidate_resolved


def _validate_relative_parts(parts: tuple[str, ...]) -> Path:
    """
    Validate and normalise relative path components.

    Args:
        parts: Path components provided by callers.

    Returns:
        A relative Path composed from the validated parts.

    Raises:
        ValueError: If any part is absolute or attempts traversal.

    """
    for part in parts:
        part_path = Path(part)
        if part_path.is_absolute() or ".." in part_path.parts:
            raise ValueError(f"Path traversal attempt: {part}")

    return Path(*parts)


def _safe_join(base_path: Path, *parts: str) -> Path:
    """
    Safely join path components ensuring result stays within base directory.

    Args:
        base_path: Base directory.
        *parts: Path components to join.

    Returns:
        Joined path within base_path.

    Raises:
        ValueError: If result would escape base_path.

    """
    base_resolved = _normalize_path(base_path)
    candidate = base_resolved / _validate_relative_parts(parts)
    return _ensure_within_base_path(candidate, base_resolved)


def safe_is_file(path_obj: Path, base_path: Path) -> bool:
    """Check file-ness after enforcing base containment."""
    return _ensure_within_base_path(path_obj, base_path).is_file()


def safe_iterdir(path_obj: Path, base_path: Path) -> list[Path]:
    """
    List directory contents in name order after enforcing base containment.

    Entries resolving outside ``base_path`` (for example through symlinks)
    are skipped.

    Args:
        path_obj: Directory path to list.
        base_path: Trusted base directory for containment check.

    Returns:
        Sorted list of paths within the directory.

    """
    safe_dir = _ensure_within_base_path(path_obj, base_path)
    base_resolved = _normalize_path(base_path)

    results: list[Path] = []
    for item in sorted(safe_dir.iterdir(), key=lambda p: p.name):
        resolved = os.path.realpath(item)
        if os.path.commonpath([resolved, base_resolved]) == str(base_resolved):
            results.append(item)
    return results


def safe_mkdir(
    path_obj: Path, base_path: Path, parents: bool = False, exist_ok: bool = False
) -> None:
    """Create directory after enforcing base containment."""
    safe_path = _ensure_within_base_path(path_obj, base_path)
    safe_path.mkdir(parents=parents, exist_ok=exist_ok)


def safe_read_text(path_obj: Path, base_path: Path, encoding: str = "utf-8") -> str:
    """
    Read text from file after enforcing base containment.

    Args:
        path_obj: Path to the file to read.
        base_path: Trusted base directory for containment check.
        encoding: Text encoding (default: 'utf-8').

    Returns:
        File contents as string.

    Raises:
        ValueError: If the path escapes the base directory.

    """
    safe_path = _ensure_within_base_path(path_obj, base_path)
    return safe_path.read_text(encoding=encoding)


def safe_write_text(
    path_obj: Path, base_path: Path, text: str, encoding: str = "utf-8"
) -> None:
    """
    Write text to file after enforcing base containment.

    Args:
        path_obj: Path to the file to write.
        base_path: Trusted base directory for containment check.
        text: Text content to write.
        encoding: Text encoding (default: 'utf-8').

    """
    safe_path = _ensure_within_base_path(path_obj, base_path)
    safe_path.write_text(text, encoding=encoding)
