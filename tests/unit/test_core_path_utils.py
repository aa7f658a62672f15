"""Tests for containment-checked filesystem helpers."""

from pathlib import Path

import pytest

from chef2puppet.core.path_utils import (
    _normalize_path,
    _safe_join,
    safe_is_file,
    safe_iterdir,
    safe_mkdir,
    safe_read_text,
    safe_write_text,
)


class TestNormalizePath:
    """Test path normalisation."""

    def test_relative_path_becomes_absolute(self) -> None:
        """Test relative paths resolve against the working directory."""
        assert _normalize_path("recipes").is_absolute()

    def test_null_byte(self) -> None:
        """Test null bytes are rejected."""
        with pytest.raises(ValueError, match="null bytes"):
            _normalize_path("bad\x00path")

    def test_wrong_type(self) -> None:
        """Test non-path values are rejected."""
        with pytest.raises(ValueError, match="must be a string or Path"):
            _normalize_path(42)  # type: ignore[arg-type]


class TestSafeJoin:
    """Test joining under a base directory."""

    def test_join(self, tmp_path: Path) -> None:
        """Test nested parts stay under the base."""
        assert _safe_join(tmp_path, "manifests", "default.pp") == (
            tmp_path.resolve() / "manifests" / "default.pp"
        )

    @pytest.mark.parametrize("part", ["../escape", "/etc/passwd", "a/../../b"])
    def test_traversal_is_rejected(self, tmp_path: Path, part: str) -> None:
        """Test parts leaving the base are rejected."""
        with pytest.raises(ValueError, match="Path traversal"):
            _safe_join(tmp_path, part)


class TestFileOperations:
    """Test reading, writing and listing."""

    def test_write_then_read(self, tmp_path: Path) -> None:
        """Test text written under the base can be read back."""
        target = tmp_path / "default.pp"
        safe_write_text(target, tmp_path, "class default {\n}\n")

        assert safe_read_text(target, tmp_path) == "class default {\n}\n"
        assert safe_is_file(target, tmp_path)

    def test_read_outside_base(self, tmp_path: Path) -> None:
        """Test reads outside the base are rejected."""
        with pytest.raises(ValueError):
            safe_read_text(Path("/etc/hostname"), tmp_path)

    def test_mkdir_with_parents(self, tmp_path: Path) -> None:
        """Test nested directories are created."""
        target = tmp_path / "lib" / "puppet" / "type"
        safe_mkdir(target, tmp_path, parents=True, exist_ok=True)
        safe_mkdir(target, tmp_path, parents=True, exist_ok=True)

        assert target.is_dir()

    def test_iterdir_is_sorted(self, tmp_path: Path) -> None:
        """Test entries are listed by name."""
        for name in ("web.rb", "default.rb", "app.rb"):
            (tmp_path / name).write_text("")

        names = [p.name for p in safe_iterdir(tmp_path, tmp_path)]

        assert names == ["app.rb", "default.rb", "web.rb"]

    def test_iterdir_skips_links_leaving_base(self, tmp_path: Path) -> None:
        """Test symlinks pointing outside the base are skipped."""
        base = tmp_path / "cookbook"
        base.mkdir()
        outside = tmp_path / "secret.rb"
        outside.write_text("")
        (base / "default.rb").write_text("")
        (base / "linked.rb").symlink_to(outside)

        assert [p.name for p in safe_iterdir(base, base)] == ["default.rb"]
