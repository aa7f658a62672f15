"""Tests for error types and validation helpers."""

import os
from pathlib import Path

import pytest

from chef2puppet.core.errors import (
    Chef2PuppetError,
    ChefFileNotFoundError,
    InvalidCookbookError,
    ParseError,
    _display_path,
    validate_cookbook_structure,
    validate_directory_exists,
)


class TestErrorMessages:
    """Test error message formatting."""

    def test_message_with_suggestion(self) -> None:
        """Test the suggestion is appended to the message."""
        error = Chef2PuppetError("Something failed", "Try again")

        assert str(error) == "Something failed\n\nSuggestion: Try again"
        assert error.message == "Something failed"
        assert error.suggestion == "Try again"

    def test_message_without_suggestion(self) -> None:
        """Test the plain message form."""
        assert str(Chef2PuppetError("Something failed")) == "Something failed"

    def test_file_not_found(self) -> None:
        """Test missing file errors name the file type."""
        error = ChefFileNotFoundError("/nonexistent/cookbook", "cookbook")

        assert "Could not find cookbook: /nonexistent/cookbook" in str(error)
        assert error.path == "/nonexistent/cookbook"
        assert isinstance(error, Chef2PuppetError)

    def test_invalid_cookbook(self) -> None:
        """Test invalid cookbook errors carry the reason."""
        error = InvalidCookbookError("/srv/cookbook", "metadata does not declare a name")

        assert error.reason == "metadata does not declare a name"
        assert "Invalid cookbook at /srv/cookbook" in str(error)

    def test_parse_error_with_line(self) -> None:
        """Test parse errors include location and detail."""
        error = ParseError("/srv/recipes/default.rb", 12, "unterminated string literal")

        assert error.line_number == 12
        assert error.detail == "unterminated string literal"
        assert "at line 12: unterminated string literal" in str(error)

    def test_parse_error_without_line(self) -> None:
        """Test parse errors without a location."""
        error = ParseError("/srv/recipes/default.rb")

        assert "at line" not in str(error)


class TestDisplayPath:
    """Test path shortening for messages."""

    def test_path_under_cwd_is_relative(self, tmp_path: Path) -> None:
        """Test paths under the working directory are shortened."""
        original = Path.cwd()
        try:
            os.chdir(tmp_path)
            assert _display_path(tmp_path / "recipes" / "default.rb") == (
                str(Path("recipes") / "default.rb")
            )
        finally:
            os.chdir(original)

    def test_path_elsewhere_is_unchanged(self) -> None:
        """Test unrelated absolute paths are kept."""
        assert _display_path("/nonexistent/x.rb").endswith("x.rb")

    def test_multiline_path(self) -> None:
        """Test values containing newlines are hidden."""
        assert _display_path("a\nb") == "<resource>"


class TestValidation:
    """Test cookbook validation helpers."""

    def test_directory_exists(self, tmp_path: Path) -> None:
        """Test an existing directory passes."""
        assert validate_directory_exists(tmp_path) == tmp_path

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test a missing directory is reported."""
        with pytest.raises(ChefFileNotFoundError):
            validate_directory_exists(tmp_path / "missing", "cookbook")

    def test_file_instead_of_directory(self, tmp_path: Path) -> None:
        """Test a file path is rejected."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(Chef2PuppetError, match="Path is not a cookbook"):
            validate_directory_exists(target, "cookbook")

    def test_valid_cookbook(self, make_cookbook) -> None:
        """Test a cookbook with metadata and recipes passes."""
        cookbook = make_cookbook({"default.rb": "package 'x'\n"})

        assert validate_cookbook_structure(cookbook) == cookbook

    def test_cookbook_without_metadata(self, tmp_path: Path) -> None:
        """Test metadata is required."""
        (tmp_path / "recipes").mkdir()

        with pytest.raises(InvalidCookbookError, match="No metadata"):
            validate_cookbook_structure(tmp_path)

    def test_cookbook_without_recipes(self, tmp_path: Path) -> None:
        """Test the recipes directory is required."""
        (tmp_path / "metadata.rb").write_text("name 'x'\n")

        with pytest.raises(ChefFileNotFoundError, match="recipes directory"):
            validate_cookbook_structure(tmp_path)
