"""Tests for the command line interface."""

from pathlib import Path

from click.testing import CliRunner

from chef2puppet import __version__
from chef2puppet.cli import cli


class TestCLIConversion:
    """Test successful conversions."""

    def test_converts_cookbook(self, make_cookbook, tmp_path: Path) -> None:
        """Test progress output and written manifests."""
        cookbook = make_cookbook(
            {"default.rb": "package 'nginx'\n", "server.rb": "# todo\n"}, name="web"
        )
        output_dir = tmp_path / "out"
        runner = CliRunner()

        result = runner.invoke(cli, ["-o", str(output_dir), "-c", str(cookbook)])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        recipes = cookbook.resolve() / "recipes"
        assert lines[0] == "Cookbook Name: web"
        assert lines[1] == f"Recipes Path:  {recipes}"
        assert lines[2] == f"Output Path:   {output_dir.resolve() / 'web'}"
        assert lines[3:] == [
            f"Working on... {recipes / 'default.rb'}",
            f"Working on... {recipes / 'server.rb'}",
        ]
        assert (output_dir / "web" / "manifests" / "default.pp").is_file()
        assert (output_dir / "web" / "manifests" / "server.pp").is_file()

    def test_long_option_names(self, make_cookbook, tmp_path: Path) -> None:
        """Test the long option spellings."""
        cookbook = make_cookbook({"default.rb": ""})
        runner = CliRunner()

        result = runner.invoke(
            cli, ["--output", str(tmp_path / "out"), "--cookbook", str(cookbook)]
        )

        assert result.exit_code == 0, result.output


class TestCLIUsage:
    """Test argument validation."""

    def test_missing_output(self, make_cookbook) -> None:
        """Test the output option is required."""
        runner = CliRunner()

        result = runner.invoke(cli, ["-c", str(make_cookbook({}))])

        assert result.exit_code == 2
        assert "Missing option" in result.output

    def test_missing_cookbook(self, tmp_path: Path) -> None:
        """Test the cookbook option is required."""
        runner = CliRunner()

        result = runner.invoke(cli, ["-o", str(tmp_path / "out")])

        assert result.exit_code == 2
        assert not (tmp_path / "out").exists()

    def test_version(self) -> None:
        """Test the version option."""
        runner = CliRunner()

        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestCLIErrors:
    """Test reporting of conversion failures."""

    def test_nonexistent_cookbook(self, tmp_path: Path) -> None:
        """Test a missing cookbook is reported without a traceback."""
        runner = CliRunner()

        result = runner.invoke(
            cli, ["-o", str(tmp_path / "out"), "-c", str(tmp_path / "missing")]
        )

        assert result.exit_code == 1
        assert "Could not find cookbook" in result.output
        assert "Traceback" not in result.output

    def test_cookbook_without_name(self, tmp_path: Path) -> None:
        """Test metadata without a name is reported."""
        cookbook = tmp_path / "cookbook"
        (cookbook / "recipes").mkdir(parents=True)
        (cookbook / "metadata.json").write_text("{}")
        runner = CliRunner()

        result = runner.invoke(cli, ["-o", str(tmp_path / "out"), "-c", str(cookbook)])

        assert result.exit_code == 1
        assert "does not declare a name" in result.output

    def test_missing_metadata_reported_once(self, tmp_path: Path) -> None:
        """Test a metadata error is printed once and without a traceback."""
        cookbook = tmp_path / "cookbook"
        (cookbook / "recipes").mkdir(parents=True)
        runner = CliRunner()

        result = runner.invoke(cli, ["-o", str(tmp_path / "out"), "-c", str(cookbook)])

        assert result.exit_code == 1
        assert result.output.count("No metadata.json or metadata.rb found") == 1
        assert "Traceback" not in result.output
        assert "Failed convert_cookbook" not in result.output
