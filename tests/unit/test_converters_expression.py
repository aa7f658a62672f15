"""Tests for expression text reconstruction."""

import pytest

from chef2puppet.converters.expression import (
    node_interpolation,
    render_command,
    render_predicate,
    render_text,
    strip_wrapping_parens,
)
from chef2puppet.parsers.ast import (
    ArrayLiteral,
    BinaryOp,
    Call,
    FileTest,
    HashLiteral,
    InterpolatedString,
    Literal,
    NodeRef,
    Not,
    NotificationRef,
)


class TestNodeInterpolation:
    """Test node attribute rendering."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (("port",), "${port}"),
            (("apache", "listen_ports"), "${apache_listen_ports}"),
            (("a", "b", "c"), "${a_b_c}"),
        ],
    )
    def test_segments_join_with_underscores(
        self, path: tuple[str, ...], expected: str
    ) -> None:
        """Test that each lookup segment becomes one component."""
        assert node_interpolation(path) == expected

    def test_node_ref_inside_string(self) -> None:
        """Test node references embedded in a string."""
        expression = InterpolatedString(("listen ", NodeRef(("app", "port"))))

        assert render_text(expression) == "listen ${app_port}"


class TestRenderText:
    """Test plain text rendering."""

    def test_none_renders_empty(self) -> None:
        """Test that a missing expression renders as nothing."""
        assert render_text(None) == ""

    def test_literals_render_their_value(self) -> None:
        """Test literal kinds render without decoration."""
        assert render_text(Literal("install", "symbol")) == "install"
        assert render_text(Literal("0755", "number")) == "0755"
        assert render_text(Literal("", "nil")) == ""

    def test_array_is_space_joined(self) -> None:
        """Test arrays join their items with spaces."""
        expression = ArrayLiteral((Literal("a"), Literal("b")))

        assert render_text(expression) == "a b"

    def test_hash_renders_pairs(self) -> None:
        """Test hashes render as arrow pairs."""
        expression = HashLiteral(
            (
                (Literal("port", "symbol"), Literal("80", "number")),
                (Literal("host", "symbol"), Literal("web")),
            )
        )

        assert render_text(expression) == "port => 80, host => web"

    def test_notification_ref_renders_empty(self) -> None:
        """Test notification references contribute no text."""
        assert render_text(NotificationRef((("service", "x"),))) == ""

    def test_call_rendering(self) -> None:
        """Test method calls with receivers and arguments."""
        call = Call("join", (Literal("/etc"), Literal("x")), receiver=Call("File"))

        assert render_text(call) == "File.join(/etc, x)"
        assert render_text(call, predicate=True) == "File.join /etc x"

    def test_index_call(self) -> None:
        """Test ``[]`` lookups on other receivers."""
        call = Call("[]", (Literal("HOME"),), receiver=Call("ENV"))

        assert render_text(call) == "ENV[HOME]"


class TestRenderPredicate:
    """Test guard predicate rendering."""

    def test_file_existence(self) -> None:
        """Test ``File.exist?`` renders as a shell file test."""
        assert render_predicate(FileTest("-f", Literal("/tmp/flag"))) == (
            "test -f /tmp/flag"
        )

    def test_directory_existence(self) -> None:
        """Test directory checks render with ``-d``."""
        assert render_predicate(FileTest("-d", Literal("/srv"))) == "test -d /srv"

    def test_negation(self) -> None:
        """Test negated predicates."""
        expression = Not(FileTest("-f", Literal("/a")))

        assert render_predicate(expression) == "! test -f /a"

    def test_logical_operators(self) -> None:
        """Test infix rendering of logical operators."""
        expression = BinaryOp(
            "||", FileTest("-f", Literal("/a")), FileTest("-d", Literal("/b"))
        )

        assert render_predicate(expression) == "test -f /a || test -d /b"

    def test_command_call_renders_as_shell_words(self) -> None:
        """Test that command style guards render without parentheses."""
        expression = Call("system", (Literal("pgrep nginx"),))

        assert render_predicate(expression) == "system pgrep nginx"

    def test_empty_guard(self) -> None:
        """Test a guard without a value."""
        assert render_predicate(None) == ""

    def test_node_reference_in_path(self) -> None:
        """Test node references inside predicate paths."""
        expression = FileTest(
            "-f", InterpolatedString((NodeRef(("app", "dir")), "/ready"))
        )

        assert render_predicate(expression) == "test -f ${app_dir}/ready"


class TestParentheses:
    """Test wrapping parenthesis removal."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("(test -f /a)", "test -f /a"),
            ("((x))", "x"),
            ("( x )", "x"),
            ("x", "x"),
            ("f(x)", "f(x)"),
            ("echo (done)", "echo (done)"),
            ("(a) && (b)", "(a) && (b)"),
            ("(a", "(a"),
            ("", ""),
        ],
    )
    def test_strip_wrapping_parens(self, text: str, expected: str) -> None:
        """Test that only parentheses enclosing the whole text go."""
        assert strip_wrapping_parens(text) == expected

    def test_command_text(self) -> None:
        """Test exec command rendering."""
        expression = InterpolatedString(("echo ", NodeRef(("app", "name"))))

        assert render_command(expression) == "echo ${app_name}"

    @pytest.mark.parametrize(
        "command",
        ["kill $(cat /run/app.pid)", "echo (done)", "(cd /srv) && make (all)"],
    )
    def test_command_ending_in_paren_is_kept(self, command: str) -> None:
        """Test commands whose last character is a closing parenthesis."""
        assert render_command(Literal(command)) == command

    def test_guard_ending_in_paren_is_kept(self) -> None:
        """Test guard arguments that end with a closing parenthesis."""
        expression = Call("system", (Literal("pgrep -f (foo)"),))

        assert render_predicate(expression) == "system pgrep -f (foo)"
