"""Tokenizer for the Ruby subset used by Chef recipe resource declarations."""

from __future__ import annotations

import re
import textwrap
from collections.abc import Sequence
from dataclasses import dataclass, replace

from chef2puppet.core.errors import ParseError

IDENT = "IDENT"
CONST = "CONST"
KEYWORD = "KEYWORD"
LABEL = "LABEL"
SYMBOL = "SYMBOL"
STRING = "STRING"
NUMBER = "NUMBER"
WORDS = "WORDS"
REGEX = "REGEX"
OP = "OP"
NEWLINE = "NEWLINE"
EOF = "EOF"

KEYWORDS = frozenset(
    {
        "and",
        "begin",
        "case",
        "class",
        "def",
        "do",
        "else",
        "elsif",
        "end",
        "ensure",
        "false",
        "for",
        "if",
        "in",
        "module",
        "nil",
        "not",
        "or",
        "rescue",
        "then",
        "true",
        "unless",
        "until",
        "when",
        "while",
    }
)

OPERATORS = (
    "**=",
    "||=",
    "&&=",
    "<=>",
    "===",
    "...",
    "**",
    "=>",
    "==",
    "!=",
    "=~",
    "!~",
    "<=",
    ">=",
    "&&",
    "||",
    "<<",
    ">>",
    "..",
    "::",
    "->",
    "+=",
    "-=",
    "*=",
    "/=",
)
SINGLE_CHAR_OPERATORS = "=+-*/%<>!&|^~?:.,()[]{}"

PERCENT_DELIMITERS = {"(": ")", "[": "]", "{": "}", "<": ">"}

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"0[xX][0-9a-fA-F_]+|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?")
_HEREDOC_RE = re.compile(r"<<([-~]?)(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\2")

# A string part is either literal text or the source of an interpolation
StringPart = tuple[bool, str]


@dataclass(frozen=True)
class Token:
    """One lexical token of a statement block."""

    kind: str
    value: str
    line: int
    start: int
    end: int
    parts: tuple[StringPart, ...] = ()
    words: tuple[str, ...] = ()
    spaced: bool = False

    def is_op(self, *values: str) -> bool:
        """Check for an operator token with one of the given values."""
        return self.kind == OP and self.value in values

    def is_keyword(self, *values: str) -> bool:
        """Check for a keyword token with one of the given values."""
        return self.kind == KEYWORD and self.value in values


class Lexer:
    """
    Convert statement block text into tokens.

    Comments, line continuations and heredoc bodies are consumed here so the
    parser only sees code tokens and statement separators.
    """

    def __init__(
        self,
        source: str,
        source_name: str = "<recipe>",
        line_numbers: Sequence[int] | None = None,
    ) -> None:
        """
        Initialise the lexer.

        Args:
            source: Statement block text.
            source_name: File name used in parse errors.
            line_numbers: Recipe file line number of each block line.

        """
        self.source = source
        self.source_name = source_name
        self.line_numbers = line_numbers
        self.pos = 0
        self.line = 1
        self.tokens: list[Token] = []
        self._heredoc_resume: int | None = None
        self._heredoc_lines = 0

    def file_line(self, block_line: int) -> int:
        """Map a block-relative line number to the recipe file line."""
        if self.line_numbers and 0 < block_line <= len(self.line_numbers):
            return self.line_numbers[block_line - 1]
        return block_line

    def error(self, detail: str, line: int | None = None) -> ParseError:
        """Build a parse error located at the given block line."""
        return ParseError(
            self.source_name, self.file_line(line or self.line), detail
        )

    def tokenize(self) -> list[Token]:
        """
        Tokenize the whole source.

        Returns:
            Token list terminated by an EOF token.

        Raises:
            ParseError: On unterminated literals.

        """
        source = self.source
        length = len(source)
        while self.pos < length:
            char = source[self.pos]
            spaced = self.pos > 0 and source[self.pos - 1] in " \t"
            count = len(self.tokens)

            if char in " \t\r":
                self.pos += 1
            elif char == "\\" and source.startswith("\n", self.pos + 1):
                self.pos += 2
                self.line += 1
            elif char == "#":
                newline = source.find("\n", self.pos)
                self.pos = length if newline == -1 else newline
            elif char == "\n":
                self._newline()
            elif char == ";":
                self._add(NEWLINE, ";", self.pos, self.pos + 1)
                self.pos += 1
            elif char == "'":
                self._single_quoted()
            elif char == '"':
                self._double_quoted()
            elif char == "`":
                self._double_quoted(quote="`")
            elif char == ":" and self._starts_symbol():
                self._symbol()
            elif char == "%" and self._starts_percent_literal():
                self._percent_literal()
            elif char == "/" and self._starts_regex(spaced):
                self._regex()
            elif char == "<" and self._starts_heredoc():
                self._heredoc()
            elif char.isdigit():
                self._number()
            elif char.isalpha() or char == "_" or (
                char in "@$" and self.pos + 1 < length
            ):
                self._identifier(spaced)
            else:
                self._operator(spaced)

            if spaced and len(self.tokens) > count and not self.tokens[count].spaced:
                self.tokens[count] = replace(self.tokens[count], spaced=True)

        self._add(EOF, "", length, length)
        return self.tokens

    def _add(self, kind: str, value: str, start: int, end: int, **extra) -> None:
        self.tokens.append(
            Token(kind=kind, value=value, line=self.line, start=start, end=end, **extra)
        )

    def _newline(self) -> None:
        self._add(NEWLINE, "\n", self.pos, self.pos + 1)
        self.line += 1
        if self._heredoc_resume is not None:
            self.pos = self._heredoc_resume
            self.line += self._heredoc_lines
            self._heredoc_resume = None
            self._heredoc_lines = 0
        else:
            self.pos += 1

    def _previous(self) -> Token | None:
        return self.tokens[-1] if self.tokens else None

    def _expects_operand(self) -> bool:
        """Check whether the previous token leaves an operand position open."""
        previous = self._previous()
        if previous is None or previous.kind in (NEWLINE, LABEL):
            return True
        if previous.kind == KEYWORD:
            return previous.value not in ("end", "true", "false", "nil")
        if previous.kind == OP:
            return previous.value not in (")", "]", "}")
        return False

    def _starts_symbol(self) -> bool:
        following = self.source[self.pos + 1 : self.pos + 2]
        if following == ":":
            return False
        if following in ('"', "'"):
            return True
        return bool(_IDENT_RE.match(following))

    def _starts_percent_literal(self) -> bool:
        match = re.match(r"%([wWiIqQ])?([(\[{<|!/])", self.source[self.pos :])
        if not match:
            return False
        return match.group(1) is not None or self._expects_operand() or (
            self._previous() is not None and self._previous().kind == IDENT
        )

    def _starts_regex(self, spaced: bool) -> bool:
        if self._expects_operand():
            return True
        previous = self._previous()
        following = self.source[self.pos + 1 : self.pos + 2]
        return (
            previous is not None
            and previous.kind == IDENT
            and spaced
            and following not in (" ", "\t", "=", "")
        )

    def _starts_heredoc(self) -> bool:
        if not _HEREDOC_RE.match(self.source, self.pos):
            return False
        previous = self._previous()
        return self._expects_operand() or (
            previous is not None and previous.kind == IDENT
        )

    def _single_quoted(self) -> None:
        start = self.pos
        start_line = self.line
        chars: list[str] = []
        pos = self.pos + 1
        while True:
            if pos >= len(self.source):
                raise self.error("unterminated string literal", start_line)
            char = self.source[pos]
            if char == "\\" and self.source[pos + 1 : pos + 2] in ("'", "\\"):
                chars.append(self.source[pos + 1])
                pos += 2
                continue
            if char == "'":
                break
            if char == "\n":
                self.line += 1
            chars.append(char)
            pos += 1
        self.pos = pos + 1
        text = "".join(chars)
        self.tokens.append(
            Token(STRING, text, start_line, start, self.pos, parts=((False, text),))
        )

    def _read_interpolated(self, pos: int, closer: str, opener: str = "") -> tuple:
        """
        Read a double-quoted body up to ``closer``.

        Returns:
            Tuple of (parts, position after the closing delimiter).

        """
        parts: list[StringPart] = []
        chars: list[str] = []
        depth = 0
        start_line = self.line
        escapes = {"n": "\n", "t": "\t", "s": " ", "0": "\0", "e": "\x1b"}
        while True:
            if pos >= len(self.source):
                raise self.error("unterminated string literal", start_line)
            char = self.source[pos]
            if char == "\\" and pos + 1 < len(self.source):
                escaped = self.source[pos + 1]
                chars.append(escapes.get(escaped, escaped))
                if escaped == "\n":
                    self.line += 1
                pos += 2
                continue
            if char == "#" and self.source.startswith("{", pos + 1):
                if chars:
                    parts.append((False, "".join(chars)))
                    chars = []
                code, pos = self._read_interpolation(pos + 2, start_line)
                parts.append((True, code))
                continue
            if opener and char == opener:
                depth += 1
            elif char == closer:
                if depth == 0:
                    break
                depth -= 1
            if char == "\n":
                self.line += 1
            chars.append(char)
            pos += 1
        if chars or not parts:
            parts.append((False, "".join(chars)))
        return tuple(parts), pos + 1

    def _read_interpolation(self, pos: int, start_line: int) -> tuple[str, int]:
        depth = 1
        start = pos
        quote = ""
        while pos < len(self.source):
            char = self.source[pos]
            if quote:
                if char == "\\":
                    pos += 2
                    continue
                if char == quote:
                    quote = ""
            elif char in "'\"":
                quote = char
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return self.source[start:pos], pos + 1
            pos += 1
        raise self.error("unterminated string interpolation", start_line)

    def _double_quoted(self, quote: str = '"') -> None:
        start = self.pos
        start_line = self.line
        parts, self.pos = self._read_interpolated(self.pos + 1, quote)
        value = "".join(text for is_code, text in parts if not is_code)
        self.tokens.append(Token(STRING, value, start_line, start, self.pos, parts=parts))

    def _symbol(self) -> None:
        start = self.pos
        following = self.source[self.pos + 1]
        if following in "'\"":
            self.pos += 1
            if following == "'":
                self._single_quoted()
            else:
                self._double_quoted()
            string_token = self.tokens.pop()
            self.tokens.append(
                Token(SYMBOL, string_token.value, string_token.line, start, self.pos)
            )
            return
        match = _IDENT_RE.match(self.source, self.pos + 1)
        end = match.end()
        if self.source[end : end + 1] in ("?", "!", "=") and self.source[
            end + 1 : end + 2
        ] not in ("=", ">", "~"):
            end += 1
        self.pos = end
        self._add(SYMBOL, self.source[start + 1 : end], start, end)

    def _percent_literal(self) -> None:
        start = self.pos
        start_line = self.line
        match = re.match(r"%([wWiIqQ])?([(\[{<|!/])", self.source[self.pos :])
        kind = match.group(1) or "Q"
        opener = match.group(2)
        closer = PERCENT_DELIMITERS.get(opener, opener)
        nested_opener = opener if opener != closer else ""
        body_start = self.pos + match.end()
        if kind in ("q", "w", "i"):
            depth = 0
            pos = body_start
            while True:
                if pos >= len(self.source):
                    raise self.error("unterminated percent literal", start_line)
                char = self.source[pos]
                if char == "\\":
                    pos += 2
                    continue
                if nested_opener and char == nested_opener:
                    depth += 1
                elif char == closer:
                    if depth == 0:
                        break
                    depth -= 1
                elif char == "\n":
                    self.line += 1
                pos += 1
            body = self.source[body_start:pos]
            self.pos = pos + 1
            if kind == "q":
                self.tokens.append(
                    Token(STRING, body, start_line, start, self.pos, parts=((False, body),))
                )
            else:
                self.tokens.append(
                    Token(WORDS, body, start_line, start, self.pos, words=tuple(body.split()))
                )
            return

        parts, self.pos = self._read_interpolated(body_start, closer, nested_opener)
        value = "".join(text for is_code, text in parts if not is_code)
        if kind in ("W", "I"):
            self.tokens.append(
                Token(WORDS, value, start_line, start, self.pos, words=tuple(value.split()))
            )
        else:
            self.tokens.append(Token(STRING, value, start_line, start, self.pos, parts=parts))

    def _regex(self) -> None:
        start = self.pos
        start_line = self.line
        _, pos = self._read_interpolated(self.pos + 1, "/")
        flags = re.match(r"[imxounse]*", self.source[pos:]).group(0)
        self.pos = pos + len(flags)
        text = self.source[start : self.pos]
        self.tokens.append(Token(REGEX, text, start_line, start, self.pos))

    def _heredoc(self) -> None:
        match = _HEREDOC_RE.match(self.source, self.pos)
        start = self.pos
        start_line = self.line
        style, quote, identifier = match.group(1), match.group(2), match.group(3)
        self.pos = match.end()

        line_end = self.source.find("\n", self.pos)
        if line_end == -1:
            raise self.error(f"heredoc {identifier} has no body", start_line)
        body_start = self._heredoc_resume or line_end + 1

        body_lines: list[str] = []
        cursor = body_start
        consumed = 0
        while True:
            if cursor >= len(self.source):
                raise self.error(f"unterminated heredoc {identifier}", start_line)
            next_newline = self.source.find("\n", cursor)
            line_stop = len(self.source) if next_newline == -1 else next_newline
            text = self.source[cursor:line_stop]
            consumed += 1
            cursor = line_stop + 1
            candidate = text.strip() if style else text.rstrip("\r")
            if candidate == identifier:
                break
            body_lines.append(text)

        body = "\n".join(body_lines) + ("\n" if body_lines else "")
        if style == "~":
            body = textwrap.dedent(body)

        self._heredoc_resume = min(cursor, len(self.source))
        self._heredoc_lines += consumed

        if quote == "'":
            parts: tuple[StringPart, ...] = ((False, body),)
        else:
            saved_source, saved_line = self.source, self.line
            self.source = body + "\0"
            parts, _ = self._read_interpolated(0, "\0")
            self.source, self.line = saved_source, saved_line
        value = "".join(text for is_code, text in parts if not is_code)
        self.tokens.append(Token(STRING, value, start_line, start, self.pos, parts=parts))

    def _number(self) -> None:
        match = _NUMBER_RE.match(self.source, self.pos)
        start = self.pos
        end = match.end()
        self.pos = end
        self._add(NUMBER, self.source[start:end], start, end)

    def _identifier(self, spaced: bool) -> None:
        start = self.pos
        prefix = ""
        while self.pos < len(self.source) and self.source[self.pos] in "@$":
            prefix += self.source[self.pos]
            self.pos += 1
        match = _IDENT_RE.match(self.source, self.pos)
        if not match:
            self.pos = start
            self._operator(spaced)
            return
        end = match.end()
        following = self.source[end : end + 1]
        after = self.source[end + 1 : end + 2]
        if following in ("?", "!") and after != "=" and not prefix:
            end += 1
        name = self.source[start:end]
        self.pos = end

        previous = self._previous()
        after_dot = previous is not None and previous.is_op(".", "::")
        if (
            not prefix
            and self.source[end : end + 1] == ":"
            and self.source[end + 1 : end + 2] != ":"
            and not after_dot
        ):
            self.pos = end + 1
            self._add(LABEL, name, start, self.pos, spaced=spaced)
            return

        if prefix:
            kind = IDENT
        elif name in KEYWORDS and not after_dot:
            kind = KEYWORD
        elif name[0].isupper():
            kind = CONST
        else:
            kind = IDENT
        self._add(kind, name, start, end, spaced=spaced)

    def _operator(self, spaced: bool) -> None:
        for operator in OPERATORS:
            if self.source.startswith(operator, self.pos):
                start = self.pos
                self.pos += len(operator)
                self._add(OP, operator, start, self.pos, spaced=spaced)
                return
        char = self.source[self.pos]
        if char not in SINGLE_CHAR_OPERATORS:
            raise self.error(f"unexpected character {char!r}")
        start = self.pos
        self.pos += 1
        self._add(OP, char, start, self.pos, spaced=spaced)


def tokenize(
    source: str,
    source_name: str = "<recipe>",
    line_numbers: Sequence[int] | None = None,
) -> list[Token]:
    """
    Tokenize statement block text.

    Args:
        source: Statement block text.
        source_name: File name used in parse errors.
        line_numbers: Recipe file line number of each block line.

    Returns:
        List of tokens ending with an EOF token.

    Raises:
        ParseError: If a literal is not terminated.

    """
    return Lexer(source, source_name, line_numbers).tokenize()
