"""
Recursive-descent parser for Chef recipe statement blocks.

Only the resource declaration grammar is interpreted: a resource call with a
name argument and an optional block of attribute calls. Guard blocks and
attribute values are parsed into a small expression tree. Any other Ruby
code (assignments, conditionals, iterators, method definitions) is kept as
an ``UnsupportedStatement`` holding its source text.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from chef2puppet.core.constants import FILE_TEST_PREDICATES
from chef2puppet.parsers.ast import (
    ArrayLiteral,
    AttributeCall,
    BinaryOp,
    Call,
    Expression,
    ExpressionStatement,
    FileTest,
    HashLiteral,
    InterpolatedString,
    Literal,
    NestedBlock,
    NodeRef,
    Not,
    NotificationRef,
    ResourceCall,
    Statement,
    StatementBlock,
    UnsupportedStatement,
)
from chef2puppet.parsers.lexer import (
    CONST,
    EOF,
    IDENT,
    KEYWORD,
    LABEL,
    NEWLINE,
    NUMBER,
    OP,
    REGEX,
    STRING,
    SYMBOL,
    WORDS,
    Lexer,
    Token,
)

NODE_IDENTIFIER = "node"
RESOURCES_LOOKUP = "resources"

# Keywords opening a construct closed by ``end`` when they start a statement
BLOCK_KEYWORDS = frozenset(
    {"if", "unless", "while", "until", "case", "begin", "def", "class", "module", "for"}
)
MODIFIER_KEYWORDS = frozenset({"if", "unless", "while", "until", "rescue"})

BINARY_PRECEDENCE = {
    "or": 1,
    "and": 1,
    "||": 2,
    "&&": 3,
    "..": 4,
    "...": 4,
    "==": 5,
    "!=": 5,
    "=~": 5,
    "!~": 5,
    "===": 5,
    "<=>": 5,
    "<": 6,
    ">": 6,
    "<=": 6,
    ">=": 6,
    "|": 7,
    "^": 7,
    "&": 8,
    "<<": 9,
    ">>": 9,
    "+": 10,
    "-": 10,
    "*": 11,
    "/": 11,
    "%": 11,
    "**": 12,
}
LOGICAL_KEYWORDS = {"or": "||", "and": "&&"}

ASSIGNMENT_OPERATORS = frozenset({"=", "+=", "-=", "*=", "/=", "||=", "&&=", "**="})
CONTINUATION_OPERATORS = frozenset({",", "=>", "(", "[", "{", "."}) | frozenset(
    op for op in BINARY_PRECEDENCE if not op.isalpha()
)
OPENERS = {"(": ")", "[": "]", "{": "}"}
OPERAND_KINDS = frozenset({STRING, SYMBOL, NUMBER, IDENT, CONST, LABEL, WORDS, REGEX})

_STRING_REFERENCE_RE = re.compile(r"^\s*([\w:]+)\[(.*)\]\s*$")


class _Mismatch(Exception):
    """Raised when tokens fall outside the supported grammar."""


class _EndOfBlock(Exception):
    """Raised when the source ends inside an open block or bracket."""

    def __init__(self, line: int) -> None:
        super().__init__(line)
        self.line = line


class StatementParser:
    """Parse one statement block into typed statements."""

    def __init__(self, lexer: Lexer) -> None:
        """
        Initialise the parser.

        Args:
            lexer: Lexer holding the block source; tokenized on construction.

        Raises:
            ParseError: If the block cannot be tokenized.

        """
        self.lexer = lexer
        self.source = lexer.source
        self.tokens = lexer.tokenize()
        self.pos = 0

    # Token helpers -------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _next(self) -> Token:
        token = self._peek()
        if token.kind != EOF:
            self.pos += 1
        return token

    def _expect_op(self, value: str) -> Token:
        token = self._peek()
        if token.kind == EOF:
            raise _EndOfBlock(token.line)
        if not token.is_op(value):
            raise _Mismatch(f"expected {value!r}, found {token.value!r}")
        return self._next()

    def _skip_newlines(self) -> None:
        while self._peek().kind == NEWLINE:
            self.pos += 1

    def _at_closer(self, closer: str | None) -> bool:
        token = self._peek()
        if closer == "end":
            return token.is_keyword("end")
        if closer is not None:
            return token.is_op(closer)
        return False

    def _at_statement_end(self, closer: str | None) -> bool:
        token = self._peek()
        return token.kind in (NEWLINE, EOF) or self._at_closer(closer)

    def _file_line(self, token: Token) -> int:
        return self.lexer.file_line(token.line)

    # Statements ----------------------------------------------------------

    def parse(self) -> StatementBlock:
        """
        Parse every top-level statement of the block.

        Returns:
            StatementBlock with the parsed statements. When the source ends
            inside an open block, ``unterminated_line`` holds the recipe
            line where the incomplete statement starts.

        """
        block = StatementBlock()
        while True:
            self._skip_newlines()
            token = self._peek()
            if token.kind == EOF:
                return block
            try:
                block.statements.append(self._statement(closer=None, top_level=True))
            except _EndOfBlock:
                block.unterminated_line = self._file_line(token)
                return block

    def _statement(self, closer: str | None, top_level: bool = False) -> Statement:
        start = self.pos
        try:
            statement = self._statement_body(closer, top_level)
            if not self._at_statement_end(closer):
                raise _Mismatch(f"unexpected {self._peek().value!r}")
            return statement
        except _Mismatch:
            self.pos = start
            return self._unsupported(closer)

    def _statement_body(self, closer: str | None, top_level: bool) -> Statement:
        token = self._peek()
        if token.kind == KEYWORD and token.value in BLOCK_KEYWORDS:
            raise _Mismatch(f"{token.value} statements are not interpreted")

        if self._is_command_start():
            name, args, block = self._command_call()
            if top_level:
                return ResourceCall(
                    resource_type=name,
                    name=args[0] if args else None,
                    body=block.statements if block else (),
                    has_block=block is not None,
                    line=self._file_line(token),
                )
            return AttributeCall(
                name=name, args=args, block=block, line=self._file_line(token)
            )

        if top_level:
            raise _Mismatch("top-level expressions are not interpreted")
        return ExpressionStatement(
            expression=self._expression(), line=self._file_line(token)
        )

    def _unsupported(self, closer: str | None) -> UnsupportedStatement:
        """Consume one statement of unknown shape and keep its source text."""
        first = self._peek()
        depth = 0
        last = first
        at_statement_start = True
        while True:
            token = self._peek()
            if token.kind == EOF:
                if depth > 0:
                    raise _EndOfBlock(first.line)
                break
            if depth == 0:
                if token.kind == NEWLINE and not (
                    last is not token and last.kind == OP and last.value in CONTINUATION_OPERATORS
                ):
                    break
                if self._at_closer(closer) and token is not first:
                    break

            if token.kind == KEYWORD:
                if token.value == "do" or (
                    token.value in BLOCK_KEYWORDS and at_statement_start
                ):
                    depth += 1
                elif token.value == "end":
                    depth -= 1
            elif token.kind == OP and token.value in OPENERS:
                depth += 1
            elif token.kind == OP and token.value in (")", "]", "}"):
                depth -= 1

            at_statement_start = token.kind == NEWLINE or token.is_keyword(
                "then", "else", "do", "begin"
            ) or token.is_op("(", "=")
            last = token
            self._next()
            if depth < 0:
                depth = 0

        return UnsupportedStatement(
            source=self.source[first.start : last.end].strip(),
            line=self._file_line(first),
        )

    def _is_command_start(self) -> bool:
        token = self._peek()
        if token.kind != IDENT or token.value.startswith(("@", "$")):
            return False
        following = self._peek(1)
        if following.kind in (NEWLINE, EOF):
            return True
        if following.kind == KEYWORD:
            return following.value in ("do", "end", "true", "false", "nil", "not") or (
                following.value in MODIFIER_KEYWORDS
            )
        if following.kind in OPERAND_KINDS:
            return True
        if following.kind != OP:
            return False
        if following.value in ASSIGNMENT_OPERATORS:
            return False
        if following.value in ("{", "}", "->"):
            return True
        if following.value == "(":
            return True
        if following.value in ("[", "!", "::", "-", "*", "&") and following.spaced:
            after = self._peek(2)
            return following.value in ("[", "!", "::") or not after.spaced
        return False

    def _command_call(self) -> tuple[str, tuple[Expression, ...], NestedBlock | None]:
        name = self._next().value
        args: tuple[Expression, ...] = ()
        following = self._peek()
        if following.is_op("(") and not following.spaced:
            self._next()
            args = self._arguments(closer=")")
            self._expect_op(")")
        elif not (
            self._at_statement_end(None)
            or following.is_keyword("do", "end", *MODIFIER_KEYWORDS)
            or following.is_op("{", "}")
        ):
            args = self._arguments(closer=None)

        if name == RESOURCES_LOOKUP:
            args = (self._notification_ref(args),)

        block = None
        following = self._peek()
        if following.is_keyword("do"):
            self._next()
            block = self._block("end")
        elif following.is_op("{"):
            self._next()
            block = self._block("}")
        return name, args, block

    def _block(self, closer: str) -> NestedBlock:
        self._skip_newlines()
        if self._peek().is_op("|"):
            self._next()
            while not self._peek().is_op("|"):
                if self._peek().kind == EOF:
                    raise _EndOfBlock(self._peek().line)
                self._next()
            self._next()

        statements: list[Statement] = []
        while True:
            self._skip_newlines()
            token = self._peek()
            if token.kind == EOF:
                raise _EndOfBlock(token.line)
            if self._at_closer(closer):
                self._next()
                return NestedBlock(tuple(statements))
            statements.append(self._statement(closer))

    # Arguments -----------------------------------------------------------

    def _arguments(self, closer: str | None) -> tuple[Expression, ...]:
        """Parse a comma separated argument list, folding pairs into a hash."""
        args: list[Expression] = []
        pairs: list[tuple[Expression, Expression]] = []
        if closer:
            self._skip_newlines()
            if self._at_closer(closer):
                return ()
        while True:
            token = self._peek()
            if token.kind == LABEL:
                self._next()
                self._skip_newlines()
                pairs.append((Literal(token.value, "symbol"), self._expression()))
            elif token.is_op("*", "&", "**"):
                self._next()
                args.append(self._expression())
            else:
                value = self._expression()
                if self._peek().is_op("=>"):
                    self._next()
                    self._skip_newlines()
                    pairs.append((value, self._expression()))
                else:
                    args.append(value)
            if closer:
                self._skip_newlines()
            if not self._peek().is_op(","):
                break
            self._next()
            self._skip_newlines()
            if closer and self._at_closer(closer):
                break
        if pairs:
            args.append(HashLiteral(tuple(pairs)))
        return tuple(args)

    def _notification_ref(self, args: tuple[Expression, ...]) -> NotificationRef:
        targets: list[tuple[str, str]] = []
        for arg in args:
            if isinstance(arg, HashLiteral):
                for key, value in arg.pairs:
                    targets.append((_plain_text(key), _plain_text(value)))
            elif isinstance(arg, Literal):
                match = _STRING_REFERENCE_RE.match(arg.value)
                if match:
                    targets.append((match.group(1), match.group(2).strip("'\"")))
        return NotificationRef(tuple(targets))

    # Expressions ---------------------------------------------------------

    def _expression(self, min_precedence: int = 0) -> Expression:
        left = self._unary()
        while True:
            token = self._peek()
            if token.kind == OP:
                operator = token.value
            elif token.kind == KEYWORD and token.value in LOGICAL_KEYWORDS:
                operator = token.value
            else:
                return left
            precedence = BINARY_PRECEDENCE.get(operator)
            if precedence is None or precedence <= min_precedence:
                return left
            self._next()
            self._skip_newlines()
            right = self._expression(precedence)
            left = BinaryOp(LOGICAL_KEYWORDS.get(operator, operator), left, right)

    def _unary(self) -> Expression:
        token = self._peek()
        if token.is_op("!") or token.is_keyword("not"):
            self._next()
            return Not(self._unary())
        if token.is_op("-") and self._peek(1).kind == NUMBER and not self._peek(1).spaced:
            self._next()
            number = self._next()
            return Literal(f"-{number.value}", "number")
        return self._postfix(self._primary())

    def _primary(self) -> Expression:
        token = self._peek()
        kind = token.kind

        if kind == EOF:
            raise _EndOfBlock(token.line)
        if kind == STRING:
            self._next()
            return self._string(token)
        if kind == SYMBOL:
            self._next()
            return Literal(token.value, "symbol")
        if kind == NUMBER:
            self._next()
            return Literal(token.value, "number")
        if kind == REGEX:
            self._next()
            return Literal(token.value, "regex")
        if kind == WORDS:
            self._next()
            return ArrayLiteral(tuple(Literal(word) for word in token.words))
        if token.is_keyword("true", "false"):
            self._next()
            return Literal(token.value, "bool")
        if token.is_keyword("nil"):
            self._next()
            return Literal("", "nil")
        if token.is_op("("):
            self._next()
            self._skip_newlines()
            inner = self._expression()
            self._skip_newlines()
            self._expect_op(")")
            return inner
        if token.is_op("["):
            self._next()
            items = self._arguments(closer="]")
            self._expect_op("]")
            return ArrayLiteral(items)
        if token.is_op("{"):
            self._next()
            items = self._arguments(closer="}")
            self._expect_op("}")
            if len(items) == 1 and isinstance(items[0], HashLiteral):
                return items[0]
            if not items:
                return HashLiteral(())
            raise _Mismatch("brace block used as a value")
        if token.is_op("::") and self._peek(1).kind == CONST:
            self._next()
            return Call(name=self._next().value)
        if kind == CONST:
            self._next()
            return Call(name=token.value)
        if kind == IDENT:
            if token.value == NODE_IDENTIFIER:
                self._next()
                return self._node_reference()
            return self._method_call(receiver=None)
        raise _Mismatch(f"unexpected {token.value!r}")

    def _method_call(self, receiver: Expression | None) -> Expression:
        name = self._next().value
        args: tuple[Expression, ...] = ()
        following = self._peek()
        if following.is_op("(") and not following.spaced:
            self._next()
            args = self._arguments(closer=")")
            self._expect_op(")")
        elif following.spaced and (
            following.kind in (STRING, SYMBOL, NUMBER, WORDS, LABEL)
            or (following.kind in (IDENT, CONST) and name.endswith("?"))
        ):
            args = self._arguments(closer=None)

        if receiver is None and name == RESOURCES_LOOKUP:
            return self._notification_ref(args)
        call = Call(name=name, args=args, receiver=receiver)
        return _as_file_test(call) or call

    def _postfix(self, expression: Expression) -> Expression:
        while True:
            token = self._peek()
            if token.is_op(".") or (token.is_op("::") and not token.spaced):
                self._next()
                if self._peek().kind not in (IDENT, CONST, KEYWORD):
                    raise _Mismatch("expected a method name")
                expression = self._method_call(receiver=expression)
            elif token.is_op("[") and not token.spaced:
                self._next()
                index = self._arguments(closer="]")
                self._expect_op("]")
                expression = Call(name="[]", args=index, receiver=expression)
            else:
                return expression

    def _node_reference(self) -> Expression:
        path: list[str] = []
        while True:
            token = self._peek()
            if token.is_op("[") and not token.spaced:
                key = self._peek(1)
                if key.kind not in (STRING, SYMBOL) or not self._peek(2).is_op("]"):
                    break
                if key.kind == STRING and any(is_code for is_code, _ in key.parts):
                    break
                self.pos += 3
                path.append(key.value)
            elif (
                token.is_op(".")
                and self._peek(1).kind == IDENT
                and not self._peek(2).is_op("(")
            ):
                path.append(self._peek(1).value)
                self.pos += 2
            else:
                break
        if not path:
            return Call(name=NODE_IDENTIFIER)
        return NodeRef(tuple(path))

    def _string(self, token: Token) -> Expression:
        if not any(is_code for is_code, _ in token.parts):
            return Literal(token.value, "string")
        parts: list[Expression | str] = []
        for is_code, text in token.parts:
            if is_code:
                parts.append(self._interpolation(text, token))
            elif text:
                parts.append(text)
        return InterpolatedString(tuple(parts))

    def _interpolation(self, code: str, token: Token) -> Expression:
        lexer = Lexer(code, self.lexer.source_name)
        try:
            parser = StatementParser(lexer)
            parser._skip_newlines()
            expression = parser._expression()
            parser._skip_newlines()
            if parser._peek().kind != EOF:
                raise _Mismatch("trailing tokens in interpolation")
        except (_Mismatch, _EndOfBlock):
            return Literal(code.strip(), "code")
        return expression


def _plain_text(expression: Expression) -> str:
    """Text of a literal used as a notification target key or name."""
    if isinstance(expression, Literal):
        return expression.value
    if isinstance(expression, InterpolatedString):
        return "".join(p if isinstance(p, str) else _plain_text(p) for p in expression.parts)
    if isinstance(expression, NodeRef):
        return "${" + "_".join(expression.path) + "}"
    if isinstance(expression, Call):
        return expression.name
    return ""


def _as_file_test(call: Call) -> FileTest | None:
    """Recognise ``File.exist?(path)`` style calls."""
    if not isinstance(call.receiver, Call) or call.receiver.receiver is not None:
        return None
    if call.receiver.args or len(call.args) != 1:
        return None
    flag = FILE_TEST_PREDICATES.get(f"{call.receiver.name}.{call.name}")
    if flag is None:
        return None
    return FileTest(flag=flag, path=call.args[0])


def parse_statements(
    source: str,
    source_name: str = "<recipe>",
    line_numbers: Sequence[int] | None = None,
) -> StatementBlock:
    """
    Parse a statement block into typed statements.

    Args:
        source: Statement block text accumulated by the recipe walker.
        source_name: Recipe file name used in parse errors.
        line_numbers: Recipe file line number of each block line.

    Returns:
        StatementBlock with the parsed statements.

    Raises:
        ParseError: If the block cannot be tokenized.

    """
    return StatementParser(Lexer(source, source_name, line_numbers)).parse()
