"""
Reconstruct literal Puppet-side text from parsed Ruby expressions.

Used wherever a value must appear as text in the manifest: attribute values,
resource titles, exec commands and guard predicates. Rendering is
best-effort; nothing checks that the result is valid Puppet.
"""

from chef2puppet.parsers.ast import (
    ArrayLiteral,
    BinaryOp,
    Call,
    Expression,
    FileTest,
    HashLiteral,
    InterpolatedString,
    Literal,
    NodeRef,
    Not,
    NotificationRef,
)

def node_interpolation(path: tuple[str, ...]) -> str:
    """
    Render a node attribute lookup as a Puppet variable interpolation.

    Args:
        path: Lookup segments in call order.

    Returns:
        Underscore joined token wrapped as ``${...}``.

    """
    return "${" + "_".join(path) + "}"


def _closing_paren_index(text: str) -> int:
    """Return the index of the parenthesis closing ``text[0]``, or -1."""
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def strip_wrapping_parens(text: str) -> str:
    """
    Remove parentheses that enclose the whole text.

    Only balanced pairs spanning the entire string are removed, so
    ``(a) && (b)`` and ``echo (done)`` are left untouched.

    Args:
        text: Rendered expression text.

    Returns:
        Text without enclosing parentheses.

    """
    while text.startswith("(") and _closing_paren_index(text) == len(text) - 1:
        text = text[1:-1].strip()
    return text


def render_text(expression: Expression | None, predicate: bool = False) -> str:
    """
    Render an expression as literal text.

    Args:
        expression: Parsed expression, or None.
        predicate: Render calls without argument parentheses, as shell
            words rather than Ruby calls.

    Returns:
        Reconstructed text.

    """
    if expression is None:
        return ""
    if isinstance(expression, Literal):
        return expression.value
    if isinstance(expression, InterpolatedString):
        return "".join(
            part if isinstance(part, str) else render_text(part, predicate)
            for part in expression.parts
        )
    if isinstance(expression, NodeRef):
        return node_interpolation(expression.path)
    if isinstance(expression, FileTest):
        return f"test {expression.flag} {render_text(expression.path, predicate)}"
    if isinstance(expression, Not):
        return f"! {render_text(expression.operand, predicate)}"
    if isinstance(expression, BinaryOp):
        left = render_text(expression.left, predicate)
        right = render_text(expression.right, predicate)
        return f"{left} {expression.op} {right}"
    if isinstance(expression, ArrayLiteral):
        return " ".join(render_text(item, predicate) for item in expression.items)
    if isinstance(expression, HashLiteral):
        return ", ".join(
            f"{render_text(key, predicate)} => {render_text(value, predicate)}"
            for key, value in expression.pairs
        )
    if isinstance(expression, NotificationRef):
        return ""
    if isinstance(expression, Call):
        return _render_call(expression, predicate)
    raise TypeError(f"Unsupported expression node: {type(expression).__name__}")


def _render_call(call: Call, predicate: bool) -> str:
    args = [render_text(arg, predicate) for arg in call.args]
    receiver = render_text(call.receiver, predicate) if call.receiver else ""

    if call.name == "[]":
        return f"{receiver}[{', '.join(args)}]"

    name = f"{receiver}.{call.name}" if receiver else call.name
    if not args:
        return name
    if predicate:
        return f"{name} {' '.join(args)}"
    return f"{name}({', '.join(args)})"


def render_predicate(expression: Expression | None) -> str:
    """
    Render a guard body as a shell condition.

    File existence checks become ``test -f`` / ``test -d`` forms and
    parentheses enclosing the whole condition are stripped.

    Args:
        expression: Value of the guard block.

    Returns:
        Shell condition text, empty when the block has no value.

    """
    return strip_wrapping_parens(render_text(expression, predicate=True).strip())


def render_command(expression: Expression | None) -> str:
    """Render an exec command, interpolating node attribute lookups."""
    return strip_wrapping_parens(render_text(expression).strip())
