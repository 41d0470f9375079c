"""
Renders Zen string interpolation literals as JavaScript template literals.

An `interpolation` node keeps the literal's text, with each embedded expression
still spelled `${...}`, in `value`; the frontend's parse of every embedded
expression sits in `children`, in order. The renderer walks the text, escapes the
literal segments for a template literal, and substitutes the k-th `${...}` span with
the emitted k-th child.

    "Hello, ${name}!"  +  [identifier name]   ->   `Hello, ${name}!`
"""

from collections.abc import Callable

from zenjs.zenjs_ast import ASTNode
from zenjs.zenjs_errors import MalformedInterpolation

_TEMPLATE_ESCAPES = {
    "\\": "\\\\",
    "`": "\\`",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_template_text(text: str) -> str:
    """Escapes literal text so it reads back unchanged inside a template literal."""
    out = "".join(_TEMPLATE_ESCAPES.get(ch, ch) for ch in text)
    return out.replace("${", "\\${")


_QUOTES = frozenset("\"'`")


def _skip_quoted(text: str, start: int) -> int:
    """Returns the offset just past the quoted literal opening at `start`.

    Braces inside the literal do not count toward span depth. An unterminated
    literal runs to the end of the text, which leaves its span unclosed.
    """
    quote = text[start]
    j = start + 1
    while j < len(text):
        if text[j] == "\\":
            j += 2
            continue
        if text[j] == quote:
            return j + 1
        j += 1
    return len(text)


def split_interpolation(text: str, node: ASTNode | None = None) -> list[tuple[bool, str]]:
    """
    Splits interpolation text into literal and embedded segments.

    Parameters
    ----------
    text : str
        The literal's text, with embedded expressions spelled `${...}`.
    node : ASTNode, optional
        Node reported in errors.

    Returns
    -------
    list[tuple[bool, str]]
        `(is_expr, source)` pairs in order. Literal segments are never empty;
        embedded segments hold the text between `${` and its matching `}`.

    Raises
    ------
    MalformedInterpolation
        If a `${` is never closed.
    """
    segments: list[tuple[bool, str]] = []
    literal: list[str] = []
    i = 0
    while i < len(text):
        if text.startswith("${", i):
            start = i + 2
            depth = 1
            j = start
            while j < len(text) and depth:
                ch = text[j]
                if ch == "\\":
                    j += 2
                    continue
                if ch in _QUOTES:
                    j = _skip_quoted(text, j)
                    continue
                if ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                j += 1
            if depth:
                raise MalformedInterpolation(
                    f"Unclosed '${{' at offset {i} in interpolation {text!r}", node
                )
            if literal:
                segments.append((False, "".join(literal)))
                literal = []
            segments.append((True, text[start : j - 1]))
            i = j
        else:
            literal.append(text[i])
            i += 1
    if literal:
        segments.append((False, "".join(literal)))
    return segments


def render_interpolation(node: ASTNode, emit_expr: Callable[[ASTNode], str]) -> str:
    """Renders an `interpolation` node as a backtick-delimited template literal.

    Args:
        node: The interpolation node.
        emit_expr: Expression emitter used for each embedded expression.

    Returns:
        The template literal text.

    Raises:
        MalformedInterpolation: If the delimiters are unbalanced or the number of
            `${...}` spans differs from the number of embedded expressions.
    """
    text = node.value if isinstance(node.value, str) else ""
    segments = split_interpolation(text, node)
    spans = sum(1 for is_expr, _ in segments if is_expr)
    if spans != len(node.children):
        raise MalformedInterpolation(
            f"Interpolation {text!r} has {spans} embedded expression(s) "
            f"but {len(node.children)} parsed child node(s)",
            node,
        )

    parts = ["`"]
    embedded = iter(node.children)
    for is_expr, segment in segments:
        if is_expr:
            parts.append("${" + emit_expr(next(embedded)) + "}")
        else:
            parts.append(escape_template_text(segment))
    parts.append("`")
    return "".join(parts)
