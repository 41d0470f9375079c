# tests/test_interpolation.py

import pytest

from zenjs.emitters.js_interpolation import (
    escape_template_text,
    render_interpolation,
    split_interpolation,
)
from zenjs.zenjs_ast import ASTNode
from zenjs.zenjs_errors import MalformedInterpolation


def _emit(node: ASTNode) -> str:
    return str(node.value)


def test_split_literal_only() -> None:
    assert split_interpolation("plain") == [(False, "plain")]
    assert split_interpolation("") == []


def test_split_mixed_segments() -> None:
    assert split_interpolation("a ${x} b ${y}") == [
        (False, "a "),
        (True, "x"),
        (False, " b "),
        (True, "y"),
    ]


def test_split_counts_nested_braces() -> None:
    assert split_interpolation("${f({a: 1})}!") == [(True, "f({a: 1})"), (False, "!")]


def test_split_unclosed_raises() -> None:
    with pytest.raises(MalformedInterpolation, match="Unclosed"):
        split_interpolation("value: ${x")


def test_escape_template_text() -> None:
    assert escape_template_text("a`b") == "a\\`b"
    assert escape_template_text("back\\slash") == "back\\\\slash"
    assert escape_template_text("line\nnext\ttab\r") == "line\\nnext\\ttab\\r"
    assert escape_template_text("cost: $5 {ok}") == "cost: $5 {ok}"


def test_render_substitutes_children_in_order() -> None:
    node = ASTNode(
        "interpolation",
        "Hello, ${name}! You are ${age}.",
        [ASTNode("identifier", "who"), ASTNode("identifier", "years")],
    )
    assert render_interpolation(node, _emit) == "`Hello, ${who}! You are ${years}.`"


def test_render_escapes_literal_text() -> None:
    node = ASTNode("interpolation", "say `hi` ${x}\n", [ASTNode("identifier", "x")])
    assert render_interpolation(node, _emit) == "`say \\`hi\\` ${x}\\n`"


def test_render_without_spans() -> None:
    assert render_interpolation(ASTNode("interpolation", "just text"), _emit) == "`just text`"


def test_render_count_mismatch_raises() -> None:
    node = ASTNode("interpolation", "${a} and ${b}", [ASTNode("identifier", "a")], line=2)
    with pytest.raises(MalformedInterpolation, match="2 embedded expression") as exc:
        render_interpolation(node, _emit)
    assert exc.value.line == 2


@pytest.mark.parametrize(
    "text, embedded",
    [
        ('Total: ${wrap("}")}!', 'wrap("}")'),
        ("${pick('{', x)} end", "pick('{', x)"),
        ('${quote("say \\"}\\"")}', 'quote("say \\"}\\"")'),
        ("${tag(`}`)}", "tag(`}`)"),
    ],
)
def test_split_skips_braces_in_quoted_literals(text: str, embedded: str) -> None:
    segments = split_interpolation(text)
    assert [src for is_expr, src in segments if is_expr] == [embedded]
    literal = "".join(src for is_expr, src in segments if not is_expr)
    assert literal == text.replace("${" + embedded + "}", "")


def test_split_unterminated_quote_leaves_span_unclosed() -> None:
    with pytest.raises(MalformedInterpolation, match="Unclosed"):
        split_interpolation('${wrap("})')


def test_render_brace_in_embedded_string() -> None:
    node = ASTNode(
        "interpolation",
        'Total: ${wrap("}")}!',
        [ASTNode("call", ASTNode("identifier", "wrap"), [ASTNode("string", "}")])],
    )
    assert render_interpolation(node, lambda n: 'wrap("}")') == '`Total: ${wrap("}")}!`'
