# tests/test_properties.py

import re

from hypothesis import given
from hypothesis import strategies as st
from samples import arm, call, ident, match, num, string, struct, struct_literal

from zenjs.emitters.js_emitter import JavaScriptEmitter
from zenjs.emitters.js_interpolation import escape_template_text, split_interpolation
from zenjs.zenjs_ast import ASTNode
from zenjs.zenjs_transpile import Transpiler

names = st.from_regex(r"[a-z][a-z0-9]{0,6}_", fullmatch=True)
plain_text = st.text(
    alphabet=st.characters(min_codepoint=32, max_codepoint=0x2FFF).filter(
        lambda c: c not in "${}"
    ),
    max_size=12,
)


@given(st.text())  # type: ignore[misc]
def test_escaped_text_has_no_live_delimiters(text: str) -> None:
    escaped = escape_template_text(text)
    residue = re.sub(r"\\.", "", escaped, flags=re.DOTALL)
    assert "`" not in residue
    assert "${" not in residue
    assert "\n" not in escaped and "\r" not in escaped


@given(st.lists(st.tuples(plain_text, names), max_size=5), plain_text)  # type: ignore[misc]
def test_split_recovers_embedded_names(parts: list[tuple[str, str]], tail: str) -> None:
    text = "".join(f"{lit}${{{name}}}" for lit, name in parts) + tail
    segments = split_interpolation(text)
    assert [src for is_expr, src in segments if is_expr] == [name for _, name in parts]
    assert "".join(src for is_expr, src in segments if not is_expr) == (
        "".join(lit for lit, _ in parts) + tail
    )


@given(st.lists(st.integers(min_value=-1000, max_value=1000), min_size=1, max_size=6, unique=True))  # type: ignore[misc]
def test_match_evaluates_subject_once(values: list[int]) -> None:
    node = match(call("next_value"), *(arm(num(v), string(str(v))) for v in values))
    out = JavaScriptEmitter().emit_expr(node)
    assert out.count("next_value()") == 1
    assert out.count("if (__match === ") == len(values)
    assert out.count("} else if") == len(values) - 1
    assert "else {" not in out


@given(st.permutations(["a", "b", "c", "d"]))  # type: ignore[misc]
def test_struct_literal_is_order_independent(order: list[str]) -> None:
    emitter = JavaScriptEmitter()
    emitter.register_declarations([struct("Quad", *((f, "i32") for f in "abcd"))])
    node = struct_literal("Quad", **{f: ident(f.upper()) for f in order})
    assert emitter.emit_expr(node) == "new Quad(A, B, C, D)"


@given(st.lists(st.tuples(names, st.integers(min_value=0, max_value=99)), max_size=6))  # type: ignore[misc]
def test_transpile_is_deterministic(bindings: list[tuple[str, int]]) -> None:
    body = [ASTNode("declare_mut", name, [num(v)]) for name, v in bindings]
    program = ASTNode(
        "program", children=[ASTNode("func", "main", [ASTNode("block", children=body)])]
    )
    transpiler = Transpiler()
    first = transpiler.transpile(program)
    assert first == transpiler.transpile(program)
    assert first.count("let ") == len({name for name, _ in bindings})
