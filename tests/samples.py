"""Small AST builders and the sample Zen programs used across the test suite."""

from zenjs.zenjs_ast import ASTNode


def ident(name: str) -> ASTNode:
    return ASTNode("identifier", name)


def num(value: int | float) -> ASTNode:
    return ASTNode("float" if isinstance(value, float) else "int", str(value))


def string(text: str) -> ASTNode:
    return ASTNode("string", text)


def boolean(value: bool) -> ASTNode:
    return ASTNode("bool", "true" if value else "false")


def binary(op: str, left: ASTNode, right: ASTNode) -> ASTNode:
    return ASTNode("binary", op, [left, right])


def call(name: str, *args: ASTNode) -> ASTNode:
    return ASTNode("call", ident(name), list(args))


def ns_call(qualified: str, *args: ASTNode) -> ASTNode:
    return ASTNode("namespaced_call", qualified, list(args))


def println(arg: ASTNode) -> ASTNode:
    return expr_stmt(ns_call("io.println", arg))


def interp(text: str, *exprs: ASTNode) -> ASTNode:
    return ASTNode("interpolation", text, list(exprs))


def assign(name: str, value: ASTNode) -> ASTNode:
    return ASTNode("assign", name, [value])


def declare_mut(name: str, value: ASTNode) -> ASTNode:
    return ASTNode("declare_mut", name, [value])


def ret(value: ASTNode | None = None) -> ASTNode:
    return ASTNode("return", children=[value] if value is not None else [])


def expr_stmt(expr: ASTNode) -> ASTNode:
    return ASTNode("expr_stmt", children=[expr])


def block(*stmts: ASTNode) -> ASTNode:
    return ASTNode("block", children=list(stmts))


def loop(cond: ASTNode | None, *stmts: ASTNode) -> ASTNode:
    children = [cond] if cond is not None else []
    return ASTNode("loop", children=[*children, block(*stmts)])


def param(name: str, type_: str | None = None) -> ASTNode:
    return ASTNode("param", name, type_=type_)


def func(
    name: str,
    params: list[tuple[str, str]],
    *stmts: ASTNode,
    return_type: str | None = None,
) -> ASTNode:
    return ASTNode(
        "func",
        name,
        [*(param(p, t) for p, t in params), block(*stmts)],
        return_type=return_type,
    )


def arm(pattern: ASTNode, body: ASTNode, guard: ASTNode | None = None) -> ASTNode:
    return ASTNode("arm", guard, [pattern, body])


def match(subject: ASTNode, *arms: ASTNode) -> ASTNode:
    return ASTNode("match", subject, list(arms))


def variant_pattern(
    case: str, enum: str | None = None, binding: str | None = None
) -> ASTNode:
    children = [ASTNode("binding", binding)] if binding else []
    return ASTNode("variant_pattern", case, children, type_=enum)


def variant(case: str, enum: str | None = None, payload: ASTNode | None = None) -> ASTNode:
    return ASTNode("variant", case, [payload] if payload else [], type_=enum)


def enum(name: str, *cases: str | tuple[str, str]) -> ASTNode:
    nodes = []
    for case in cases:
        if isinstance(case, tuple):
            nodes.append(ASTNode("case", case[0], type_=case[1]))
        else:
            nodes.append(ASTNode("case", case))
    return ASTNode("enum", name, nodes)


def struct(name: str, *fields: tuple[str, str]) -> ASTNode:
    return ASTNode("struct", name, [ASTNode("field", f, type_=t) for f, t in fields])


def struct_literal(name: str, **fields: ASTNode) -> ASTNode:
    return ASTNode(
        "struct_literal",
        name,
        [ASTNode("field_init", f, [value]) for f, value in fields.items()],
    )


def member(obj: ASTNode, attr: str) -> ASTNode:
    return ASTNode("member", attr, [obj])


def program(*items: ASTNode) -> ASTNode:
    return ASTNode("program", children=list(items))


def fibonacci_program() -> ASTNode:
    n = ident("n")
    return program(
        func(
            "fibonacci",
            [("n", "i32")],
            expr_stmt(
                match(
                    binary("<=", n, num(1)),
                    arm(boolean(True), block(ret(n))),
                    arm(
                        boolean(False),
                        block(
                            ret(
                                binary(
                                    "+",
                                    call("fibonacci", binary("-", n, num(1))),
                                    call("fibonacci", binary("-", n, num(2))),
                                )
                            )
                        ),
                    ),
                )
            ),
            return_type="i32",
        ),
        func(
            "main",
            [],
            declare_mut("i", num(0)),
            loop(
                binary("<", ident("i"), num(10)),
                println(
                    interp("fib(${i}) = ${fibonacci(i)}", ident("i"), call("fibonacci", ident("i")))
                ),
                assign("i", binary("+", ident("i"), num(1))),
            ),
            ret(num(0)),
            return_type="i32",
        ),
    )


FIBONACCI_OUTPUT = "".join(
    f"fib({i}) = {v}\n" for i, v in enumerate([0, 1, 1, 2, 3, 5, 8, 13, 21, 34])
)


def counter_program() -> ASTNode:
    count = ident("count")

    def apply(action: str) -> ASTNode:
        return assign("count", call("apply_action", count, variant(action)))

    return program(
        ASTNode("import", "io", [string("@std")]),
        enum("Action", "Increment", "Decrement", "Reset"),
        func(
            "apply_action",
            [("count", "i32"), ("action", "Action")],
            expr_stmt(
                match(
                    ident("action"),
                    arm(variant_pattern("Increment"), block(expr_stmt(binary("+", count, num(1))))),
                    arm(variant_pattern("Decrement"), block(expr_stmt(binary("-", count, num(1))))),
                    arm(variant_pattern("Reset"), block(expr_stmt(num(0)))),
                )
            ),
            return_type="i32",
        ),
        func(
            "main",
            [],
            declare_mut("count", num(0)),
            apply("Increment"),
            apply("Increment"),
            println(interp("After two increments: ${count}", count)),
            apply("Decrement"),
            println(interp("After decrement: ${count}", count)),
            apply("Reset"),
            println(interp("After reset: ${count}", count)),
            ret(num(0)),
            return_type="i32",
        ),
    )


COUNTER_OUTPUT = "After two increments: 2\nAfter decrement: 1\nAfter reset: 0\n"


def todo_program() -> ASTNode:
    p = ident("p")
    t = ident("t")
    return program(
        enum("Priority", "Low", "Medium", "High"),
        struct("Todo", ("id", "i32"), ("text", "String"), ("done", "bool")),
        func(
            "priority_label",
            [("p", "Priority")],
            expr_stmt(
                match(
                    p,
                    arm(variant_pattern("Low"), block(expr_stmt(string("low")))),
                    arm(variant_pattern("Medium"), block(expr_stmt(string("medium")))),
                    arm(variant_pattern("High"), block(expr_stmt(string("HIGH")))),
                )
            ),
            return_type="String",
        ),
        func(
            "format_todo",
            [("id", "i32"), ("text", "String"), ("done", "bool"), ("priority", "Priority")],
            assign(
                "status",
                match(
                    ident("done"),
                    arm(boolean(True), block(expr_stmt(string("[x]")))),
                    arm(boolean(False), block(expr_stmt(string("[ ]")))),
                ),
            ),
            ret(
                interp(
                    "${status} #${id} ${text} (${priority_label(priority)})",
                    ident("status"),
                    ident("id"),
                    ident("text"),
                    call("priority_label", ident("priority")),
                )
            ),
            return_type="String",
        ),
        func(
            "main",
            [],
            assign(
                "t",
                struct_literal(
                    "Todo", text=string("Write emitter"), id=num(1), done=boolean(True)
                ),
            ),
            println(
                call(
                    "format_todo",
                    member(t, "id"),
                    member(t, "text"),
                    member(t, "done"),
                    variant("High"),
                )
            ),
            println(
                call("format_todo", num(2), string("Test emitter"), boolean(False), variant("Low"))
            ),
            ret(num(0)),
            return_type="i32",
        ),
    )


TODO_OUTPUT = "[x] #1 Write emitter (HIGH)\n[ ] #2 Test emitter (low)\n"


def reading_program() -> ASTNode:
    v = ident("v")
    return program(
        enum("Reading", "Missing", ("Value", "i32")),
        func(
            "describe",
            [("r", "Reading")],
            expr_stmt(
                match(
                    ident("r"),
                    arm(variant_pattern("Missing"), string("none")),
                    arm(
                        variant_pattern("Value", binding="v"),
                        interp("high ${v}", v),
                        guard=binary(">", v, num(100)),
                    ),
                    arm(variant_pattern("Value", binding="v"), interp("ok ${v}", v)),
                )
            ),
            return_type="String",
        ),
        func(
            "main",
            [],
            println(call("describe", variant("Missing"))),
            println(call("describe", variant("Value", "Reading", num(150)))),
            println(call("describe", variant("Value", payload=num(7)))),
        ),
    )


READING_OUTPUT = "none\nhigh 150\nok 7\n"


SAMPLE_PROGRAMS = {
    "fibonacci": (fibonacci_program, FIBONACCI_OUTPUT),
    "counter": (counter_program, COUNTER_OUTPUT),
    "todo": (todo_program, TODO_OUTPUT),
    "reading": (reading_program, READING_OUTPUT),
}
