"""
Defines the abstract syntax tree (AST) node structure consumed by the zenjs emitter.

The tree is produced by the external Zen frontend. zenjs only reads it: no emitter
mutates a node. Trees cross the process boundary as JSON, using the `ASTDict` shape
produced by `ASTNode.to_dict()` and read back with `ASTNode.from_dict()`.

Classes:
    ASTNode:
        A node in the syntax tree, identified by its `kind` tag.

    ASTDict:
        TypedDict representation of a serialized ASTNode.

Each ASTNode tracks:
    kind (str): The syntactic construct (one of `NODE_KINDS`, e.g. "func", "match").
    value (Union[str, ASTNode], optional): A raw string (name, operator, literal text)
        or another ASTNode (callee, match subject, arm guard).
    children (list[ASTNode]): Ordered child nodes.
    type (str, optional): Type annotation of a parameter, field or payload case.
    return_type (str, optional): Return type of a function.
    line (int): Source line number for error messages.
    col (int): Source column number for error messages.

Example:
    node = ASTNode("func", value="main", children=[ASTNode("block")], return_type="i32")
"""

from typing import Any, TypedDict, Union

DECLARATION_KINDS = frozenset(
    {
        "program",
        "func",
        "param",
        "struct",
        "field",
        "enum",
        "case",
        "const",
        "import",
        "export",
    }
)
"""Top-level constructs and their parts."""

STATEMENT_KINDS = frozenset(
    {
        "block",
        "declare_mut",
        "assign",
        "return",
        "loop",
        "break",
        "continue",
        "raise",
        "expr_stmt",
    }
)
"""Constructs emitted as terminated JavaScript statements."""

EXPRESSION_KINDS = frozenset(
    {
        "int",
        "float",
        "bool",
        "string",
        "interpolation",
        "identifier",
        "binary",
        "unary",
        "call",
        "namespaced_call",
        "member",
        "index",
        "array",
        "struct_literal",
        "field_init",
        "variant",
        "match",
        "arm",
        "closure",
    }
)
"""Constructs emitted as JavaScript expressions. `block` is also valid here."""

PATTERN_KINDS = frozenset(
    {"variant_pattern", "binding", "wildcard", "or_pattern", "range_pattern"}
)
"""Pattern-only kinds; literal kinds are valid patterns too."""

NODE_KINDS = DECLARATION_KINDS | STATEMENT_KINDS | EXPRESSION_KINDS | PATTERN_KINDS
"""The closed set of node kinds the emitter understands."""


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "func", "call", "match").
        value (Any): The node's value, a string, a nested ASTDict, or None.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        type (Optional[str]): Optional type annotation.
        return_type (Optional[str]): Optional return type annotation.
        children (List[ASTDict]): Child nodes.
    """

    kind: str
    value: Any
    line: int
    col: int
    type: str | None
    return_type: str | None
    children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the Zen abstract syntax tree.

    Args:
        kind (str): The type of node (e.g., "func", "call", "assign", "match").
        value (Union[str, ASTNode], optional): A literal value or another AST node.
        children (list[ASTNode], optional): Child nodes in source order.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        type_ (str, optional): Type annotation (parameters, fields, payload cases).
        return_type (str, optional): Return type (functions).

    Methods:
        __repr__(): Returns a structured string representation for debugging.
        __eq__(other): Checks structural equality with another ASTNode.
        to_dict(): Converts the node (and all descendants) into a nested dictionary.
        from_dict(data): Rebuilds a node tree from its dictionary form.
    """

    def __init__(
        self,
        kind: str,
        value: Union[str, "ASTNode"] | None = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        type_: str | None = None,
        return_type: str | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.type = type_
        self.return_type = return_type

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.type is not None:
            parts.append(f"type_={self.type}")
        if self.return_type is not None:
            parts.append(f"return_type={self.return_type}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.type == other.type
            and self.return_type == other.return_type
            and self.children == other.children
        )

    @property
    def location(self) -> str:
        return f"line {self.line}, col {self.col}"

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()

        return {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "type": self.type,
            "return_type": self.return_type,
            "children": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, data: ASTDict) -> "ASTNode":
        """Rebuilds an ASTNode tree from the dictionary form produced by `to_dict()`.

        Args:
            data: A mapping with at least a "kind" key.

        Returns:
            The reconstructed node.

        Raises:
            TypeError: If `data` or one of its children is not a mapping with a string kind.
        """
        if not isinstance(data, dict) or not isinstance(data.get("kind"), str):
            raise TypeError(f"Expected AST dictionary with a 'kind', got {data!r}")
        val: Any = data.get("value")
        if isinstance(val, dict):
            val = cls.from_dict(val)  # type: ignore[arg-type]
        elif val is not None and not isinstance(val, str):
            val = str(val).lower() if isinstance(val, bool) else str(val)
        type_ = data.get("type")
        return_type = data.get("return_type")
        return cls(
            data["kind"],
            val,
            [cls.from_dict(c) for c in data.get("children", [])],
            line=data.get("line", 0),
            col=data.get("col", 0),
            type_=None if type_ is None else str(type_),
            return_type=None if return_type is None else str(return_type),
        )
