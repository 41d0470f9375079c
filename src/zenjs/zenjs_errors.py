"""
Error kinds raised while emitting JavaScript from a Zen AST.

Every error is fatal to the current emission pass: the transpiler returns no
output at all when one is raised. The CLI reports `error.kind` and the message.

Classes:
    - TranspileError: Base class carrying the offending node's location.
    - UnsupportedConstruct: Node kind (or operator) the emitter does not know.
    - ImmutableReassignment: Plain assignment to a binding declared immutable.
    - UnknownIntrinsic: Namespaced call without an entry in the intrinsic table.
    - MalformedInterpolation: Interpolation literal with unbalanced `${ }` delimiters.
    - UnresolvedVariant: Enum case that matches no declared enum, or more than one.
"""

from zenjs.zenjs_ast import ASTNode


class TranspileError(Exception):
    """Base class for all emission errors.

    Attributes:
        node (ASTNode | None): The node being emitted when the error occurred.
        line (int): Source line of the node (0 if unknown).
        col (int): Source column of the node (0 if unknown).
    """

    def __init__(self, message: str, node: ASTNode | None = None):
        if node is not None and (node.line or node.col):
            message = f"{message} ({node.location})"
        super().__init__(message)
        self.node = node
        self.line = node.line if node is not None else 0
        self.col = node.col if node is not None else 0

    @property
    def kind(self) -> str:
        return type(self).__name__


class UnsupportedConstruct(TranspileError):
    pass


class ImmutableReassignment(TranspileError):
    """Raised when `name = expr` targets a binding declared without `::=`."""

    def __init__(self, name: str, node: ASTNode | None = None):
        super().__init__(
            f"Cannot reassign immutable binding '{name}' (declare it with '::=')",
            node,
        )
        self.name = name


class UnknownIntrinsic(TranspileError):
    def __init__(self, qualified: str, node: ASTNode | None = None):
        super().__init__(f"No intrinsic mapping for '{qualified}'", node)
        self.qualified = qualified


class MalformedInterpolation(TranspileError):
    pass


class UnresolvedVariant(TranspileError):
    pass
