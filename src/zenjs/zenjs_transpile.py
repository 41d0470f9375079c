"""
Provides the `Transpiler` class and emitter interface for converting Zen ASTs into code.

Classes and Features:
    - Emitter (Protocol): Interface for backend emitters. Requires `emit` and `get_output`.
    - JavaScriptEmitter: Concrete emitter that translates Zen AST nodes to JavaScript.
    - Transpiler: Selects the emitter for a target (e.g., "js") and runs one fresh
      emission pass per `transpile` call.

Usage:
    The Transpiler takes a program `ASTNode` (or a list of top-level nodes) and returns
    code in the desired output language.

Example:
    >>> transpiler = Transpiler("js")
    >>> output_code = transpiler.transpile(program_node)

Raises:
    ValueError: If the target language is not supported.
    TypeError: If the AST contains invalid node types.
    TranspileError: If emission fails; no partial output is returned.
"""

import logging
from collections.abc import Callable
from typing import Protocol

from zenjs.emitters.js_emitter import JavaScriptEmitter
from zenjs.zenjs_ast import ASTNode
from zenjs.zenjs_config import EmitterConfig

logger = logging.getLogger(__name__)


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all zenjs emitters.

    Methods:
        emit(node): Emits a node and returns its text.
        get_output(): Returns the complete emitted code as a string.
    """

    def emit(self, node: ASTNode) -> str: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EmitterFactory = Callable[[EmitterConfig], Emitter]
"""Callable building a fresh emitter for one pass."""


class Transpiler:
    """Runs Zen ASTs through the emitter for a target language.

    Attributes:
        target (str): The normalized target name.
        config (EmitterConfig): Settings handed to every emitter instance.
    """

    def __init__(self, target: str = "js", config: EmitterConfig | None = None) -> None:
        """Initializes the transpiler with the desired output target.

        Args:
            target: The desired output language ("js" or "javascript").
            config: Emission settings; defaults to `EmitterConfig()`.

        Raises:
            ValueError: If the target language is not supported.
        """
        emitters: dict[str, EmitterFactory] = {
            "js": JavaScriptEmitter,
            "javascript": JavaScriptEmitter,
        }
        target = target.lower()
        if target not in emitters:
            raise ValueError(f"Unknown transpilation target: {target!r}")
        self.target = target
        self.config = config or EmitterConfig()
        self._factory = emitters[target]

    def transpile(self, ast: ASTNode | list[ASTNode]) -> str:
        """Transpiles a program into source code for the selected target.

        Each call uses a new emitter, so the same AST always yields the same text.

        Args:
            ast: A `program` node, or a list of top-level nodes forming one.

        Returns:
            The emitted source code as a string.

        Raises:
            TypeError: If `ast` is not an ASTNode or a list of ASTNode instances.
            TranspileError: If the AST cannot be emitted.
        """
        if isinstance(ast, list):
            if not all(isinstance(node, ASTNode) for node in ast):
                raise TypeError("All items in AST must be ASTNode instances.")
            ast = ASTNode("program", children=ast)
        elif not isinstance(ast, ASTNode):
            raise TypeError("AST must be an ASTNode or a list of ASTNode instances.")

        logger.debug("Transpiling %s node to %s", ast.kind, self.target)
        emitter = self._factory(self.config)
        code = emitter.emit(ast)
        logger.debug("Emitted %d line(s)", code.count("\n"))
        return code
