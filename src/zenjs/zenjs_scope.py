"""
Scope tracking for the JavaScript emitter.

A `ScopeStack` holds one mapping per live lexical scope (program, function body,
block, loop body, match arm, closure). Each mapping records, per identifier, whether
it has been declared and whether it may be reassigned. The statement emitter uses it
to choose between `const`, `let` and a bare reassignment.

Example:
    >>> scopes = ScopeStack()
    >>> with scopes.scope():
    ...     scopes.declare("count", mutable=True)
    ...     scopes.lookup("count").mutable
    True
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class Binding:
    mutable: bool
    declared: bool = True


class ScopeStack:
    """Stack of identifier -> Binding mappings, innermost last.

    The stack starts with a single root scope, which is never popped.
    """

    def __init__(self) -> None:
        self._scopes: list[dict[str, Binding]] = [{}]

    def __len__(self) -> int:
        return len(self._scopes)

    def push(self) -> None:
        self._scopes.append({})

    def pop(self) -> None:
        if len(self._scopes) == 1:
            raise RuntimeError("Cannot pop the root scope")
        self._scopes.pop()

    @contextmanager
    def scope(self) -> Iterator[None]:
        """Pushes a child scope for the duration of the block, popping it on any exit."""
        self.push()
        try:
            yield
        finally:
            self.pop()

    def declare(self, name: str, mutable: bool) -> Binding:
        binding = Binding(mutable=mutable, declared=True)
        self._scopes[-1][name] = binding
        return binding

    def lookup(self, name: str) -> Binding | None:
        for scope in reversed(self._scopes):
            if name in scope:
                return scope[name]
        return None

    def lookup_local(self, name: str) -> Binding | None:
        return self._scopes[-1].get(name)
