"""
Line buffer used by the JavaScript emitter.

One `EmissionBuffer` belongs to one emission pass. Statement emitters append
indented lines; `render_inline()` flattens a buffer onto one line for constructs
that must appear in expression position (match arms inside an arrow function).
"""

from collections.abc import Iterator
from contextlib import contextmanager


class EmissionBuffer:
    """Append-only list of emitted lines with an indentation level.

    Attributes:
        lines (list[str]): Emitted lines, already indented.
        indent (int): Current indentation depth.
        unit (str): Text used for one level of indentation.
    """

    def __init__(self, unit: str = "  ") -> None:
        self.lines: list[str] = []
        self.indent = 0
        self.unit = unit

    def indent_str(self) -> str:
        return self.unit * self.indent

    def line(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}{text}")

    def blank(self) -> None:
        self.lines.append("")

    @contextmanager
    def indented(self) -> Iterator[None]:
        self.indent += 1
        try:
            yield
        finally:
            self.indent -= 1

    def get_output(self) -> str:
        return "\n".join(self.lines) + "\n" if self.lines else ""

    def render_inline(self) -> str:
        return " ".join(line.strip() for line in self.lines if line.strip())
