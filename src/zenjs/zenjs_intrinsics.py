"""
Provides the `IntrinsicTable` class mapping Zen namespaced calls to JavaScript.

Zen programs reach their runtime through namespaced calls such as `io.println(x)`.
The expression emitter resolves each such call through an `IntrinsicTable` instead of
hard-coding the translation, so new runtimes are supported by adding entries rather
than by changing emitter code.

Classes:
    - IntrinsicTable: Maps qualified Zen names to JavaScript callees or call templates.
    - IntrinsicConfigError: Raised when a configuration is malformed or self-contradictory.

Entry forms:
    - A callee expression, e.g. `"console.log"`: arguments are appended as `(a, b)`.
    - A template containing `{args}`, e.g. `"process.stdout.write(String({args}))"`:
      the comma-joined arguments replace the placeholder.

Usage:
    >>> table = IntrinsicTable.from_defaults()
    >>> table.configure({"io.warn": "console.warn"})
    >>> table.render("io.warn", ['"careful"'])
    'console.warn("careful")'

JSON files use the same shape as `configure`; keys may list several comma-separated
names sharing one target:
    {
        "io.println,println": "console.log",
        "io.warn": "console.warn"
    }
"""

import json
import re
from typing import Any

ARGS_PLACEHOLDER = "{args}"

DEFAULT_INTRINSICS: dict[str, str] = {
    "io.println": "console.log",
    "io.print": "process.stdout.write(String({args}))",
    "io.eprintln": "console.error",
    "println": "console.log",
    "print": "process.stdout.write(String({args}))",
    "io.read_line": "prompt",
    "cast": "{args}",
    "JSON.parse": "JSON.parse",
    "JSON.stringify": "JSON.stringify",
    "document.getElementById": "document.getElementById",
    "document.createElement": "document.createElement",
    "document.querySelector": "document.querySelector",
    "document.querySelectorAll": "document.querySelectorAll",
    **{
        f"Math.{fn}": f"Math.{fn}"
        for fn in ("floor", "ceil", "round", "random", "min", "max", "abs", "sqrt", "pow")
    },
}
"""Built-in mappings for the Zen standard library surface."""

_NAME_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")


class IntrinsicConfigError(Exception):
    """Raised when an intrinsic table configuration is invalid.

    Attributes:
        conflicts (list[str]): Human-readable descriptions of each offending entry.
    """

    def __init__(self, message: str, conflicts: list[str] | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []


class IntrinsicTable:
    """Maps qualified Zen call names to JavaScript call renderings.

    Attributes:
        mapping (dict[str, str]): Qualified name -> callee expression or `{args}` template.
    """

    def __init__(self, mapping: dict[str, str] | None = None) -> None:
        self.mapping: dict[str, str] = {}
        if mapping:
            self.configure(mapping)

    def __contains__(self, name: object) -> bool:
        return name in self.mapping

    def __len__(self) -> int:
        return len(self.mapping)

    @classmethod
    def from_defaults(cls) -> "IntrinsicTable":
        """Builds a table preloaded with `DEFAULT_INTRINSICS`."""
        return cls(DEFAULT_INTRINSICS)

    @classmethod
    def from_json(cls, path: str, defaults: bool = True) -> "IntrinsicTable":
        """Builds a table from a JSON file, optionally layered over the defaults.

        Args:
            path: Path to a JSON object of name (or comma-separated names) -> target.
            defaults: If True, the file's entries extend and override `DEFAULT_INTRINSICS`.

        Returns:
            The configured table.

        Raises:
            IntrinsicConfigError: If the file cannot be read or its entries are invalid.
        """
        table = cls.from_defaults() if defaults else cls()
        table.load_from_json(path)
        return table

    def load_from_json(self, path: str) -> None:
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, ValueError) as e:
            raise IntrinsicConfigError(f"Failed to load intrinsics file: {e}") from e
        self.configure(raw_cfg)

    def configure(self, cfg: Any) -> None:
        """
        Adds (or overrides) entries in the table.

        All entries are validated before any is applied, so a rejected configuration
        leaves the table unchanged.

        Args:
            cfg: A dict whose keys are qualified names, comma-separated groups of names,
                or tuples/lists of names, and whose values are JavaScript targets.

        Raises:
            IntrinsicConfigError: If the configuration is not a dict, a name or target is
                malformed, or one name is mapped to two different targets.
        """
        if not isinstance(cfg, dict):
            raise IntrinsicConfigError("Configuration must be a dict of name -> target")

        staged: dict[str, str] = {}
        conflicts: list[str] = []
        for group, target in cfg.items():
            if not isinstance(target, str) or not target.strip():
                conflicts.append(f"{group!r} → target must be a non-empty string")
                continue
            if target.count(ARGS_PLACEHOLDER) > 1:
                conflicts.append(f"{group!r} → template uses {ARGS_PLACEHOLDER} twice")
                continue
            target = target.strip()
            for name in self._extract_names(group):
                if not _NAME_RE.match(name):
                    conflicts.append(f"'{name}' → not a qualified name")
                elif name in staged and staged[name] != target:
                    conflicts.append(
                        f"'{name}' → conflict between {staged[name]} and {target}"
                    )
                else:
                    staged[name] = target

        if conflicts:
            raise IntrinsicConfigError("Invalid intrinsic configuration", conflicts)
        self.mapping.update(staged)

    def _extract_names(self, group: Any) -> list[str]:
        if isinstance(group, str):
            return [name.strip() for name in group.split(",") if name.strip()]
        if isinstance(group, (list, tuple, set)):
            names: list[str] = []
            for item in group:
                names.extend(self._extract_names(item))
            return names
        return [str(group)]

    def render(self, name: str, args: list[str]) -> str:
        """Renders a call to the intrinsic `name` with already-emitted arguments.

        Raises:
            KeyError: If `name` has no entry; callers check membership first.
        """
        target = self.mapping[name]
        joined = ", ".join(args)
        if ARGS_PLACEHOLDER in target:
            return target.replace(ARGS_PLACEHOLDER, joined)
        return f"{target}({joined})"

    def overrides(self) -> dict[str, str]:
        """Returns the entries that differ from (or are absent in) the defaults."""
        return {
            name: target
            for name, target in self.mapping.items()
            if DEFAULT_INTRINSICS.get(name) != target
        }

    def report(self) -> str:
        return "\n".join(
            f"{name:>28} → {target}" for name, target in sorted(self.mapping.items())
        )
