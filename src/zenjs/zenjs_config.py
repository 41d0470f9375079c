"""Emitter configuration (pure data, no business logic)."""

from dataclasses import dataclass, field

from zenjs.zenjs_intrinsics import IntrinsicTable


@dataclass(frozen=True)
class EmitterConfig:
    """Groups JavaScript emission settings.

    Attributes:
        entry_point: Function invoked as the program's last statement, if declared.
        indent: Indentation unit for emitted blocks.
        match_temp: Name of the temporary holding a match subject.
        jsdoc: Emit JSDoc comments carrying the erased parameter/return types.
        intrinsics: Mapping table for namespaced calls.
    """

    entry_point: str = "main"
    indent: str = "  "
    match_temp: str = "__match"
    jsdoc: bool = True
    intrinsics: IntrinsicTable = field(default_factory=IntrinsicTable.from_defaults)
