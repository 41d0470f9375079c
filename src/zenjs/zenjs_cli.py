"""
zenjs CLI Entrypoint.

This module provides the command-line interface for transpiling Zen programs to
JavaScript. The Zen frontend hands its parsed program over as JSON (the shape produced
by `ASTNode.to_dict()`); the CLI loads it, emits JavaScript, and prints or writes it.

Features:
    - Read the AST from a `.json` file, from stdin (`-` or no argument), or inline (`-s`).
    - Output to stdout, to an explicit file (`-o`), or next to the input (`-w`).
    - Extend the intrinsic table from a JSON file (`--intrinsics`).
    - Optionally run the emitted program with Node.js (`-e`).

Example usage:
    zenjs counter.json
    zenjs counter.json -w
    zenjs counter.json -o out/counter.js --intrinsics browser.json
    zenjs < counter.json

Functions:
    load_ast(text: str) -> ASTNode:
        Parses JSON AST text into an ASTNode tree.

    run_zenjs(source: str, is_string: bool = False, ...) -> str:
        Executes the pipeline (load → transpile → output/exec).

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, runs the pipeline, and maps failures to exit code 1.
"""

import argparse
import json
import logging
import shutil
import subprocess
import sys
from pathlib import Path

from zenjs.zenjs_ast import ASTNode
from zenjs.zenjs_config import EmitterConfig
from zenjs.zenjs_errors import TranspileError
from zenjs.zenjs_intrinsics import IntrinsicConfigError, IntrinsicTable
from zenjs.zenjs_transpile import Transpiler

logger = logging.getLogger(__name__)


def load_ast(text: str) -> ASTNode:
    """Parses JSON AST text into an ASTNode tree.

    A top-level JSON list is taken as the program's top-level nodes.

    Raises:
        ValueError: If the text is not valid JSON.
        TypeError: If the JSON does not describe AST nodes.
    """
    data = json.loads(text)
    if isinstance(data, list):
        return ASTNode("program", children=[ASTNode.from_dict(d) for d in data])
    return ASTNode.from_dict(data)


def run_zenjs(
    source: str | None,
    is_string: bool = False,
    out: str | None = None,
    write: bool = False,
    intrinsics: str | None = None,
    entry: str = "main",
    jsdoc: bool = True,
    execute: bool = False,
    pretty: bool = False,
) -> str:
    """
    Run the zenjs toolchain: load, transpile, and print, write or execute the result.

    Args:
        source (str | None): Path to a JSON AST file, inline JSON (with `is_string`),
            or None / "-" to read stdin.
        is_string (bool): If True, treats `source` as JSON text instead of a path.
        out (str | None): Optional path to write the JavaScript to.
        write (bool): If True and `out` is not given, writes next to the input file
            with a `.js` suffix.
        intrinsics (str | None): Optional JSON file extending the intrinsic table.
        entry (str): Name of the entry function invoked at the end of the program.
        jsdoc (bool): Emit JSDoc type comments on functions.
        execute (bool): If True, runs the emitted program with `node` and prints its output.
        pretty (bool): If True, prints banners around the code and the program output.

    Returns:
        The emitted JavaScript.

    Raises:
        ValueError: If `write` is requested without an input file, or the JSON is invalid.
        TranspileError: If emission fails. Nothing is printed or written in that case.
        IntrinsicConfigError: If the intrinsics file is invalid.
    """
    # 1. Read source
    from_stdin = not is_string and (source is None or source == "-")
    if from_stdin:
        text = sys.stdin.read()
    elif is_string:
        text = source or ""
    else:
        text = Path(str(source)).read_text(encoding="utf-8")

    if write and not out:
        if from_stdin or is_string:
            raise ValueError("--write needs an input file; use -o with stdin input.")
        out = str(Path(str(source)).with_suffix(".js"))

    # 2. Configure
    if intrinsics:
        table = IntrinsicTable.from_json(intrinsics)
    else:
        table = IntrinsicTable.from_defaults()
    config = EmitterConfig(entry_point=entry, jsdoc=jsdoc, intrinsics=table)

    # 3. Load and transpile
    ast = load_ast(text)
    code = Transpiler("js", config).transpile(ast)

    # 4. Output result
    if pretty:
        banner = "=" * 20
        print(f"{banner}\nTranspiled JavaScript\n{banner}\n{code}{banner}\n")
    elif not out:
        sys.stdout.write(code)

    # 5. Optional write to file
    if out:
        Path(out).write_text(code, encoding="utf-8")
        logger.info("Wrote %s", out)
        print(f"Wrote {out}", file=sys.stderr)

    # 6. Optional execution
    if execute:
        node = shutil.which("node")
        if node is None:
            print("Execution needs Node.js on PATH", file=sys.stderr)
        else:
            result = subprocess.run(
                [node], input=code, capture_output=True, text=True, check=False
            )
            if pretty:
                print("<<< OUTPUT >>>")
            print(result.stdout.rstrip())
            if result.returncode != 0:
                print(result.stderr.rstrip(), file=sys.stderr)

    return code


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the zenjs CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as inline JSON instead of a file path.
        - `-o`, `--out`: Write the JavaScript to a file.
        - `-w`, `--write`: Write the JavaScript next to the input, with a `.js` suffix.
        - `--intrinsics`: JSON file of extra namespaced-call mappings.
        - `--entry`: Entry function name (default: main).
        - `--no-jsdoc`: Omit JSDoc type comments.
        - `-e`, `--exec`: Run the emitted program with Node.js.
        - `-p`, `--pretty`: Show banners around code and output.
        - `-v`, `--verbose`: Log emission progress to stderr.

    Returns:
        0 on success, 1 if the program could not be transpiled.
    """
    parser = argparse.ArgumentParser(
        prog="zenjs", description="Transpile a Zen AST (JSON) to JavaScript."
    )
    parser.add_argument(
        "source", nargs="?", help="JSON AST file, '-' for stdin, or JSON text (with -s)"
    )
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as JSON text"
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    target.add_argument(
        "-w", "--write", action="store_true", help="Write <source>.js next to the input"
    )
    parser.add_argument(
        "--intrinsics", metavar="FILE", help="JSON file of namespaced-call mappings"
    )
    parser.add_argument("--entry", default="main", help="Entry function (default: main)")
    parser.add_argument(
        "--no-jsdoc", dest="jsdoc", action="store_false", help="Omit JSDoc comments"
    )
    parser.add_argument(
        "-e", "--exec", dest="execute", action="store_true", help="Run output with node"
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show code/output with banners"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        run_zenjs(
            source=args.source,
            is_string=args.string,
            out=args.out,
            write=args.write,
            intrinsics=args.intrinsics,
            entry=args.entry,
            jsdoc=args.jsdoc,
            execute=args.execute,
            pretty=args.pretty,
        )
    except TranspileError as e:
        print(f"error[{e.kind}]: {e}", file=sys.stderr)
        return 1
    except IntrinsicConfigError as e:
        details = "".join(f"\n  {c}" for c in e.conflicts)
        print(f"error[IntrinsicConfigError]: {e}{details}", file=sys.stderr)
        return 1
    except (OSError, ValueError, TypeError) as e:
        print(f"error[{type(e).__name__}]: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
