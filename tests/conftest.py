import shutil
import subprocess
from collections.abc import Callable

import pytest

from zenjs.emitters.js_emitter import JavaScriptEmitter


@pytest.fixture
def emitter() -> JavaScriptEmitter:
    return JavaScriptEmitter()


@pytest.fixture
def run_node() -> Callable[[str], str]:
    """Runs JavaScript with Node.js and returns its stdout; skips when node is absent."""
    node = shutil.which("node")
    if node is None:
        pytest.skip("node is not installed")

    def _run(code: str) -> str:
        result = subprocess.run(
            [node], input=code, capture_output=True, text=True, check=False, timeout=30
        )
        assert result.returncode == 0, result.stderr
        return result.stdout

    return _run
