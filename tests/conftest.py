import os
import socket
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'rnpack' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from rnpack.core.log import OutputChannelLogger, reset_stdlib_logging_for_tests  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_rnpack_state(monkeypatch):
    """Drop RNPACK_* overrides from the developer shell and reset channels."""
    for key in list(os.environ):
        if key.startswith("RNPACK_"):
            monkeypatch.delenv(key, raising=False)
    OutputChannelLogger.dispose_all()
    yield
    OutputChannelLogger.dispose_all()
    reset_stdlib_logging_for_tests()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """An empty workspace directory that doubles as the project root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])
