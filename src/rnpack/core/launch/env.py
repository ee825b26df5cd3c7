"""Environment resolution for packager launches.

Three sources feed the environment, lowest to highest precedence:

- variables declared in the workspace env file (``KEY=VALUE`` lines)
- the current process environment, which shadows env file variables
- the explicit ``env`` mapping from the launch configuration, which always wins

The result is rebuilt on every call; the env file may change between launches.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Mapping

from rnpack.core.exceptions import EnvFileReadError

from .run_options import RunOptions

logger = logging.getLogger(__name__)

_BOM = "\ufeff"
# The value stops at a carriage return so CRLF files parse like LF files.
_LINE_RE = re.compile(r"^\s*([\w.\-]+)\s*=\s*([^\r\u2028\u2029]*)?\s*$", re.ASCII)
_EDGE_QUOTES_RE = re.compile(r"(^['\"]|['\"]\Z)")


def read_env_file(path: Path) -> str:
    """Read an env file as UTF-8 text with any leading BOM removed."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvFileReadError(f"Cannot read env file {path}: {exc}", path=path) from exc
    if text.startswith(_BOM):
        text = text[1:]
    return text


def _unquote(value: str) -> str:
    if len(value) > 0 and value[0] == '"' and value[-1] == '"':
        value = value.replace("\\n", "\n")
    return _EDGE_QUOTES_RE.sub("", value)


def parse_env_file(text: str, *, environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines, skipping keys already set in ``environ``.

    Lines that do not match are ignored. A variable set to an empty string
    in ``environ`` does not shadow the file value.
    """
    if environ is None:
        environ = os.environ
    env: dict[str, str] = {}
    for line in text.split("\n"):
        match = _LINE_RE.match(line)
        if match is None:
            continue
        key = match.group(1)
        if environ.get(key):
            continue
        env[key] = _unquote(match.group(2) or "")
    return env


def resolve_environment(
    run_options: RunOptions,
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the variables to pass to the packager process."""
    explicit = dict(run_options.env or {})
    if run_options.env_file is None:
        return explicit

    env = parse_env_file(read_env_file(run_options.env_file), environ=environ)
    logger.debug("Loaded %d variable(s) from %s", len(env), run_options.env_file)

    env.update(explicit)
    return env


__all__ = ["read_env_file", "parse_env_file", "resolve_environment"]
