from __future__ import annotations

from pathlib import Path

import pytest

from rnpack.core.exceptions import EnvFileReadError
from rnpack.core.launch import RunOptions, parse_env_file, resolve_environment


def _options(workspace: Path, *, env_file: Path | None = None, env=None) -> RunOptions:
    return RunOptions(
        platform="android",
        project_root=workspace,
        workspace_root=workspace,
        env_file=env_file,
        env=env,
    )


def _write_env(workspace: Path, content: str) -> Path:
    path = workspace / ".env"
    path.write_text(content, encoding="utf-8")
    return path


def test_without_env_file_returns_explicit_env(workspace: Path) -> None:
    opts = _options(workspace, env={"A": "1", "B": "two"})
    assert resolve_environment(opts, environ={}) == {"A": "1", "B": "two"}


def test_without_env_file_or_env_returns_empty_mapping(workspace: Path) -> None:
    assert resolve_environment(_options(workspace), environ={}) == {}


def test_double_quoted_value_unescapes_newlines_and_strips_quotes(workspace: Path) -> None:
    env_file = _write_env(workspace, 'FOO="bar\\nbaz"\n')
    result = resolve_environment(_options(workspace, env_file=env_file), environ={})
    assert result == {"FOO": "bar\nbaz"}


def test_single_quoted_value_keeps_backslash_n(workspace: Path) -> None:
    env_file = _write_env(workspace, "FOO='bar\\nbaz'\n")
    result = resolve_environment(_options(workspace, env_file=env_file), environ={})
    assert result == {"FOO": "bar\\nbaz"}


def test_process_environment_shadows_file_values(workspace: Path) -> None:
    env_file = _write_env(workspace, "FOO=1\nBAR=2\n")
    result = resolve_environment(_options(workspace, env_file=env_file), environ={"FOO": "2"})
    assert result == {"BAR": "2"}


def test_empty_process_variable_does_not_shadow_file_value(workspace: Path) -> None:
    env_file = _write_env(workspace, "FOO=1\n")
    result = resolve_environment(_options(workspace, env_file=env_file), environ={"FOO": ""})
    assert result == {"FOO": "1"}


def test_explicit_env_overrides_file_value(workspace: Path) -> None:
    env_file = _write_env(workspace, "FOO=1\n")
    result = resolve_environment(
        _options(workspace, env_file=env_file, env={"FOO": "2"}),
        environ={},
    )
    assert result == {"FOO": "2"}


def test_explicit_env_wins_even_when_process_environment_has_key(workspace: Path) -> None:
    env_file = _write_env(workspace, "FOO=1\n")
    result = resolve_environment(
        _options(workspace, env_file=env_file, env={"FOO": '"quoted"'}),
        environ={"FOO": "from-shell"},
    )
    assert result == {"FOO": '"quoted"'}


def test_leading_bom_is_stripped(workspace: Path) -> None:
    path = workspace / ".env"
    path.write_bytes("\ufeffFIRST=1\nSECOND=2\n".encode("utf-8"))
    result = resolve_environment(_options(workspace, env_file=path), environ={})
    assert result == {"FIRST": "1", "SECOND": "2"}


def test_malformed_and_blank_lines_are_skipped() -> None:
    text = "\n".join(
        [
            "# comment",
            "",
            "export SKIPPED=1",
            "no equals sign here",
            "=missing-key",
            "  SPACED  =  value",
            "dotted.key-name=ok",
            "EMPTY=",
        ]
    )
    assert parse_env_file(text, environ={}) == {
        "SPACED": "value",
        "dotted.key-name": "ok",
        "EMPTY": "",
    }


def test_one_entry_per_well_formed_line_with_last_duplicate_winning() -> None:
    text = "A=1\nB=2\nA=3\n"
    assert parse_env_file(text, environ={}) == {"A": "3", "B": "2"}


def test_mismatched_quotes_strip_both_edges_without_unescaping() -> None:
    assert parse_env_file("FOO='abc\"", environ={}) == {"FOO": "abc"}
    assert parse_env_file('BAR="a\\nb', environ={}) == {"BAR": "a\\nb"}


def test_only_one_quote_is_stripped_from_each_edge() -> None:
    assert parse_env_file("FOO=\"'x'\"", environ={}) == {"FOO": "'x'"}


def test_missing_env_file_raises_env_file_read_error(workspace: Path) -> None:
    missing = workspace / "missing.env"
    with pytest.raises(EnvFileReadError) as excinfo:
        resolve_environment(_options(workspace, env_file=missing), environ={})
    assert isinstance(excinfo.value, OSError)
    assert excinfo.value.path == missing
    assert excinfo.value.context["path"] == str(missing)


def test_non_utf8_env_file_raises_env_file_read_error(workspace: Path) -> None:
    path = workspace / ".env"
    path.write_bytes(b"FOO=\xff\xfe\n")
    with pytest.raises(EnvFileReadError):
        resolve_environment(_options(workspace, env_file=path), environ={})


def test_resolution_is_repeatable_and_reflects_file_changes(workspace: Path) -> None:
    env_file = _write_env(workspace, "FOO=1\n")
    opts = _options(workspace, env_file=env_file, env={"BAR": "x"})

    first = resolve_environment(opts, environ={})
    second = resolve_environment(opts, environ={})
    assert first == second == {"FOO": "1", "BAR": "x"}

    env_file.write_text("FOO=changed\n", encoding="utf-8")
    assert resolve_environment(opts, environ={}) == {"FOO": "changed", "BAR": "x"}


def test_defaults_to_os_environ(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RNPACK_TEST_SHADOWED", "shell")
    env_file = _write_env(workspace, "RNPACK_TEST_SHADOWED=file\nRNPACK_TEST_FRESH=file\n")
    monkeypatch.delenv("RNPACK_TEST_FRESH", raising=False)
    result = resolve_environment(_options(workspace, env_file=env_file))
    assert result == {"RNPACK_TEST_FRESH": "file"}


def test_crlf_line_endings_parse_like_lf() -> None:
    text = 'FOO=bar\r\nQUOTED="a\\nb"\r\nSINGLE=\'x\'\r\nEMPTY=\r\n'
    assert parse_env_file(text, environ={}) == {
        "FOO": "bar",
        "QUOTED": "a\nb",
        "SINGLE": "x",
        "EMPTY": "",
    }


def test_crlf_env_file_through_resolver(workspace: Path) -> None:
    path = workspace / ".env"
    path.write_bytes(b'API_URL="http://x"\r\nMODE=dev\r\n')
    result = resolve_environment(_options(workspace, env_file=path), environ={})
    assert result == {"API_URL": "http://x", "MODE": "dev"}


def test_carriage_return_inside_value_skips_the_line() -> None:
    assert parse_env_file("FOO=a\rb\nBAR=1\n", environ={}) == {"BAR": "1"}
