"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

import emimport.cli as cli_module
from emimport.cli import _build_parser, _split_compiler_args, main
from emimport.emitter import InvariantViolation
from emimport.frontend.memory import MemoryFrontend
from tests._fixtures.trees import function, unit, widget_unit


def test_cli_accepts_output_and_build_path() -> None:
    parser = _build_parser()
    args = parser.parse_args(["-o", "out.txt", "-p", "build", "a.cpp", "b.cpp"])
    assert args.output == Path("out.txt")
    assert args.build_path == Path("build")
    assert args.sources == [Path("a.cpp"), Path("b.cpp")]


def test_cli_collects_repeated_extra_args() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--extra-arg=-DA", "--extra-arg=-DB", "a.cpp"])
    assert args.extra_args == ["-DA", "-DB"]


def test_cli_rejects_unknown_member_policy() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--members", "some", "a.cpp"])


def test_split_compiler_args_at_double_dash() -> None:
    own, compiler = _split_compiler_args(["-v", "a.cpp", "--", "-std=c++17", "-Iinc"])
    assert own == ["-v", "a.cpp"]
    assert compiler == ["-std=c++17", "-Iinc"]


def _install_frontend(monkeypatch: pytest.MonkeyPatch, units, captured: dict) -> None:
    def _factory(**kwargs):
        captured.update(kwargs)
        return MemoryFrontend(units)

    monkeypatch.setattr(cli_module, "ClangFrontend", _factory)


def test_main_writes_descriptors_to_output_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    captured: dict = {}
    _install_frontend(monkeypatch, {Path("widget.cpp"): widget_unit()}, captured)
    output = tmp_path / "imports.txt"

    main(
        [
            "--config",
            str(tmp_path),
            "-o",
            str(output),
            "--extra-arg=-DX",
            "widget.cpp",
            "--",
            "-std=c++17",
        ]
    )

    assert output.read_text(encoding="utf-8").splitlines() == [
        '(constructor "Widget" _ZN6WidgetC1Ei ("int") "void")',
        '(method "Widget" _ZN6Widget3doXEif "doIt" ("int" "float") "void")',
        '(func freeFn "doFree" () "int")',
    ]
    assert captured["args"] == ["-DX", "-std=c++17"]


def test_main_defaults_to_stdout(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict = {}
    root = unit(function("freeFn", marker="EM_IMPORT:func:doFree", returns="int"))
    _install_frontend(monkeypatch, {Path("free.c"): root}, captured)

    main(["--config", str(tmp_path), "free.c"])

    assert capsys.readouterr().out == '(func freeFn "doFree" () "int")\n'


def test_main_exits_with_code_two_on_invariant_violation(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    captured: dict = {}
    _install_frontend(monkeypatch, {Path("bad.cpp"): unit()}, captured)

    def _scan(self, sources, sink):
        raise InvariantViolation("directive of kind 'method' has no enclosing class")

    monkeypatch.setattr(cli_module.Scanner, "scan", _scan)

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "-o", str(tmp_path / "out.txt"), "bad.cpp"])
    assert excinfo.value.code == 2


def test_main_exits_with_code_one_on_frontend_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    captured: dict = {}
    _install_frontend(monkeypatch, {}, captured)

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "-o", str(tmp_path / "out.txt"), "missing.cpp"])
    assert excinfo.value.code == 1


def test_main_applies_config_member_policy(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / ".emimport.yml").write_text("members: all\n", encoding="utf-8")
    captured: dict = {}
    _install_frontend(monkeypatch, {Path("widget.cpp"): widget_unit()}, captured)
    output = tmp_path / "imports.txt"

    main(["--config", str(tmp_path), "-o", str(output), "widget.cpp"])

    lines = output.read_text(encoding="utf-8").splitlines()
    assert '(method "Widget" _ZN6Widget6hiddenEv "hidden" () "void")' in lines


def test_main_writes_log_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict = {}
    _install_frontend(monkeypatch, {Path("widget.cpp"): widget_unit()}, captured)
    log_file = tmp_path / "emimport.log"

    main(
        [
            "--config",
            str(tmp_path),
            "-o",
            str(tmp_path / "imports.txt"),
            "--log-file",
            str(log_file),
            "widget.cpp",
        ]
    )

    text = log_file.read_text(encoding="utf-8")
    assert "Scanned widget.cpp: 3 descriptor(s)" in text
    assert "Wrote 3 descriptor(s) from 1 file(s)" in text
