import sys
import types

import pytest

from jusmind import cli


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "jusmind"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


def test_version_command(capsys):
    code = cli.main(["--version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "0.0-test"


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])
    captured = capsys.readouterr()
    assert code == 2
    assert "Usage: jusmind" in captured.out
    assert "Available commands:" in captured.out


def test_help_flag_shows_usage(capsys):
    code = cli.main(["-h"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage: jusmind" in captured.out


def test_list_outputs_command_table(capsys):
    code = cli.main(["list"])
    captured = capsys.readouterr()
    assert code == 0
    for name in ("init", "quiz", "chat", "lesson", "catalog"):
        assert name in captured.out
    assert "(interactive)" in captured.out


def test_help_known_command(capsys):
    code = cli.main(["help", "quiz"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Run `jusmind quiz --help`" in captured.out


def test_help_unknown_command(capsys):
    code = cli.main(["help", "missing"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'missing'." in captured.err


def test_unknown_command_returns_error(capsys):
    code = cli.main(["bogus"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'bogus'." in captured.err


def test_dispatch_runs_module_main_with_prog_name(monkeypatch):
    seen = {}

    def fake_main(argv):
        seen["argv"] = argv
        seen["sys_argv"] = list(sys.argv)
        return 3

    monkeypatch.setattr(
        cli, "import_module", lambda name: types.SimpleNamespace(main=fake_main)
    )
    original = list(sys.argv)

    code = cli.main(["catalog", "--search", "civil"])

    assert code == 3
    assert seen["argv"] == ["--search", "civil"]
    assert seen["sys_argv"] == ["jusmind catalog", "--search", "civil"]
    assert sys.argv == original


@pytest.mark.parametrize(
    "exit_code, expected",
    [(None, 0), (4, 4), ("fatal", 1)],
)
def test_dispatch_normalizes_system_exit(monkeypatch, capsys, exit_code, expected):
    def fake_main(argv):
        raise SystemExit(exit_code)

    monkeypatch.setattr(
        cli, "import_module", lambda name: types.SimpleNamespace(main=fake_main)
    )

    assert cli.main(["lesson", "x"]) == expected
    if exit_code == "fatal":
        assert "fatal" in capsys.readouterr().err


def test_every_command_module_exposes_main():
    for spec in cli.COMMANDS.values():
        module = __import__(spec.module, fromlist=["main"])
        assert callable(module.main)
