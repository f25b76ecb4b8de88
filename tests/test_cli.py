import json
import os
from pathlib import Path

import pytest

from build_release import config
from build_release.build_release import BuildRelease
from build_release.logger import RichLogger
from build_release.main import main
from build_release.publisher import platform_executable_extension
from build_release.settings import Settings

EXT = platform_executable_extension()


@pytest.fixture
def settings(tmp_path):
    s = Settings(config_dir=str(tmp_path / "config"))
    s.settings["log_to_file"] = False
    s.settings["show_header"] = False
    return s


@pytest.fixture
def cli(settings):
    def _run(argv, start_dir):
        app = BuildRelease(argv, logger=RichLogger(use_colors=False), settings=settings, start_dir=str(start_dir))
        return app, app.run()

    return _run


def test_successful_release_exit_code(cli, make_project, fake_cargo, tmp_path, capsys):
    project = make_project()
    artifact = tmp_path / "artifact"
    artifact.write_bytes(b"\x7fELF" * 1250)
    cargo = fake_cargo(artifact=artifact)

    _app, code = cli(["--cargo-path", str(cargo)], project)

    assert code == config.EXIT_SUCCESS
    assert (project / "target" / "release" / f"clicker-v1.2.3{EXT}").stat().st_size == 5000
    assert "Release published" in capsys.readouterr().out


@pytest.mark.parametrize(
    "version,expected",
    [("1.2.3/evil", config.EXIT_VERSION_FORMAT), ("", config.EXIT_MANIFEST_INVALID)],
)
def test_invalid_manifest_exit_codes(cli, make_project, fake_cargo, version, expected):
    project = make_project(version=version)
    cargo = fake_cargo()

    _app, code = cli(["--cargo-path", str(cargo)], project)

    assert code == expected
    assert not fake_cargo.calls.exists()


def test_unsafe_name_exit_code(cli, make_project, fake_cargo):
    project = make_project(name="../evil")
    cargo = fake_cargo()

    _app, code = cli(["--cargo-path", str(cargo)], project)

    assert code == config.EXIT_MANIFEST_INVALID
    assert not fake_cargo.calls.exists()


def test_project_not_found_exit_code(cli, tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()

    _app, code = cli([], empty)

    assert code == config.EXIT_PROJECT_NOT_FOUND


def test_unparseable_manifest_exit_code(cli, tmp_path):
    (tmp_path / "Cargo.toml").write_text("[package\n", encoding="utf-8")

    _app, code = cli([], tmp_path)

    assert code == config.EXIT_MANIFEST_PARSE


def test_tool_validation_exit_code(cli, make_project, fake_cargo):
    project = make_project()
    impostor = fake_cargo(version_output="gcc 13.2", filename="gcc")

    _app, code = cli(["--cargo-path", str(impostor)], project)

    assert code == config.EXIT_TOOL_INVALID


def test_tool_not_on_path_exit_code(cli, make_project, tmp_path, monkeypatch):
    project = make_project()
    empty_bin = tmp_path / "empty-bin"
    empty_bin.mkdir()
    monkeypatch.setenv("PATH", str(empty_bin))

    _app, code = cli([], project)

    assert code == config.EXIT_TOOL_NOT_FOUND


def test_build_failure_exit_code(cli, make_project, fake_cargo, capsys):
    project = make_project()
    cargo = fake_cargo(fail=True)

    _app, code = cli(["--cargo-path", str(cargo), "--quiet"], project)

    assert code == config.EXIT_SUBPROCESS
    captured = capsys.readouterr()
    assert captured.err.count("error[E0425]") == 1
    assert "Build failed" in captured.out


def test_binary_not_found_exit_code(cli, make_project, fake_cargo):
    project = make_project()
    cargo = fake_cargo(artifact=None)

    _app, code = cli(["--cargo-path", str(cargo)], project)

    assert code == config.EXIT_BINARY_NOT_FOUND


def test_publish_failure_exit_code(cli, make_project, fake_cargo, tmp_path):
    project = make_project()
    artifact = tmp_path / "artifact"
    artifact.write_bytes(b"binary")
    cargo = fake_cargo(artifact=artifact)
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way", encoding="utf-8")

    _app, code = cli(["--cargo-path", str(cargo), "-o", str(blocker / "out")], project)

    assert code == config.EXIT_PUBLISH


def test_exit_codes_are_distinct():
    codes = [
        config.EXIT_PROJECT_NOT_FOUND,
        config.EXIT_MANIFEST_READ,
        config.EXIT_MANIFEST_PARSE,
        config.EXIT_MANIFEST_INVALID,
        config.EXIT_VERSION_FORMAT,
        config.EXIT_TOOL_NOT_FOUND,
        config.EXIT_TOOL_INVALID,
        config.EXIT_SUBPROCESS,
        config.EXIT_CANCELLED,
        config.EXIT_BINARY_NOT_FOUND,
        config.EXIT_PUBLISH,
    ]
    assert len(set(codes)) == len(codes)
    assert config.EXIT_SUCCESS not in codes


def test_settings_supply_defaults_and_flags_override(settings, tmp_path):
    settings.settings.update({"verbose": True, "clean": True, "output_dir": "dist", "timeout": 120})

    app = BuildRelease(["-q", "--dry-run"], logger=RichLogger(use_colors=False), settings=settings)

    assert app.options.verbose is False
    assert app.options.clean is True
    assert app.options.output_dir == "dist"
    assert app.options.timeout == 120.0
    assert app.options.dry_run is True


def test_save_defaults_persists_given_flags(settings, make_project, fake_cargo):
    project = make_project(version="bad/version")
    cargo = fake_cargo()
    app = BuildRelease(
        ["--save-defaults", "--clean", "--cargo-path", str(cargo), "--timeout", "60"],
        logger=RichLogger(use_colors=False),
        settings=settings,
        start_dir=str(project),
    )

    app.run()

    saved = json.loads(Path(settings.config_file).read_text(encoding="utf-8"))
    assert saved["clean"] is True
    assert saved["cargo_path"] == str(cargo)
    assert saved["timeout"] == 60.0
    assert saved["verbose"] is False


def test_dry_run_cli_writes_nothing(cli, settings, make_project, fake_cargo, tmp_path, capsys):
    project = make_project()
    cargo = fake_cargo()
    out = tmp_path / "dist"

    _app, code = cli(["--cargo-path", str(cargo), "--dry-run", "--save-defaults", "--clean", "-o", str(out)], project)

    assert code == config.EXIT_SUCCESS
    assert not os.path.exists(settings.config_file)
    assert "[DRY-RUN] Would save defaults" in capsys.readouterr().out
    assert not out.exists()
    assert not (project / "target").exists()


def test_verbose_and_quiet_are_exclusive(settings):
    with pytest.raises(SystemExit) as excinfo:
        BuildRelease(["-v", "-q"], settings=settings)
    assert excinfo.value.code == 2


def test_negative_timeout_is_rejected(settings):
    with pytest.raises(SystemExit) as excinfo:
        BuildRelease(["--timeout", "-1"], settings=settings)
    assert excinfo.value.code == 2


def test_help_lists_options(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "--dry-run" in out
    assert "--cargo-path" in out


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert config.APP_VERSION in capsys.readouterr().out


def test_main_ignores_wrongly_typed_saved_timeout(monkeypatch, tmp_path, make_project, fake_cargo):
    project = make_project()
    cargo = fake_cargo()
    home = tmp_path / "home"
    config_dir = home / ".config" / "build-release"
    config_dir.mkdir(parents=True)
    (config_dir / "config.json").write_text(
        json.dumps({"timeout": "ten", "cargo_path": str(cargo), "log_to_file": False}), encoding="utf-8"
    )
    monkeypatch.chdir(project)
    monkeypatch.setattr(os.path, "expanduser", lambda path: str(home / path.lstrip("~/")))

    with pytest.raises(SystemExit) as excinfo:
        main(["--dry-run", "--nocolor"])

    assert excinfo.value.code == config.EXIT_SUCCESS


@pytest.mark.parametrize("timeout", ["ten", -3])
def test_saved_timeout_must_be_a_non_negative_number(settings, tmp_path, timeout):
    Path(settings.config_file).parent.mkdir(parents=True)
    Path(settings.config_file).write_text(json.dumps({"timeout": timeout}), encoding="utf-8")

    app = BuildRelease([], logger=RichLogger(use_colors=False), settings=Settings(config_dir=settings.config_dir))

    assert app.options.timeout is None


def test_main_exits_with_pipeline_code(monkeypatch, tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    monkeypatch.chdir(empty)
    monkeypatch.setattr(os.path, "expanduser", lambda path: str(tmp_path / "home" / path.lstrip("~/")))

    with pytest.raises(SystemExit) as excinfo:
        main(["--nocolor"])

    assert excinfo.value.code == config.EXIT_PROJECT_NOT_FOUND
