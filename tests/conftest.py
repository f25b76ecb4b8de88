import os
import stat
import sys
import textwrap

import pytest

from build_release.logger import RichLogger
from build_release.manifest import ProjectManifest
from build_release.pipeline import BuildOptions, PipelineContext
from build_release.publisher import platform_executable_extension


@pytest.fixture
def logger():
    return RichLogger(use_colors=False)


@pytest.fixture
def make_project(tmp_path):
    """Creates a project directory with a Cargo.toml"""

    def _make(name="clicker", version="1.2.3", root=None, extra=""):
        project = root or tmp_path / "project"
        project.mkdir(parents=True, exist_ok=True)
        (project / "Cargo.toml").write_text(
            f'[package]\nname = "{name}"\nversion = "{version}"\nedition = "2021"\n{extra}',
            encoding="utf-8",
        )
        return project

    return _make


@pytest.fixture
def make_context(tmp_path):
    """Builds a PipelineContext without touching cargo"""

    def _make(project_root=None, name="clicker", version="1.2.3", **options):
        return PipelineContext(
            options=BuildOptions(**options),
            project_root=str(project_root or tmp_path),
            manifest=ProjectManifest(name=name, version=version),
            tool_path=str(tmp_path / "no-such-cargo"),
            tool_version="cargo 1.80.0",
        )

    return _make


@pytest.fixture
def write_binary():
    """Writes target/release/<name> with *size* pseudo-random bytes"""

    def _write(project_root, name="clicker", size=5000):
        release_dir = project_root / "target" / "release"
        release_dir.mkdir(parents=True, exist_ok=True)
        binary = release_dir / (name + platform_executable_extension())
        binary.write_bytes(os.urandom(size))
        return binary

    return _write


@pytest.fixture
def fake_cargo(tmp_path):
    """Writes an executable shell script that behaves like a small cargo.

    Every invocation appends its arguments to ``calls`` so tests can check
    whether cargo ran at all.
    """
    if sys.platform.startswith("win"):
        pytest.skip("fake cargo is a POSIX shell script")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    calls = tmp_path / "cargo-calls.log"

    def _make(artifact=None, name="clicker", fail=False, sleep=None, version_output="cargo 1.80.0 (fake 2024-07-01)",
              filename="cargo", background=None):
        build_steps = []
        if background:
            # Leaves a process behind that inherits stdout, like a compiler cache server
            build_steps.append(f"(sleep {background}) &")
        if fail:
            build_steps.append('echo "error[E0425]: cannot find value x in this scope"')
            build_steps.append('echo "error: could not compile clicker" >&2')
            build_steps.append("exit 101")
        if sleep:
            build_steps.append(f"exec sleep {sleep}")
        build_steps.append("mkdir -p target/release")
        if artifact is not None:
            build_steps.append(f'cp "{artifact}" "target/release/{name}"')
        build_steps.append('echo "   Compiling clicker v1.2.3"')

        script = textwrap.dedent(
            """\
            #!/bin/sh
            echo "$*" >> "{calls}"
            case "$1" in
              --version)
                echo "{version_output}"
                ;;
              clean)
                rm -rf target
                ;;
              build)
            {build}
                ;;
              *)
                echo "unknown command $1" >&2
                exit 1
                ;;
            esac
            exit 0
            """
        ).format(
            calls=calls,
            version_output=version_output,
            build="\n".join("    " + step for step in build_steps),
        )

        path = bin_dir / filename
        path.write_text(script, encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    _make.calls = calls
    _make.bin_dir = bin_dir
    return _make
