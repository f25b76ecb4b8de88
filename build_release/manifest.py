#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/manifest.py - Project root discovery and Cargo.toml reading
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

import os
from dataclasses import dataclass

import toml

from .config import MANIFEST_FILENAME
from .errors import ManifestParseError, ManifestReadError, ProjectNotFoundError
from .translation_utils import _


@dataclass(frozen=True)
class ProjectManifest:
    """Name and version of the [package] section"""

    name: str
    version: str


def path_exists(path: str) -> bool:
    """True unless *path* is known not to exist.

    A path that cannot be stat'ed for another reason (permissions, I/O) is
    treated as present so the caller reports the real problem when it reads it.
    """
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError:
        return True
    return True


def locate_project_root(start_dir=None) -> str:
    """Walks upward from *start_dir* (default: cwd) until Cargo.toml is found"""
    try:
        current_dir = os.path.abspath(start_dir if start_dir is not None else os.getcwd())
    except OSError as exc:
        raise ProjectNotFoundError(_("Cannot determine working directory: {0}").format(exc)) from exc

    while True:
        if path_exists(os.path.join(current_dir, MANIFEST_FILENAME)):
            return current_dir

        parent_dir = os.path.dirname(current_dir)
        if parent_dir == current_dir:
            break
        current_dir = parent_dir

    raise ProjectNotFoundError(
        _("{0} not found in current or parent directories").format(MANIFEST_FILENAME)
    )


def _string_field(package: dict, key: str) -> str:
    value = package.get(key, "")
    if not isinstance(value, str):
        raise ManifestParseError(
            _("package.{0} must be a string in {1}, got {2}").format(key, MANIFEST_FILENAME, type(value).__name__)
        )
    return value


def load_manifest(project_root: str) -> ProjectManifest:
    """Reads package.name and package.version from the project's Cargo.toml"""
    manifest_path = os.path.join(project_root, MANIFEST_FILENAME)

    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestReadError(_("read {0}: {1}").format(MANIFEST_FILENAME, exc)) from exc

    try:
        data = toml.loads(content)
    except toml.TomlDecodeError as exc:
        raise ManifestParseError(_("parse {0}: {1}").format(MANIFEST_FILENAME, exc)) from exc

    package = data.get("package", {})
    if not isinstance(package, dict):
        raise ManifestParseError(_("[package] in {0} is not a table").format(MANIFEST_FILENAME))

    return ProjectManifest(name=_string_field(package, "name"), version=_string_field(package, "version"))
