#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/validator.py - Manifest completeness and version filename checks
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

from .config import FORBIDDEN_VERSION_CHARS, MANIFEST_FILENAME
from .errors import ManifestValidationError, VersionFormatError
from .translation_utils import _


def has_forbidden_chars(value: str) -> bool:
    return any(char in FORBIDDEN_VERSION_CHARS for char in value)


def has_control_chars(value: str) -> bool:
    return any(ord(char) < 32 or ord(char) == 127 for char in value)


def validate_manifest(manifest):
    """Fails when package.name or package.version is empty, or the name is no plain file name"""
    if not manifest.name:
        raise ManifestValidationError(_("package.name is empty in {0}").format(MANIFEST_FILENAME))
    if not manifest.version:
        raise ManifestValidationError(_("package.version is empty in {0}").format(MANIFEST_FILENAME))

    # The name becomes the published file name and the log directory name
    name = manifest.name
    if name in (".", "..") or has_forbidden_chars(name) or has_control_chars(name):
        raise ManifestValidationError(_("package.name is not a valid file name: {0!r}").format(name))


def validate_version_string(version: str):
    """Rejects versions that cannot safely be embedded in a file name"""
    if not version:
        raise VersionFormatError(_("version string is empty"))

    if has_forbidden_chars(version):
        raise VersionFormatError(_("version contains forbidden characters: {0!r}").format(version))

    if has_control_chars(version):
        raise VersionFormatError(_("version contains control character: {0!r}").format(version))
