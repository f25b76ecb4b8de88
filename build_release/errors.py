#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/errors.py - Error kinds raised by the release pipeline
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

from . import config
from .translation_utils import _


class BuildReleaseError(Exception):
    """Base class for every failure that aborts the pipeline"""

    stage = _("build release")
    exit_code = config.EXIT_UNEXPECTED

    def describe(self) -> str:
        """Returns 'stage: message' for display"""
        return f"{self.stage}: {self}"


class ProjectNotFoundError(BuildReleaseError):
    stage = _("project discovery")
    exit_code = config.EXIT_PROJECT_NOT_FOUND


class ManifestReadError(BuildReleaseError):
    stage = _("manifest loading")
    exit_code = config.EXIT_MANIFEST_READ


class ManifestParseError(BuildReleaseError):
    stage = _("manifest parsing")
    exit_code = config.EXIT_MANIFEST_PARSE


class ManifestValidationError(BuildReleaseError):
    stage = _("manifest validation")
    exit_code = config.EXIT_MANIFEST_INVALID


class VersionFormatError(BuildReleaseError):
    stage = _("version validation")
    exit_code = config.EXIT_VERSION_FORMAT


class ToolResolutionError(BuildReleaseError):
    stage = _("cargo resolution")
    exit_code = config.EXIT_TOOL_NOT_FOUND


class ToolValidationError(BuildReleaseError):
    stage = _("cargo validation")
    exit_code = config.EXIT_TOOL_INVALID


class SubprocessError(BuildReleaseError):
    """The build tool failed to start or exited with a non-zero status"""

    stage = _("cargo command")
    exit_code = config.EXIT_SUBPROCESS

    def __init__(self, message: str, returncode=None):
        super().__init__(message)
        self.returncode = returncode


class BuildCancelledError(SubprocessError):
    """The build tool was terminated because the run was cancelled or timed out"""

    stage = _("cargo command")
    exit_code = config.EXIT_CANCELLED


class BinaryNotFoundError(BuildReleaseError):
    stage = _("binary location")
    exit_code = config.EXIT_BINARY_NOT_FOUND


class PublishError(BuildReleaseError):
    stage = _("binary copy")
    exit_code = config.EXIT_PUBLISH
