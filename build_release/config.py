#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/config.py - Configuration constants for build_release
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

import os
import tempfile

from . import __version__
from .translation_utils import _

# Project layout
MANIFEST_FILENAME = "Cargo.toml"                # Manifest searched while walking upward
RELEASE_TARGET_DIR = os.path.join("target", "release")
TEMP_FILE_SUFFIX = ".tmp"                       # Suffix of the transient publish file
CHECKSUM_SUFFIX = ".sha256"

# Build tool
TOOL_NAME = "cargo"
TOOL_VERSION_PREFIX = "cargo "                  # Expected start of "cargo --version"
TOOL_VERSION_TIMEOUT = 30                       # Seconds allowed for the version query
CLEAN_ARGS = ["clean"]
BUILD_ARGS = ["build", "--release"]

# Subprocess supervision
POLL_INTERVAL = 0.1                             # Seconds between cancellation checks
TERMINATE_GRACE = 5                             # Seconds before escalating to kill()
DRAIN_GRACE = 1                                 # Seconds to wait for the output reader after exit

# Copy buffer for publishing
COPY_CHUNK_SIZE = 1024 * 1024

# Characters never allowed in a version string used inside a filename
FORBIDDEN_VERSION_CHARS = '/\\:"<>|?*\x00'

# Log directory
LOG_DIR_BASE = os.path.join(tempfile.gettempdir(), "build-release")

# User settings location
CONFIG_DIR = "~/.config/build-release"
CONFIG_FILENAME = "config.json"

# Exit codes, one per failure kind
EXIT_SUCCESS = 0
EXIT_UNEXPECTED = 1
EXIT_PROJECT_NOT_FOUND = 2
EXIT_MANIFEST_READ = 3
EXIT_MANIFEST_PARSE = 4
EXIT_MANIFEST_INVALID = 5
EXIT_VERSION_FORMAT = 6
EXIT_TOOL_NOT_FOUND = 7
EXIT_TOOL_INVALID = 8
EXIT_SUBPROCESS = 9
EXIT_CANCELLED = 10
EXIT_BINARY_NOT_FOUND = 11
EXIT_PUBLISH = 12

# Script version
APP_VERSION = __version__
APP_NAME = "build-release"
APP_DESC = _("Builds a Cargo project in release mode and publishes a version-stamped binary.")
