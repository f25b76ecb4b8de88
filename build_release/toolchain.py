#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/toolchain.py - Locates and verifies the cargo executable
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

import os
import shutil
import subprocess

from .config import TOOL_NAME, TOOL_VERSION_PREFIX, TOOL_VERSION_TIMEOUT
from .errors import ToolResolutionError, ToolValidationError
from .translation_utils import _


def resolve_tool(explicit_path=None) -> str:
    """Returns the absolute path of the build tool.

    An explicit path is only made absolute; whether it runs is checked by
    validate_tool(). Without one the executable search path is used.
    """
    if explicit_path:
        if "\x00" in explicit_path:
            raise ToolResolutionError(_("invalid {0} path: {1!r}").format(TOOL_NAME, explicit_path))
        try:
            return os.path.abspath(os.path.expanduser(explicit_path))
        except (OSError, ValueError) as exc:
            raise ToolResolutionError(_("resolve {0} path: {1}").format(TOOL_NAME, exc)) from exc

    found = shutil.which(TOOL_NAME)
    if not found:
        raise ToolResolutionError(_("{0} not found in PATH").format(TOOL_NAME))
    return os.path.abspath(found)


def validate_tool(tool_path: str) -> str:
    """Runs '<tool> --version' and checks it identifies itself as cargo.

    Returns the first line of the version output.
    """
    try:
        result = subprocess.run(
            [tool_path, "--version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            encoding="utf-8",
            errors="replace",
            timeout=TOOL_VERSION_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ToolValidationError(_("unable to execute {0} --version: {1}").format(tool_path, exc)) from exc

    if result.returncode != 0:
        raise ToolValidationError(
            _("{0} --version exited with code {1}").format(tool_path, result.returncode)
        )

    output = result.stdout or ""
    if not output.startswith(TOOL_VERSION_PREFIX):
        raise ToolValidationError(_("invalid {0} binary: {1}").format(TOOL_NAME, tool_path))

    return output.splitlines()[0].strip()
