#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/settings.py - User settings management
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

import json
import os

from .config import CONFIG_DIR, CONFIG_FILENAME
from .translation_utils import _


class Settings:
    """Manages user defaults with persistent storage"""

    def __init__(self, config_dir=None, logger=None):
        # Default path: ~/.config/build-release/config.json
        self.config_dir = os.path.expanduser(config_dir or CONFIG_DIR)
        self.config_file = os.path.join(self.config_dir, CONFIG_FILENAME)
        self.logger = logger
        self.settings = self.load()

    def load(self):
        """Load settings from file or return defaults"""
        defaults = self.get_defaults()
        if not os.path.exists(self.config_file):
            return defaults

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                saved = json.load(f)
        except (OSError, ValueError) as e:
            self._warn(_("Ignoring unreadable settings file {0}: {1}").format(self.config_file, e))
            return defaults

        if not isinstance(saved, dict):
            self._warn(_("Ignoring settings file {0}: not a JSON object").format(self.config_file))
            return defaults

        # Merge with defaults to ensure new keys exist
        for key, value in saved.items():
            if key not in defaults:
                continue
            if not self.is_valid_value(defaults[key], value):
                self._warn(_("Ignoring setting {0}: invalid value {1!r}").format(key, value))
                continue
            defaults[key] = value
        return defaults

    @staticmethod
    def is_valid_value(default, value):
        """True when *value* has the type of *default* (numbers must not be negative)"""
        if isinstance(default, bool):
            return isinstance(value, bool)
        if isinstance(default, (int, float)):
            return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
        return isinstance(value, type(default))

    def get_defaults(self):
        """Return default settings"""
        return {
            # === BUILD ===
            # Stream cargo output live instead of buffering it
            "verbose": False,

            # Run "cargo clean" before building
            "clean": False,

            # Output directory (empty = target/release of the project)
            "output_dir": "",

            # Explicit cargo executable (empty = search PATH)
            "cargo_path": "",

            # Build timeout in seconds (0 = no limit)
            "timeout": 0,

            # Write <binary>.sha256 next to the published binary
            "checksum": False,

            # === UI ===
            # Append messages to the log file under the temp directory
            "log_to_file": True,

            # Draw the application header panel
            "show_header": True,
        }

    def save(self):
        """Save settings to file"""
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings, f, indent=2)
            return True
        except OSError as e:
            self._warn(_("Error saving settings: {0}").format(e))
            return False

    def get(self, key, default=None):
        """Get setting value"""
        return self.settings.get(key, default)

    def update(self, values: dict):
        """Set several values and save once"""
        self.settings.update(values)
        return self.save()

    def _warn(self, message):
        if self.logger:
            self.logger.warn(message)
