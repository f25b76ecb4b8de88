#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/logger.py - Logging management for build_release
#

import os
from datetime import datetime

from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import APP_DESC, APP_NAME, APP_VERSION, LOG_DIR_BASE
from .translation_utils import _


class RichLogger:
    """Manages logs and formatted messages using the Rich library"""

    COLOR_MAP = {
        "cyan": "bright_cyan",
        "blue_dark": "blue",
        "medium_blue": "blue",
        "light_blue": "cyan",
        "white": "white",
        "red": "red",
        "yellow": "yellow",
        "green": "green",
        "orange": "yellow",
        "purple": "magenta",
        "dim": "dim",
        "bold": "bold",
    }

    def __init__(self, use_colors: bool = True, verbose: bool = False):
        self.use_colors = use_colors
        self.verbose = verbose
        self.log_file = None
        self.console = Console(no_color=not use_colors, highlight=False)

    def setup_log_file(self, project_name: str):
        """Sets up the log file for *project_name*"""
        if not project_name:
            return
        log_dir = os.path.join(LOG_DIR_BASE, project_name)
        os.makedirs(log_dir, exist_ok=True)
        self.log_file = os.path.join(log_dir, f"{APP_NAME}.log")

    def log(self, style: str, message: str):
        """Displays formatted message and saves to log"""
        rich_style = self.COLOR_MAP.get(style, "white") if self.use_colors else None

        # Messages carry paths and cargo output, never markup
        self.console.print(message, style=rich_style, markup=False)

        if self.log_file:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"[{timestamp}] {message}\n")

    def debug(self, message: str):
        """Logs *message* only in verbose mode"""
        if self.verbose:
            self.log("dim", message)

    def warn(self, message: str):
        self.log("yellow", _("Warning: {0}").format(message))

    def error(self, message: str):
        self.log("red", f"{_('ERROR')}: {message}")

    def draw_app_header(self):
        """Draws the stylized application header"""
        header = Text()
        header.append(f"{APP_NAME.upper()} v{APP_VERSION}\n", style="bold white on blue" if self.use_colors else None)
        header.append(APP_DESC, style="bright_cyan" if self.use_colors else None)

        panel = Panel(
            header,
            box=ROUNDED,
            border_style="blue" if self.use_colors else "none",
            padding=(0, 1),
            width=70,
            title="BigCommunity",
        )

        self.console.print(panel)

    def display_summary(self, title: str, data: list):
        """Displays a formatted summary in a Rich table"""
        table = Table(show_header=False, box=ROUNDED, border_style="blue", padding=(0, 1))
        table.add_column(_("Field"), style="white")
        table.add_column(_("Value"), style="bright_cyan")

        for key, value in data:
            table.add_row(key, Text(str(value)))

        panel = Panel(
            table,
            title=title,
            box=ROUNDED,
            border_style="blue",
            padding=(1, 1),
            width=70,
        )

        self.console.print(panel)
