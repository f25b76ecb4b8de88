#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/build_release.py - Command line front end of the release pipeline

import argparse
import sys
import threading

from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import APP_DESC, APP_NAME, APP_VERSION, EXIT_SUCCESS, RELEASE_TARGET_DIR, TOOL_NAME
from .errors import BuildReleaseError
from .logger import RichLogger
from .pipeline import BuildOptions, prepare_context, run_pipeline
from .settings import Settings
from .translation_utils import _


class ColoredHelpAction(argparse.Action):
    """Custom help action that shows colored help"""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        console = Console()

        header = Text()
        header.append(f"{APP_NAME} ", style="bold cyan")
        header.append(f"v{APP_VERSION}\n", style="bold white")
        header.append(APP_DESC, style="white")

        console.print(Panel(header, border_style="cyan", box=ROUNDED, padding=(0, 1), title="BigCommunity", width=70))
        console.print()

        console.print("[bold yellow]USAGE:[/]")
        console.print(f"  [cyan]{APP_NAME}[/] [dim]\\[OPTIONS][/]\n")

        console.print("[bold yellow]OPTIONS:[/]")
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="green bold", no_wrap=True)
        table.add_column(style="white")

        table.add_row("-h, --help", _("Show this help message and exit"))
        table.add_row("-V, --version", _("Print application version"))
        table.add_row("-v, --verbose", _("Stream cargo output live"))
        table.add_row("-q, --quiet", _("Buffer cargo output, show it only on failure") + " [dim](default)[/]")
        table.add_row("--clean", _("Run cargo clean before building"))
        table.add_row("-o, --output DIR", _("Custom output directory") + f" [dim](default: {RELEASE_TARGET_DIR})[/]")
        table.add_row("--cargo-path PATH", _("Explicit cargo binary path"))
        table.add_row("--dry-run", _("Show planned actions without executing"))
        table.add_row("--timeout SECONDS", _("Stop cargo when it runs longer than this"))
        table.add_row("--checksum", _("Write a .sha256 file next to the published binary"))
        table.add_row("-n, --nocolor", _("Suppress color printing"))
        table.add_row("--save-defaults", _("Store the given options as defaults for later runs"))

        console.print(table)
        console.print()

        console.print("[bold yellow]EXAMPLES:[/]")
        examples = [
            (APP_NAME, _("Build and publish target/release/<name>-v<version>")),
            (f"{APP_NAME} --clean -v", _("Clean build with live cargo output")),
            (f"{APP_NAME} -o dist --checksum", _("Publish into ./dist with a checksum file")),
            (f"{APP_NAME} --dry-run", _("Show what would happen")),
        ]

        for cmd, desc in examples:
            console.print(f"  [cyan]{cmd}[/]")
            console.print(f"    [dim]{desc}[/]\n")

        parser.exit()


class BuildRelease:
    """Main class of the command line front end"""

    def __init__(self, argv=None, logger=None, settings=None, start_dir=None, cancel_event=None):
        self.args = self.parse_arguments(argv)
        self.start_dir = start_dir
        self.cancel_event = cancel_event or threading.Event()
        self.logger = logger or RichLogger(use_colors=not self.args.nocolor)
        self.settings = settings if settings is not None else Settings(logger=self.logger)
        self.settings.logger = self.logger
        self.options = self.build_options()
        self.logger.verbose = self.options.verbose

    def parse_arguments(self, argv=None) -> argparse.Namespace:
        """Parses command line arguments with colored help"""
        parser = argparse.ArgumentParser(
            prog=APP_NAME,
            description=f"{APP_NAME} v{APP_VERSION} - {APP_DESC}",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            add_help=False,  # Disable default help to use custom one
        )

        parser.add_argument("-h", "--help", action=ColoredHelpAction, help=_("Show this help message and exit"))

        # None means "not given", so saved settings apply
        output_mode = parser.add_mutually_exclusive_group()
        output_mode.add_argument("-v", "--verbose", dest="verbose", action="store_true", default=None,
                                 help=_("Stream cargo output live"))
        output_mode.add_argument("-q", "--quiet", dest="verbose", action="store_false", default=None,
                                 help=_("Buffer cargo output, show it only on failure"))

        parser.add_argument("--clean", action="store_true", default=None, help=_("Run cargo clean before building"))

        parser.add_argument("-o", "--output", dest="output_dir", help=_("Custom output directory"))

        parser.add_argument("--cargo-path", dest="cargo_path", help=_("Explicit cargo binary path"))

        parser.add_argument("--dry-run", action="store_true", help=_("Show planned actions without executing"))

        parser.add_argument("--timeout", type=float, help=_("Stop cargo when it runs longer than SECONDS"))

        parser.add_argument("--checksum", action="store_true", default=None,
                            help=_("Write a .sha256 file next to the published binary"))

        parser.add_argument("-n", "--nocolor", action="store_true", help=_("Suppress color printing"))

        parser.add_argument("--save-defaults", action="store_true",
                            help=_("Store the given options as defaults for later runs"))

        parser.add_argument("-V", "--version", action="store_true", help=_("Print application version"))

        args = parser.parse_args(argv)

        if args.timeout is not None and args.timeout < 0:
            parser.error(_("--timeout must not be negative"))

        if args.version:
            self.print_version()
            sys.exit(0)

        return args

    def build_options(self) -> BuildOptions:
        """Merges command line arguments over saved settings"""
        args = self.args

        def pick(arg_value, key):
            return self.settings.get(key) if arg_value is None else arg_value

        timeout = pick(args.timeout, "timeout")

        return BuildOptions(
            verbose=bool(pick(args.verbose, "verbose")),
            clean=bool(pick(args.clean, "clean")),
            output_dir=pick(args.output_dir, "output_dir") or None,
            tool_path=pick(args.cargo_path, "cargo_path") or None,
            dry_run=args.dry_run,
            timeout=float(timeout) if timeout else None,
            checksum=bool(pick(args.checksum, "checksum")),
        )

    def print_version(self):
        """Prints application version"""
        version_text = Text()
        version_text.append(f"{APP_NAME} v{APP_VERSION}\n", style="bold cyan")
        version_text.append(f"{APP_DESC}\n\n", style="white")
        version_text.append(_("Copyright (C) 2025 BigCommunity Team\n\n"), style="blue")
        version_text.append(_("This program comes with absolutely NO warranty."), style="red")

        Console().print(Panel(version_text, box=ROUNDED, border_style="blue", padding=(1, 2)))

    def save_defaults(self):
        """Persists the options given on this command line"""
        args = self.args
        values = {}
        if args.verbose is not None:
            values["verbose"] = args.verbose
        if args.clean is not None:
            values["clean"] = args.clean
        if args.output_dir is not None:
            values["output_dir"] = args.output_dir
        if args.cargo_path is not None:
            values["cargo_path"] = args.cargo_path
        if args.timeout is not None:
            values["timeout"] = args.timeout
        if args.checksum is not None:
            values["checksum"] = args.checksum

        if self.options.dry_run:
            self.logger.log("yellow", _("[DRY-RUN] Would save defaults to {0}").format(self.settings.config_file))
            return

        if self.settings.update(values):
            self.logger.log("green", _("Defaults saved to {0}").format(self.settings.config_file))

    def run(self) -> int:
        """Runs the pipeline and returns the process exit code"""
        if self.settings.get("show_header", True):
            self.logger.draw_app_header()

        if self.args.save_defaults:
            self.save_defaults()

        if self.options.dry_run:
            self.logger.log("yellow", _("🔍 DRY-RUN MODE: cargo is not run and no files are written"))

        try:
            context = prepare_context(self.options, self.logger, self.start_dir)
            self.setup_log_file(context.manifest.name)
            result = run_pipeline(self.options, self.logger, cancel_event=self.cancel_event, context=context)
        except BuildReleaseError as e:
            self.logger.error(_("Build failed: {0}").format(e.describe()))
            return e.exit_code

        self.show_summary(context, result)
        return EXIT_SUCCESS

    def setup_log_file(self, project_name):
        if self.options.dry_run or not self.settings.get("log_to_file", True):
            return
        try:
            self.logger.setup_log_file(project_name)
        except OSError as e:
            self.logger.warn(_("Could not create log file: {0}").format(e))

    def show_summary(self, context, result):
        manifest = context.manifest
        rows = [
            (_("Package"), manifest.name),
            (_("Version"), manifest.version),
            (_("Project root"), context.project_root),
            (TOOL_NAME, context.tool_version),
            (_("Source"), result.source),
            (_("Destination"), result.path),
        ]
        if result.size is not None:
            rows.append((_("Size"), _("{0} bytes").format(result.size)))
        if result.sha256 is not None:
            rows.append(("SHA256", result.sha256))

        title = _("Dry-run plan") if self.options.dry_run else _("Release published")
        self.logger.display_summary(title, rows)
