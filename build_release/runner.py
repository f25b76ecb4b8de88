#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/runner.py - Runs cargo clean / cargo build as supervised subprocesses
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

import subprocess
import sys
import threading
import time

from .config import BUILD_ARGS, CLEAN_ARGS, DRAIN_GRACE, POLL_INTERVAL, TERMINATE_GRACE, TOOL_NAME
from .errors import BuildCancelledError, SubprocessError
from .translation_utils import _


class BuildRunner:
    """Invokes the resolved build tool inside the project root.

    Verbose mode lets the child write straight to our stdout/stderr. Quiet mode
    merges both streams into one in-memory buffer which is only shown, on
    stderr, when the command fails.

    The child is waited on in short intervals so a set *cancel_event*, the
    options' timeout or Ctrl+C terminates it instead of blocking forever.
    """

    def __init__(self, context, logger, cancel_event: threading.Event = None):
        self.context = context
        self.logger = logger
        self.cancel_event = cancel_event

    def run_clean(self):
        """Runs 'cargo clean' unless in dry-run mode"""
        self.logger.log("cyan", _("Running: {0}").format(" ".join([TOOL_NAME] + CLEAN_ARGS)))

        if self.context.options.dry_run:
            self.logger.log("yellow", _("[DRY-RUN] Skipping {0} clean").format(TOOL_NAME))
            return

        self._run_tool(CLEAN_ARGS)

    def run_build(self):
        """Runs 'cargo build --release' unless in dry-run mode"""
        self.logger.log("cyan", _("Running: {0}").format(" ".join([TOOL_NAME] + BUILD_ARGS)))

        if self.context.options.dry_run:
            self.logger.log("yellow", _("[DRY-RUN] Skipping {0} build").format(TOOL_NAME))
            return

        self._run_tool(BUILD_ARGS)

    def _run_tool(self, args):
        command = [self.context.tool_path] + list(args)
        verbose = self.context.options.verbose
        output_target = None if verbose else subprocess.PIPE

        self.logger.debug(_("Executing: {0} (cwd: {1})").format(" ".join(command), self.context.project_root))

        try:
            process = subprocess.Popen(
                command,
                cwd=self.context.project_root,
                stdout=output_target,
                stderr=None if verbose else subprocess.STDOUT,
            )
        except OSError as exc:
            raise SubprocessError(_("{0} command failed to start: {1}").format(TOOL_NAME, exc)) from exc

        captured = []
        reader = None
        if not verbose:
            reader = threading.Thread(target=self._drain, args=(process.stdout, captured), daemon=True)
            reader.start()

        try:
            returncode = self._wait(process)
        except BuildCancelledError:
            self._finish_reader(process, reader)
            self._flush_captured(captured)
            raise

        self._finish_reader(process, reader)

        if returncode != 0:
            self._flush_captured(captured)
            raise SubprocessError(
                _("{0} command failed: exit status {1}").format(TOOL_NAME, returncode),
                returncode=returncode,
            )

    def _wait(self, process) -> int:
        timeout = self.context.options.timeout
        deadline = time.monotonic() + timeout if timeout else None

        try:
            while True:
                try:
                    return process.wait(timeout=POLL_INTERVAL)
                except subprocess.TimeoutExpired:
                    pass

                if self.cancel_event is not None and self.cancel_event.is_set():
                    reason = _("{0} command cancelled").format(TOOL_NAME)
                elif deadline is not None and time.monotonic() >= deadline:
                    reason = _("{0} command timed out after {1} seconds").format(TOOL_NAME, timeout)
                else:
                    continue

                self._terminate(process)
                raise BuildCancelledError(reason, returncode=process.returncode)
        except KeyboardInterrupt:
            self._terminate(process)
            raise BuildCancelledError(
                _("{0} command interrupted by user").format(TOOL_NAME), returncode=process.returncode
            ) from None

    def _terminate(self, process):
        self.logger.log("yellow", _("Stopping {0} (pid {1})...").format(TOOL_NAME, process.pid))
        process.terminate()
        try:
            process.wait(timeout=TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    def _finish_reader(self, process, reader):
        if reader is None:
            return
        reader.join(timeout=DRAIN_GRACE)
        if reader.is_alive():
            # A process started by the build still holds the pipe; the daemon
            # reader keeps draining it and closes nothing.
            self.logger.warn(_("{0} left a background process holding its output open").format(TOOL_NAME))
            return
        process.stdout.close()

    @staticmethod
    def _drain(stream, captured):
        for chunk in iter(lambda: stream.read1(8192), b""):
            captured.append(chunk)

    @staticmethod
    def _flush_captured(captured):
        output = b"".join(list(captured)).decode("utf-8", errors="replace")
        if not output:
            return
        if not output.endswith("\n"):
            output += "\n"
        sys.stderr.write(output)
        sys.stderr.flush()
