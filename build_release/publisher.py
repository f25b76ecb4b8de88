#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/publisher.py - Locates the release binary and publishes a versioned copy
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

import hashlib
import os
import shutil
import sys
from dataclasses import dataclass
from typing import Optional

from .config import CHECKSUM_SUFFIX, COPY_CHUNK_SIZE, RELEASE_TARGET_DIR, TEMP_FILE_SUFFIX
from .errors import BinaryNotFoundError, PublishError
from .manifest import path_exists
from .translation_utils import _


def platform_executable_extension() -> str:
    """'.exe' on Windows, empty elsewhere"""
    return ".exe" if sys.platform.startswith("win") else ""


@dataclass(frozen=True)
class PublishResult:
    """Where the binary was (or would be) published"""

    source: str
    path: str
    size: Optional[int] = None
    sha256: Optional[str] = None


class ArtifactPublisher:
    """Copies target/release/<name> to <output>/<name>-v<version> atomically"""

    def __init__(self, context, logger):
        self.context = context
        self.logger = logger
        self.last_result = None

    def binary_path(self) -> str:
        """Conventional location of the binary produced by 'cargo build --release'"""
        binary_name = self.context.manifest.name + platform_executable_extension()
        return os.path.join(self.context.project_root, RELEASE_TARGET_DIR, binary_name)

    def locate_binary(self) -> str:
        binary_path = self.binary_path()
        if not path_exists(binary_path):
            raise BinaryNotFoundError(_("binary not found at expected location: {0}").format(binary_path))
        return binary_path

    def output_dir(self) -> str:
        """Configured output directory, relative paths taken from the project root"""
        output_dir = self.context.options.output_dir or RELEASE_TARGET_DIR
        output_dir = os.path.expanduser(output_dir)
        return os.path.abspath(os.path.join(self.context.project_root, output_dir))

    def destination_filename(self) -> str:
        manifest = self.context.manifest
        return f"{manifest.name}-v{manifest.version}{platform_executable_extension()}"

    def publish(self, source_path: str) -> str:
        """Publishes *source_path* and returns the destination path"""
        options = self.context.options

        try:
            output_dir = self.output_dir()
        except (OSError, ValueError) as exc:
            raise PublishError(_("resolve output directory: {0}").format(exc)) from exc

        if not options.dry_run:
            try:
                os.makedirs(output_dir, exist_ok=True)
            except OSError as exc:
                raise PublishError(_("create output directory: {0}").format(exc)) from exc

        destination = os.path.join(output_dir, self.destination_filename())

        if options.dry_run:
            self.logger.log("yellow", _("[DRY-RUN] Would copy: {0} -> {1}").format(source_path, destination))
            self.last_result = PublishResult(source=source_path, path=destination)
            return destination

        digest = self._atomic_copy(source_path, destination)

        try:
            size = os.stat(destination).st_size
        except OSError as exc:
            raise PublishError(_("stat destination file: {0}").format(exc)) from exc

        sha256 = digest.hexdigest()
        if options.checksum:
            self._write_checksum(destination, sha256)

        self.logger.log("green", _("✓ SUCCESS: {0} ({1} bytes)").format(destination, size))
        self.last_result = PublishResult(source=source_path, path=destination, size=size, sha256=sha256)
        return destination

    def _atomic_copy(self, source: str, destination: str):
        """Writes *source* to destination.tmp, syncs it and renames it over *destination*"""
        temp_path = destination + TEMP_FILE_SUFFIX
        digest = hashlib.sha256()

        try:
            source_file = open(source, "rb")
        except OSError as exc:
            raise PublishError(_("open source: {0}").format(exc)) from exc

        with source_file:
            try:
                fd = os.open(temp_path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC | getattr(os, "O_BINARY", 0), 0o600)
            except OSError as exc:
                raise PublishError(_("create temp file: {0}").format(exc)) from exc

            try:
                with os.fdopen(fd, "wb") as temp_file:
                    for chunk in iter(lambda: source_file.read(COPY_CHUNK_SIZE), b""):
                        temp_file.write(chunk)
                        digest.update(chunk)
                    temp_file.flush()
                    shutil.copymode(source, temp_path)
                    os.fsync(temp_file.fileno())
                os.replace(temp_path, destination)
            except OSError as exc:
                self._remove_temp(temp_path)
                raise PublishError(_("copy binary to {0}: {1}").format(destination, exc)) from exc
            except BaseException:
                self._remove_temp(temp_path)
                raise

        return digest

    def _write_checksum(self, destination: str, sha256: str):
        """Writes '<hex>  <name>' next to the published binary"""
        checksum_path = destination + CHECKSUM_SUFFIX
        temp_path = checksum_path + TEMP_FILE_SUFFIX
        line = f"{sha256}  {os.path.basename(destination)}\n"

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(line)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, checksum_path)
        except OSError as exc:
            self._remove_temp(temp_path)
            raise PublishError(_("write checksum file: {0}").format(exc)) from exc

        self.logger.log("green", _("SHA256: {0}").format(sha256))

    def _remove_temp(self, temp_path: str):
        try:
            os.remove(temp_path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            self.logger.warn(_("failed to remove temporary file: {0}").format(exc))
