#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/pipeline.py - Wires discovery, validation, build and publish together
#
# Copyright (c) 2025, BigCommunity Team
# All rights reserved.
#

import threading
from dataclasses import dataclass
from typing import Optional

from .errors import BinaryNotFoundError
from .manifest import ProjectManifest, load_manifest, locate_project_root
from .publisher import ArtifactPublisher, PublishResult
from .runner import BuildRunner
from .toolchain import resolve_tool, validate_tool
from .translation_utils import _
from .validator import validate_manifest, validate_version_string


@dataclass(frozen=True)
class BuildOptions:
    """Options captured once from the command line"""

    verbose: bool = False
    clean: bool = False
    output_dir: Optional[str] = None
    tool_path: Optional[str] = None
    dry_run: bool = False
    timeout: Optional[float] = None
    checksum: bool = False


@dataclass
class PipelineContext:
    """Everything one pipeline run needs after discovery and validation"""

    options: BuildOptions
    project_root: str
    manifest: ProjectManifest
    tool_path: str
    tool_version: str = ""


def prepare_context(options: BuildOptions, logger, start_dir=None) -> PipelineContext:
    """Runs every check that must pass before cargo is invoked"""
    project_root = locate_project_root(start_dir)
    logger.log("cyan", _("Project root: {0}").format(project_root))

    manifest = load_manifest(project_root)
    validate_manifest(manifest)
    validate_version_string(manifest.version)

    tool_path = resolve_tool(options.tool_path)
    tool_version = validate_tool(tool_path)
    logger.debug(_("Using {0} ({1})").format(tool_path, tool_version))

    return PipelineContext(
        options=options,
        project_root=project_root,
        manifest=manifest,
        tool_path=tool_path,
        tool_version=tool_version,
    )


def run_pipeline(options: BuildOptions, logger, start_dir=None, cancel_event: threading.Event = None,
                 context: PipelineContext = None) -> PublishResult:
    """Builds the project and publishes the binary.

    Any failure raises a BuildReleaseError subclass naming the stage.
    A prepared *context* skips discovery and validation.
    """
    if context is None:
        context = prepare_context(options, logger, start_dir)
    manifest = context.manifest

    logger.log("white", _("Building {0} v{1}").format(manifest.name, manifest.version))

    runner = BuildRunner(context, logger, cancel_event)
    if options.clean:
        runner.run_clean()
    runner.run_build()

    publisher = ArtifactPublisher(context, logger)
    try:
        binary_path = publisher.locate_binary()
    except BinaryNotFoundError:
        if not options.dry_run:
            raise
        # The build was skipped, so the binary may legitimately be missing
        binary_path = publisher.binary_path()
        logger.log("yellow", _("[DRY-RUN] Binary not built yet, planned source: {0}").format(binary_path))

    publisher.publish(binary_path)
    return publisher.last_result
