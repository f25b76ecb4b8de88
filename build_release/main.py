#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/main.py - Entry point for build_release application
#

import sys

from rich.console import Console

from .build_release import BuildRelease
from .translation_utils import _


def main(argv=None):
    """Main entry point of the application"""
    console = Console(stderr=True)

    try:
        sys.exit(BuildRelease(argv).run())
    except KeyboardInterrupt:
        console.print(_("Operation cancelled by user."), style="yellow")
        sys.exit(1)
    except Exception as e:
        console.print(_("Unhandled error: {0}").format(str(e)), style="red", markup=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
