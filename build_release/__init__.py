#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/__init__.py - Package initialization
#

"""
Core package for the build-release application.
Locates a Cargo project, builds it in release mode and publishes a
version-stamped copy of the resulting binary.
"""

__version__ = "1.0.0"
__author__ = "BigCommunity Team"
