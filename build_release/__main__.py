#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/__main__.py - Allows "python -m build_release"
#

from .main import main

if __name__ == "__main__":
    main()
