#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# build_release/translation_utils.py - Utilities for translation support
#
import gettext

# Configure the translation domain
gettext.textdomain("build-release")


def translate_text(text):
    """Translates the text using gettext"""
    if not isinstance(text, str):
        return text
    return gettext.gettext(text)


_ = translate_text
