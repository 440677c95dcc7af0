#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
异常定义模块

Errors that end the watchdog loop. Everything else is logged and skipped.
"""


class GameMonError(Exception):
    """Base class for GameMon errors."""


class ConfigLoadError(GameMonError):
    """The entries file could not be read or parsed."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class ProcessScanError(GameMonError):
    """The process table stayed unavailable for too many cycles."""
