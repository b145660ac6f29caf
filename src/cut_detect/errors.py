#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/errors.py
# AI-SUMMARY: 切点检测的异常体系，统一以 CutScanError 为根，供核心算法与 CLI 捕获。

"""Custom exceptions for cut_detect."""

from __future__ import annotations

from typing import List, Optional


class CutScanError(Exception):
    """Base exception for cut_detect.

    ``cuts`` holds the records emitted before the failure, when the error was
    raised from inside a scan.
    """

    def __init__(self, message: str, cuts: Optional[List] = None) -> None:
        super().__init__(message)
        self.cuts = list(cuts) if cuts else []


class SeekOutOfRange(CutScanError):
    """Requested position lies beyond the end of a stream."""

    pass


class ReadExhausted(CutScanError):
    """Fewer samples remain than a read requested."""

    pass


class EmptyWindow(ReadExhausted):
    """A match or reference window could not be filled."""

    pass


class NonNumericDistance(CutScanError):
    """A distance profile contained NaN or infinite values."""

    pass


class ConfigurationError(CutScanError):
    """Configuration incompatible with the sample rate or stream lengths."""

    pass


__all__ = [
    'CutScanError',
    'SeekOutOfRange',
    'ReadExhausted',
    'EmptyWindow',
    'NonNumericDistance',
    'ConfigurationError',
]
