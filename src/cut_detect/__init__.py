#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/__init__.py
# AI-SUMMARY: 顶层包入口，聚合剪切检测的对外 API。

"""Locate segments removed from a copy of an audio recording."""

from .config import ScanConfig, load_scan_config
from .core import CutRecord, CutScanner, ScanResult, ScanState, produce_cuts
from .errors import (
    CutScanError,
    SeekOutOfRange,
    ReadExhausted,
    EmptyWindow,
    NonNumericDistance,
    ConfigurationError,
)
from .io import ArraySampleSource, SampleSource, SoundFileSampleSource, open_sample_source

__version__ = '0.3.0'

__all__ = [
    'produce_cuts',
    'CutScanner',
    'CutRecord',
    'ScanResult',
    'ScanState',
    'ScanConfig',
    'load_scan_config',
    'SampleSource',
    'ArraySampleSource',
    'SoundFileSampleSource',
    'open_sample_source',
    'CutScanError',
    'SeekOutOfRange',
    'ReadExhausted',
    'EmptyWindow',
    'NonNumericDistance',
    'ConfigurationError',
]
