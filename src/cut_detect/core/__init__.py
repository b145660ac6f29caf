#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/core/__init__.py
# AI-SUMMARY: 核心算法统一出口：相关性、距离剖面、分叉定位、重新对齐、起点精炼与扫描器。

from .correlation import median_correlation, windows_match
from .distance import (
    DistanceProfileFn,
    mass_distance_profile,
    naive_distance_profile,
    distance_to_correlation,
    get_distance_profile,
)
from .divergence import DivergenceLocator
from .resync import ResyncMatcher, duration_to_seconds
from .refine import refine_cut_start
from .scanner import CutRecord, ScanState, ScanResult, CutScanner, produce_cuts

__all__ = [
    'median_correlation',
    'windows_match',
    'DistanceProfileFn',
    'mass_distance_profile',
    'naive_distance_profile',
    'distance_to_correlation',
    'get_distance_profile',
    'DivergenceLocator',
    'ResyncMatcher',
    'duration_to_seconds',
    'refine_cut_start',
    'CutRecord',
    'ScanState',
    'ScanResult',
    'CutScanner',
    'produce_cuts',
]
