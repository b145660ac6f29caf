#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/io/__init__.py
# AI-SUMMARY: 采样源模块统一出口。

"""Sample source implementations."""

from .sources import (
    SampleSource,
    ArraySampleSource,
    SoundFileSampleSource,
    load_sample_source,
    open_sample_source,
)

__all__ = [
    "SampleSource",
    "ArraySampleSource",
    "SoundFileSampleSource",
    "load_sample_source",
    "open_sample_source",
]
