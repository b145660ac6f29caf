#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/utils/__init__.py
# AI-SUMMARY: 通用工具出口。

from .timefmt import format_timestamp, format_sample_index

__all__ = ['format_timestamp', 'format_sample_index']
