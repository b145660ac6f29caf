#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/config/__init__.py
# AI-SUMMARY: 配置工具集入口，提供扫描参数结构体与 YAML/环境变量加载函数。

"""Configuration helpers for the cut scanner."""

from .settings import (
    DetectionConfig,
    ResyncConfig,
    ScanConfig,
    load_yaml,
    load_scan_config,
    scan_config_from_mapping,
)

__all__ = [
    "DetectionConfig",
    "ResyncConfig",
    "ScanConfig",
    "load_yaml",
    "load_scan_config",
    "scan_config_from_mapping",
]
