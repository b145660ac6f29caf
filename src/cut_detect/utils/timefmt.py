# -*- coding: utf-8 -*-
# File: src/cut_detect/utils/timefmt.py
# AI-SUMMARY: 将秒数或样本索引格式化为 H:MM:SS.mmm 形式的可读时间戳。

from __future__ import annotations


def format_timestamp(seconds: float) -> str:
    """
    秒数 -> ``H:MM:SS.mmm``；毫秒向下取整，负值按 0 处理。
    """
    total_ms = int(max(0.0, float(seconds)) * 1000.0)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours}:{minutes:02d}:{secs:02d}.{millis:03d}"


def format_sample_index(index: int, sample_rate: int) -> str:
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")
    return format_timestamp(index / float(sample_rate))
