#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/core/refine.py
# AI-SUMMARY: 剪切起点精炼：已知剪切长度后，在有限区间内寻找使两侧对齐残差之和最小的变点，得到样本级精确起点。

from __future__ import annotations

import logging

import numpy as np

from ..io.sources import SampleSource

logger = logging.getLogger(__name__)


def refine_cut_start(
    original: SampleSource,
    copy: SampleSource,
    cut_duration: int,
    gap: int,
    lo: int,
    hi: int,
) -> int:
    """Pin the copy-frame index where ``gap`` samples were removed.

    Before the cut ``copy[i]`` lines up with ``original[i + cut_duration]``,
    after it with ``original[i + cut_duration + gap]``. The returned index is
    the split point in ``[lo, hi]`` minimising the squared residual of both
    alignments.
    """
    hi = min(hi, len(copy), len(original) - cut_duration - gap)
    lo = max(0, min(lo, hi))
    span = hi - lo
    if span <= 0:
        return lo

    copy.seek(lo)
    copied = copy.read_samples(span)
    original.seek(lo + cut_duration)
    before = original.read_samples(span)
    original.seek(lo + cut_duration + gap)
    after = original.read_samples(span)

    err_before = (copied - before) ** 2
    err_after = (copied - after) ** 2
    # cost[k]: 前 k 个样本按剪切前对齐，其余按剪切后对齐
    head = np.concatenate(([0.0], np.cumsum(err_before)))
    tail = np.concatenate(([0.0], np.cumsum(err_after)))
    cost = head + (tail[-1] - tail)
    split = lo + int(np.argmin(cost))
    logger.debug(f"refined cut start in [{lo}, {hi}] -> {split}")
    return split


__all__ = ['refine_cut_start']
