#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/core/divergence.py
# AI-SUMMARY: 相关性引导的二分搜索，定位原始流与拷贝流内容开始分叉的位置（下一个剪切的起点附近）。

from __future__ import annotations

import logging
import math

from ..config import ScanConfig
from ..io.sources import SampleSource
from .correlation import median_correlation

logger = logging.getLogger(__name__)


class DivergenceLocator:
    """Bisection search for the point where two streams stop matching.

    Each probe compares one correlation window of ``copy`` at ``candidate``
    against ``original`` at ``candidate + cut_duration``. A match moves the
    candidate forward, a mismatch moves it back, by a step that starts at a
    quarter of the unscanned span and halves every stage. The cut begins
    within one correlation window after the returned candidate, up to the
    rounding of the integer steps.
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()
        self.window = self.config.correlation_window_samples
        self.threshold = float(self.config.detection.correlation_threshold)

    @staticmethod
    def iteration_count(length: int) -> int:
        """Number of bisection stages for ``length`` unscanned samples."""
        if length <= 1:
            return 0
        return int(math.ceil(math.log2(length)))

    def locate(
        self,
        original: SampleSource,
        copy: SampleSource,
        offset: int,
        cut_duration: int,
    ) -> int:
        """Return the copy-frame candidate index for the next cut start.

        Raises:
            SeekOutOfRange: If a probe position lies outside either stream.
            ReadExhausted: If a probe window cannot be read.
        """
        length = len(copy) - offset
        candidate = offset + length // 2
        stage = 1
        for _ in range(self.iteration_count(length)):
            corr = self.probe(original, copy, candidate, cut_duration)
            # 首步为跨度的四分之一
            step = length >> (stage + 1)
            if corr > self.threshold:
                candidate += step
            else:
                candidate -= step
            logger.debug(f"bisection stage={stage} corr={corr:.4f} next={candidate}")
            stage += 1
        return candidate

    def probe(self, original: SampleSource, copy: SampleSource, candidate: int, cut_duration: int) -> float:
        """Correlate one window of both streams at ``candidate``.

        The window is clipped to what remains of the copy, so probes near the
        end of the stream stay readable.
        """
        size = min(self.window, len(copy) - candidate)
        original.seek(candidate + cut_duration)
        copy.seek(candidate)
        orig_window = original.read_samples(size)
        copy_window = copy.read_samples(size)
        return median_correlation(orig_window, copy_window)


__all__ = ['DivergenceLocator']
