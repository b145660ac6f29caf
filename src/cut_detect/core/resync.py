#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/core/resync.py
# AI-SUMMARY: 重新对齐匹配：在原始流的搜索窗口内用距离剖面寻找拷贝流参考片段重新出现的位置，得到剪切长度。

from __future__ import annotations

import datetime
import logging
from typing import Optional, Union

import numpy as np

from ..config import ScanConfig
from ..errors import ConfigurationError, EmptyWindow, NonNumericDistance
from ..io.sources import SampleSource
from .distance import DistanceProfileFn, distance_to_correlation, get_distance_profile

logger = logging.getLogger(__name__)

Duration = Union[float, int, datetime.timedelta]


def duration_to_seconds(value: Duration) -> float:
    if isinstance(value, datetime.timedelta):
        return value.total_seconds()
    return float(value)


class ResyncMatcher:
    """Measure how many original samples the copy skipped.

    A reference chunk read from the copy just past the divergence point is
    searched for inside a longer match window of the original starting at the
    same content position. The arg-min of the distance profile is the number
    of samples that were cut.
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        distance_fn: Optional[DistanceProfileFn] = None,
    ) -> None:
        self.config = config or ScanConfig()
        self.reference = self.config.correlation_window_samples
        self.min_reference = self.config.min_reference_samples
        self.match_threshold = float(self.config.resync.match_threshold)
        self.distance_fn = distance_fn or get_distance_profile(self.config.resync.distance)

    def measure_cut_length(
        self,
        window_len: Duration,
        original: SampleSource,
        copy: SampleSource,
        original_at: int,
        copy_at: int,
    ) -> int:
        """Return the cut length in samples.

        ``original_at`` and ``copy_at`` address the same content position in
        each stream's own frame. Both windows are clipped to the samples that
        remain.

        Raises:
            EmptyWindow: If the copy holds too little reference material or the
                original is shorter than the reference chunk.
            NonNumericDistance: If the distance profile contains NaN/inf.
            ConfigurationError: If no offset matches well, i.e. the cut is longer
                than ``window_len`` can reveal.
        """
        seconds = duration_to_seconds(window_len)
        window = min(self.config.window_samples(seconds), len(original) - original_at)
        ref_len = min(self.reference, len(copy) - copy_at)
        if ref_len < self.min_reference:
            raise EmptyWindow(
                f"only {max(ref_len, 0)} copy samples after {copy_at}, need at least {self.min_reference}"
            )
        if window < ref_len:
            raise EmptyWindow(
                f"match window of {max(window, 0)} samples at {original_at} is shorter than "
                f"the {ref_len}-sample reference chunk"
            )

        original.seek(original_at)
        match_window = original.read_samples(window)
        copy.seek(copy_at)
        reference = copy.read_samples(ref_len)

        profile = np.asarray(self.distance_fn(reference, match_window), dtype=np.float64)
        gap = self.best_offset(profile, ref_len)
        logger.debug(f"resync at copy={copy_at}: gap={gap} samples (window={window}, ref={ref_len})")
        if gap == profile.size - 1 and window == self.config.window_samples(seconds):
            logger.warning(f"最佳匹配位于搜索窗口末端 ({seconds}s)，剪切可能超出窗口长度")
        return gap

    def best_offset(self, profile: np.ndarray, ref_len: int) -> int:
        """Arg-min of ``profile``, first occurrence on ties."""
        if profile.size == 0:
            raise EmptyWindow("distance profile is empty")
        if not np.all(np.isfinite(profile)):
            bad = int(np.count_nonzero(~np.isfinite(profile)))
            raise NonNumericDistance(
                f"distance profile holds {bad} non-numeric value(s); "
                "constant (e.g. silent) input cannot be z-normalised"
            )
        idx = int(np.argmin(profile))
        corr = distance_to_correlation(profile[idx], ref_len)
        if corr < self.match_threshold:
            raise ConfigurationError(
                f"best resync match correlates at {corr:.3f} < {self.match_threshold}; "
                "the cut is probably longer than window_len"
            )
        return idx


__all__ = ['ResyncMatcher', 'duration_to_seconds', 'Duration']
