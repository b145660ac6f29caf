#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/core/scanner.py
# AI-SUMMARY: 剪切扫描状态机：循环调用分叉定位、重新对齐与起点精炼，逐个输出原始时间轴上的剪切区间。

"""Cut scanner driving the divergence locator and resync matcher.

The scan keeps one immutable ``ScanState`` per iteration: ``offset`` is the
copy-frame index up to which both streams are known to agree, and
``cut_duration`` the number of original samples removed before it. Each
iteration finds the next cut, emits a ``CutRecord`` in the original's
timeline and advances the state. It stops when the copy is exhausted or the
cuts found so far account for the whole length difference.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import ScanConfig
from ..errors import ConfigurationError, CutScanError
from ..io.sources import SampleSource
from .distance import DistanceProfileFn
from .divergence import DivergenceLocator
from .refine import refine_cut_start
from .resync import Duration, ResyncMatcher, duration_to_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CutRecord:
    """Removed span ``[start, end)`` in original samples."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"cut start {self.start} after end {self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_seconds(self, sample_rate: int) -> Tuple[float, float]:
        return self.start / float(sample_rate), self.end / float(sample_rate)

    def to_dict(self, sample_rate: Optional[int] = None) -> Dict[str, Any]:
        entry: Dict[str, Any] = {'start': self.start, 'end': self.end, 'length': self.length}
        if sample_rate:
            start_s, end_s = self.to_seconds(sample_rate)
            entry['start_s'] = start_s
            entry['end_s'] = end_s
        return entry


@dataclass(frozen=True)
class ScanState:
    offset: int = 0
    cut_duration: int = 0

    def advance(self, start: int, gap: int) -> "ScanState":
        """State after a cut of ``gap`` samples found at copy index ``start``."""
        if start < self.offset:
            raise ValueError(f"scan cannot move backwards: {start} < {self.offset}")
        return ScanState(offset=start, cut_duration=self.cut_duration + gap)


@dataclass
class ScanResult:
    cuts: List[CutRecord] = field(default_factory=list)
    state: ScanState = field(default_factory=ScanState)
    iterations: int = 0
    sample_rate: int = 44100

    @property
    def total_cut(self) -> int:
        return sum(cut.length for cut in self.cuts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sample_rate': self.sample_rate,
            'iterations': self.iterations,
            'total_cut_samples': self.total_cut,
            'cuts': [cut.to_dict(self.sample_rate) for cut in self.cuts],
        }


class CutScanner:
    """Find every cut between an original stream and its shortened copy."""

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        distance_fn: Optional[DistanceProfileFn] = None,
    ) -> None:
        self.config = config or ScanConfig()
        self.distance_fn = distance_fn

    def scan(
        self,
        original: SampleSource,
        copy: SampleSource,
        window_len: Optional[Duration] = None,
    ) -> ScanResult:
        """Run the scan to completion.

        Raises:
            ConfigurationError: Before scanning, for mismatched sample rates,
                a copy longer than the original or an unusable ``window_len``.
            CutScanError: Any failure during the scan; ``exc.cuts`` holds the
                records emitted before it.
        """
        config = self._resolve_config(original, copy)
        seconds = config.resync.window_len_s if window_len is None else duration_to_seconds(window_len)
        config.window_samples(seconds)

        n_orig = len(original)
        n_copy = len(copy)
        if n_orig < n_copy:
            raise ConfigurationError(
                f"copy ({n_copy} samples) is longer than the original ({n_orig}); only removals are detected"
            )

        locator = DivergenceLocator(config)
        matcher = ResyncMatcher(config, self.distance_fn)
        window = config.correlation_window_samples
        min_reference = config.min_reference_samples

        result = ScanResult(sample_rate=config.sample_rate)
        state = ScanState()
        logger.info(
            f"开始扫描: original={n_orig}, copy={n_copy}, missing={n_orig - n_copy} samples, window_len={seconds}s"
        )

        try:
            while not self._is_done(state, n_orig, n_copy):
                result.iterations += 1
                offset, cut_duration = state.offset, state.cut_duration
                if offset >= n_copy:
                    # 拷贝流已耗尽但仍有缺失：其余部分整体被剪掉
                    record = CutRecord(start=n_copy + cut_duration, end=n_orig)
                    result.cuts.append(record)
                    state = state.advance(offset, record.length)
                    continue
                candidate = locator.locate(original, copy, offset, cut_duration)

                # 二分步长取整带来的误差上限
                slack = locator.iteration_count(n_copy - offset) + 1
                lo = max(offset, candidate - slack)
                anchor = min(candidate + window + slack, n_copy)
                missing = n_orig - n_copy - cut_duration

                if n_copy - anchor < min_reference:
                    # 拷贝流已无足够内容可对齐，剩余缺失部分只能是最后一个剪切
                    gap = missing
                    hi = n_copy
                else:
                    gap = matcher.measure_cut_length(
                        seconds, original, copy, original_at=anchor + cut_duration, copy_at=anchor
                    )
                    hi = anchor

                if gap <= 0:
                    raise CutScanError(f"resync at copy sample {anchor} found no skipped samples; scan cannot advance")
                if gap > missing:
                    raise CutScanError(
                        f"measured cut of {gap} samples exceeds the {missing} samples still unaccounted for"
                    )

                start = refine_cut_start(original, copy, cut_duration, gap, lo, hi)
                record = CutRecord(start=start + cut_duration, end=start + cut_duration + gap)
                result.cuts.append(record)
                state = state.advance(start, gap)
                logger.info(f"检测到剪切: [{record.start}, {record.end}) 共 {record.length} samples")
        except CutScanError as exc:
            exc.cuts = list(result.cuts)
            raise

        result.state = state
        logger.info(f"扫描完成: {len(result.cuts)} cut(s), {result.total_cut} samples removed")
        return result

    @staticmethod
    def _is_done(state: ScanState, n_orig: int, n_copy: int) -> bool:
        return n_orig <= n_copy + state.cut_duration

    def _resolve_config(self, original: SampleSource, copy: SampleSource) -> ScanConfig:
        orig_sr = getattr(original, 'sample_rate', None)
        copy_sr = getattr(copy, 'sample_rate', None)
        if orig_sr and copy_sr and int(orig_sr) != int(copy_sr):
            raise ConfigurationError(f"sample rates differ: original={orig_sr}Hz, copy={copy_sr}Hz")
        source_sr = orig_sr or copy_sr
        if source_sr and int(source_sr) != self.config.sample_rate:
            logger.info(f"使用音频采样率 {source_sr}Hz 替代配置值 {self.config.sample_rate}Hz")
            return dataclasses.replace(self.config, sample_rate=int(source_sr))
        return self.config


def produce_cuts(
    original: SampleSource,
    copy: SampleSource,
    window_len: Optional[Duration] = None,
    config: Optional[ScanConfig] = None,
    distance_fn: Optional[DistanceProfileFn] = None,
) -> List[CutRecord]:
    """Return the cuts removed from ``original`` to produce ``copy``.

    Args:
        original: Unmodified stream.
        copy: The same recording with segments removed.
        window_len: Resync search window in seconds (or a ``timedelta``); it
            bounds the longest detectable single cut. Defaults to the
            configured ``resync.window_len_s``.
        config: Scan parameters; packaged defaults when omitted.
        distance_fn: Distance-profile function replacing the configured one.

    Returns:
        Ordered, non-overlapping ``CutRecord`` list in original samples.
    """
    return CutScanner(config, distance_fn).scan(original, copy, window_len).cuts


__all__ = ['CutRecord', 'ScanState', 'ScanResult', 'CutScanner', 'produce_cuts']
