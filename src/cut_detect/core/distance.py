#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/core/distance.py
# AI-SUMMARY: 距离剖面计算：基于 FFT 的 MASS 实现与朴素 O(n·m) 参考实现，二者可互换以便数值校验。
"""Distance profiles between a query and every subsequence of a series.

Both functions share one contract: ``fn(query, series)`` returns an array of
``len(series) - len(query) + 1`` z-normalised Euclidean distances, with NaN
where either side has no variance.
"""
from __future__ import annotations

from typing import Callable, Dict, Sequence

import numpy as np
from scipy import signal

DistanceProfileFn = Callable[[np.ndarray, np.ndarray], np.ndarray]

_EPS = 1e-12


def _validate(query: Sequence[float], series: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    q = np.asarray(query, dtype=np.float64).reshape(-1)
    t = np.asarray(series, dtype=np.float64).reshape(-1)
    if q.size == 0:
        raise ValueError("query must not be empty")
    if q.size > t.size:
        raise ValueError(f"query of {q.size} samples is longer than series of {t.size}")
    return q, t


def mass_distance_profile(query: Sequence[float], series: Sequence[float]) -> np.ndarray:
    """Mueen's Algorithm for Similarity Search.

    Sliding dot products come from one FFT convolution; subsequence means and
    deviations from running sums, so the cost is O(n log n) instead of O(n·m).
    """
    q, t = _validate(query, series)
    m = q.size

    qt = signal.fftconvolve(t, q[::-1], mode='valid')

    mu_q = float(np.mean(q))
    sigma_q = float(np.std(q))

    csum = np.concatenate(([0.0], np.cumsum(t)))
    csum_sq = np.concatenate(([0.0], np.cumsum(t * t)))
    mu_t = (csum[m:] - csum[:-m]) / m
    var_t = np.maximum((csum_sq[m:] - csum_sq[:-m]) / m - mu_t * mu_t, 0.0)
    sigma_t = np.sqrt(var_t)

    with np.errstate(divide='ignore', invalid='ignore'):
        corr = (qt - m * mu_q * mu_t) / (m * sigma_q * sigma_t)
    corr = np.clip(corr, -1.0, 1.0)
    dist = np.sqrt(2.0 * m * (1.0 - corr))

    # 方差为零的子序列无法 z 归一化
    dist[var_t <= _EPS] = np.nan
    if sigma_q * sigma_q <= _EPS:
        dist[:] = np.nan
    return dist


def naive_distance_profile(query: Sequence[float], series: Sequence[float]) -> np.ndarray:
    """Reference O(n·m) implementation, used to check ``mass_distance_profile``."""
    q, t = _validate(query, series)
    m = q.size
    sigma_q = float(np.std(q))
    count = t.size - m + 1
    dist = np.full(count, np.nan)
    if sigma_q * sigma_q <= _EPS:
        return dist
    qz = (q - np.mean(q)) / sigma_q
    for idx in range(count):
        window = t[idx:idx + m]
        sigma = float(np.std(window))
        if sigma * sigma <= _EPS:
            continue
        wz = (window - np.mean(window)) / sigma
        dist[idx] = float(np.sqrt(np.sum((qz - wz) ** 2)))
    return dist


def distance_to_correlation(distance: float, length: int) -> float:
    """Invert the z-normalised distance back to a Pearson coefficient."""
    return 1.0 - (float(distance) ** 2) / (2.0 * float(length))


_REGISTRY: Dict[str, DistanceProfileFn] = {
    'mass': mass_distance_profile,
    'naive': naive_distance_profile,
}


def get_distance_profile(name: str) -> DistanceProfileFn:
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        raise ValueError(f"unknown distance profile '{name}', expected one of {sorted(_REGISTRY)}") from None


__all__ = [
    'DistanceProfileFn',
    'mass_distance_profile',
    'naive_distance_profile',
    'distance_to_correlation',
    'get_distance_profile',
]
