#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/io/sources.py
# AI-SUMMARY: 随机访问采样源：定义 SampleSource 协议，提供内存数组、soundfile 流式文件与 librosa 解码三种实现。

"""Random-access sample sources consumed by the cut scanner.

A source is a finite mono stream of float samples at a fixed sample rate that
supports absolute ``seek`` and sequential ``read_samples``. Reads never return
short: asking for more samples than remain raises ``ReadExhausted``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

import librosa
import numpy as np
import soundfile as sf

from ..errors import ReadExhausted, SeekOutOfRange

logger = logging.getLogger(__name__)


@runtime_checkable
class SampleSource(Protocol):
    """Seekable mono sample stream."""

    sample_rate: int

    def seek(self, index: int) -> None:
        ...

    def read_samples(self, count: int) -> np.ndarray:
        ...

    def __len__(self) -> int:
        ...


def _ensure_mono(wave: np.ndarray) -> np.ndarray:
    if wave.ndim == 1:
        return wave
    if wave.ndim == 2:
        return np.mean(wave, axis=0)
    return wave.reshape(-1)


class ArraySampleSource:
    """In-memory source over a numpy array.

    Two-dimensional input is treated as ``(channels, frames)``, the layout
    ``librosa.load(mono=False)`` returns, and averaged down to one channel.
    """

    def __init__(self, samples, sample_rate: int = 44100) -> None:
        audio = _ensure_mono(np.asarray(samples, dtype=np.float64))
        self._samples = np.ascontiguousarray(audio)
        self.sample_rate = int(sample_rate)
        self._pos = 0

    def __len__(self) -> int:
        return int(self._samples.size)

    @property
    def position(self) -> int:
        return self._pos

    def seek(self, index: int) -> None:
        index = int(index)
        if index < 0 or index > len(self):
            raise SeekOutOfRange(f"seek to {index} outside stream of {len(self)} samples")
        self._pos = index

    def read_samples(self, count: int) -> np.ndarray:
        count = int(count)
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        remaining = len(self) - self._pos
        if count > remaining:
            raise ReadExhausted(
                f"requested {count} samples at {self._pos}, only {remaining} remain"
            )
        chunk = self._samples[self._pos:self._pos + count].copy()
        self._pos += count
        return chunk

    def __repr__(self) -> str:
        return f"ArraySampleSource(len={len(self)}, sample_rate={self.sample_rate})"


class SoundFileSampleSource:
    """Streaming source over an audio file readable by ``soundfile``.

    Frames are read on demand and mixed down to mono, so long recordings are
    never held in memory at once. Use as a context manager or call ``close``.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._file = sf.SoundFile(str(self.path), mode='r')
        self.sample_rate = int(self._file.samplerate)
        self.channels = int(self._file.channels)
        self._frames = int(self._file.frames)
        logger.debug(
            f"打开音频: {self.path.name}, frames={self._frames}, sr={self.sample_rate}, channels={self.channels}"
        )

    def __len__(self) -> int:
        return self._frames

    def seek(self, index: int) -> None:
        index = int(index)
        if index < 0 or index > self._frames:
            raise SeekOutOfRange(f"seek to {index} outside {self.path.name} ({self._frames} frames)")
        self._file.seek(index)

    def read_samples(self, count: int) -> np.ndarray:
        count = int(count)
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        position = int(self._file.tell())
        remaining = self._frames - position
        if count > remaining:
            raise ReadExhausted(
                f"requested {count} samples at {position} of {self.path.name}, only {remaining} remain"
            )
        frames = self._file.read(count, dtype='float64', always_2d=True)
        if frames.shape[0] < count:
            raise ReadExhausted(f"short read from {self.path.name}: {frames.shape[0]} < {count}")
        return np.mean(frames, axis=1)

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> "SoundFileSampleSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SoundFileSampleSource(path={self.path.as_posix()!r}, sample_rate={self.sample_rate})"


def load_sample_source(path: Union[str, Path], sample_rate: Optional[int] = None) -> ArraySampleSource:
    """Decode ``path`` with librosa into an in-memory mono source.

    Handles containers soundfile cannot stream (mp3, m4a, ...) and resamples
    when ``sample_rate`` is given.
    """
    audio, sr = librosa.load(str(path), sr=sample_rate, mono=True)
    logger.info(f"音频加载完成: {Path(path).name}, 时长={len(audio) / sr:.2f}s, 采样率={sr}Hz")
    return ArraySampleSource(audio.astype(np.float64), sample_rate=int(sr))


def open_sample_source(path: Union[str, Path], sample_rate: Optional[int] = None):
    """Open ``path`` as the cheapest source that honours ``sample_rate``.

    Files soundfile can read at the requested rate are streamed; anything else
    is decoded (and resampled) through librosa.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"input audio not found: {path}")
    try:
        info = sf.info(str(path))
    except RuntimeError:
        logger.debug(f"soundfile 无法读取 {path.name}，回退到 librosa 解码")
        return load_sample_source(path, sample_rate)
    if sample_rate is not None and int(info.samplerate) != int(sample_rate):
        return load_sample_source(path, sample_rate)
    return SoundFileSampleSource(path)


__all__ = [
    'SampleSource',
    'ArraySampleSource',
    'SoundFileSampleSource',
    'load_sample_source',
    'open_sample_source',
]
