#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/config/settings.py
# AI-SUMMARY: 定义扫描配置结构体与加载/合并逻辑，支持 YAML 默认值、用户文件、环境变量与运行时覆盖。

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_CONFIG_VERSION = 1
_DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.yaml"
_ENV_PREFIX = 'CUTDETECT__'
_DISTANCE_KINDS = ('mass', 'naive')


def _deep_merge(base: Dict[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """递归合并 patch 到 base，遇到 dict 继续深入，否则直接覆盖。"""
    for key, value in patch.items():
        if isinstance(value, Mapping):
            node = base.get(key)
            if isinstance(node, dict):
                base[key] = _deep_merge(node, value)
            else:
                base[key] = copy.deepcopy(dict(value))
        else:
            base[key] = copy.deepcopy(value)
    return base


def _parse_env_value(raw: str) -> Any:
    value = raw.strip()
    lower = value.lower()
    if lower in {'true', 'false'}:
        return lower == 'true'
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return raw


def _apply_env_overrides(config: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    for key, raw in environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        parts = [part.lower() for part in key[len(_ENV_PREFIX):].split('__') if part]
        if not parts:
            continue
        cursor = config
        for part in parts[:-1]:
            if part not in cursor or not isinstance(cursor[part], dict):
                cursor[part] = {}
            cursor = cursor[part]
        cursor[parts[-1]] = _parse_env_value(raw)
        logger.debug(f"环境变量覆盖: {key}")
    return config


def _apply_dotted_overrides(config: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    for dotted_path, value in overrides.items():
        keys = [part for part in str(dotted_path).split('.') if part]
        if not keys:
            continue
        cursor = config
        for key in keys[:-1]:
            if key not in cursor or not isinstance(cursor[key], dict):
                cursor[key] = {}
            cursor = cursor[key]
        cursor[keys[-1]] = value
    return config


@dataclass(frozen=True)
class DetectionConfig:
    correlation_window_s: float = 1.0
    correlation_threshold: float = 0.95


@dataclass(frozen=True)
class ResyncConfig:
    window_len_s: float = 10.0
    match_threshold: float = 0.9
    min_reference_s: float = 0.1
    distance: str = 'mass'


@dataclass(frozen=True)
class ScanConfig:
    """Tunable parameters of a cut scan.

    Durations are stored in seconds and converted to samples with
    ``sample_rate``; invalid combinations raise ``ConfigurationError``.
    """

    sample_rate: int = 44100
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    resync: ResyncConfig = field(default_factory=ResyncConfig)
    logging: Dict[str, Any] = field(default_factory=dict)
    version: int = _CONFIG_VERSION

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.correlation_window_samples < 1:
            raise ConfigurationError(
                f"correlation window of {self.detection.correlation_window_s}s is shorter than one sample"
            )
        if not 0.0 < self.detection.correlation_threshold <= 1.0:
            raise ConfigurationError("correlation_threshold must lie in (0, 1]")
        if not 0.0 < self.resync.match_threshold <= 1.0:
            raise ConfigurationError("match_threshold must lie in (0, 1]")
        if self.resync.min_reference_s < 0:
            raise ConfigurationError("min_reference_s must not be negative")
        if self.resync.distance not in _DISTANCE_KINDS:
            raise ConfigurationError(
                f"unknown distance '{self.resync.distance}', expected one of {_DISTANCE_KINDS}"
            )
        if self.min_reference_samples > self.correlation_window_samples:
            raise ConfigurationError("min_reference_s must not exceed correlation_window_s")
        self.window_samples(self.resync.window_len_s)

    @property
    def correlation_window_samples(self) -> int:
        return int(round(self.detection.correlation_window_s * self.sample_rate))

    @property
    def min_reference_samples(self) -> int:
        return max(1, int(round(self.resync.min_reference_s * self.sample_rate)))

    def window_samples(self, window_len_s: float) -> int:
        """Convert a match-window duration to samples.

        The window must be longer than the reference chunk, otherwise the
        distance profile has no room for a non-zero cut.
        """
        if window_len_s <= 0:
            raise ConfigurationError(f"window_len must be positive, got {window_len_s}s")
        samples = int(round(window_len_s * self.sample_rate))
        if samples <= self.correlation_window_samples:
            raise ConfigurationError(
                f"window_len of {window_len_s}s ({samples} samples) must exceed the "
                f"{self.correlation_window_samples}-sample reference chunk"
            )
        return samples

    def to_mapping(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'audio': {'sample_rate': self.sample_rate},
            'detection': {
                'correlation_window_s': self.detection.correlation_window_s,
                'correlation_threshold': self.detection.correlation_threshold,
            },
            'resync': {
                'window_len_s': self.resync.window_len_s,
                'match_threshold': self.resync.match_threshold,
                'min_reference_s': self.resync.min_reference_s,
                'distance': self.resync.distance,
            },
            'logging': copy.deepcopy(self.logging),
        }


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"配置文件不存在: {path}")
    with open(path, 'r', encoding='utf-8') as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"配置文件必须是字典结构: {path}")
    return data


def _dict_to_detection(data: Mapping[str, Any]) -> DetectionConfig:
    return DetectionConfig(
        correlation_window_s=float(data.get('correlation_window_s', 1.0)),
        correlation_threshold=float(data.get('correlation_threshold', 0.95)),
    )


def _dict_to_resync(data: Mapping[str, Any]) -> ResyncConfig:
    return ResyncConfig(
        window_len_s=float(data.get('window_len_s', 10.0)),
        match_threshold=float(data.get('match_threshold', 0.9)),
        min_reference_s=float(data.get('min_reference_s', 0.1)),
        distance=str(data.get('distance', 'mass')).lower(),
    )


def scan_config_from_mapping(data: Mapping[str, Any]) -> ScanConfig:
    version = int(data.get('version', _CONFIG_VERSION))
    if version != _CONFIG_VERSION:
        raise ConfigurationError(f"不支持的配置版本: {version}")
    audio = data.get('audio') or {}
    try:
        return ScanConfig(
            sample_rate=int(audio.get('sample_rate', 44100)),
            detection=_dict_to_detection(data.get('detection') or {}),
            resync=_dict_to_resync(data.get('resync') or {}),
            logging=copy.deepcopy(dict(data.get('logging') or {})),
            version=version,
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"配置值无效: {exc}") from exc


def load_scan_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ScanConfig:
    """Build a ``ScanConfig`` from the packaged defaults.

    Layers, later ones winning: ``defaults.yaml``, the optional user file at
    ``path``, ``CUTDETECT__SECTION__KEY`` environment variables, then
    ``overrides`` keyed by dotted paths such as ``'resync.window_len_s'``.
    """
    config = load_yaml(_DEFAULTS_PATH)
    if path is not None:
        _deep_merge(config, load_yaml(path))
        logger.info(f"已加载用户配置: {path}")
    _apply_env_overrides(config, environ)
    if overrides:
        _apply_dotted_overrides(config, overrides)
    return scan_config_from_mapping(config)
