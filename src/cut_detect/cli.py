#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/cut_detect/cli.py
# AI-SUMMARY: 命令行入口：打开原始/拷贝音频，运行剪切扫描，按行打印或以 JSON 输出剪切区间。

"""
剪切检测命令行工具

使用方法:
    cut-detect original.wav copy.wav                  # 打印剪切区间
    cut-detect original.wav copy.mp3 --window-len 20  # 增大搜索窗口
    cut-detect original.wav copy.wav --json -o cuts.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import ScanConfig, load_scan_config
from .core.scanner import CutScanner, ScanResult
from .errors import CutScanError
from .io.sources import open_sample_source
from .utils.timefmt import format_sample_index

logger = logging.getLogger(__name__)

_DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False, logging_cfg: Optional[Dict[str, Any]] = None) -> None:
    """设置日志系统"""
    logging_cfg = logging_cfg or {}
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, str(logging_cfg.get('level', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=logging_cfg.get('format', _DEFAULT_FORMAT),
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cut-detect',
        description='Find segments removed from a copy of an audio recording.',
    )
    parser.add_argument('original', help='unmodified recording')
    parser.add_argument('copy', help='copy of the recording with segments cut out')
    parser.add_argument('--window-len', type=float, default=None,
                        help='resync search window in seconds; bounds the longest detectable cut')
    parser.add_argument('--config', default=None, help='YAML file overriding the packaged defaults')
    parser.add_argument('--sample-rate', type=int, default=None,
                        help='decode and resample both inputs to this rate')
    parser.add_argument('--json', action='store_true', help='print a JSON report instead of text lines')
    parser.add_argument('-o', '--output', default=None, help='write the JSON report to this file')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def render_text(result: ScanResult) -> List[str]:
    lines: List[str] = []
    for cut in result.cuts:
        lines.append(f"Cut at {format_sample_index(cut.start, result.sample_rate)}")
        lines.append(f"Cut end at {format_sample_index(cut.end, result.sample_rate)}")
    if not result.cuts:
        lines.append("No cuts found")
    return lines


def build_report(result: ScanResult, original: Path, copy: Path, config: ScanConfig) -> Dict[str, Any]:
    report = result.to_dict()
    report['job'] = {'original': original.as_posix(), 'copy': copy.as_posix()}
    report['config'] = config.to_mapping()
    report['config']['audio']['sample_rate'] = result.sample_rate
    for entry in report['cuts']:
        entry['start_time'] = format_sample_index(entry['start'], result.sample_rate)
        entry['end_time'] = format_sample_index(entry['end'], result.sample_rate)
    return report


def run(args: argparse.Namespace) -> int:
    overrides: Dict[str, Any] = {}
    if args.sample_rate:
        overrides['audio.sample_rate'] = args.sample_rate
    config = load_scan_config(args.config, overrides)
    setup_logging(args.verbose, config.logging)

    original_path = Path(args.original).expanduser().resolve()
    copy_path = Path(args.copy).expanduser().resolve()

    with ExitStack() as stack:
        original = open_sample_source(original_path, args.sample_rate)
        stack.callback(getattr(original, 'close', lambda: None))
        copy = open_sample_source(copy_path, args.sample_rate)
        stack.callback(getattr(copy, 'close', lambda: None))

        scanner = CutScanner(config)
        try:
            result = scanner.scan(original, copy, args.window_len)
        except CutScanError as exc:
            logger.error(f"扫描失败: {exc}")
            for cut in exc.cuts:
                logger.error(f"失败前已检测到的剪切: [{cut.start}, {cut.end})")
            return 1

    if args.json or args.output:
        report = build_report(result, original_path, copy_path, config)
        payload = json.dumps(report, ensure_ascii=False, indent=2)
        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(payload + '\n', encoding='utf-8')
            logger.info(f"报告已保存: {output_path}")
        if args.json:
            print(payload)
    if not args.json:
        for line in render_text(result):
            print(line)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except FileNotFoundError as exc:
        logger.error(str(exc))
        return 2
    except CutScanError as exc:
        # 配置错误在扫描开始前抛出
        logger.error(f"配置无效: {exc}")
        return 2


if __name__ == '__main__':
    sys.exit(main())
