# File: tests/conftest.py
# AI-SUMMARY: 提供 src/ 导入路径、合成噪声音频夹具与 slow 标记的收集期跳过策略（CLI 与环境变量开关）。

import os
import sys
from pathlib import Path

import numpy as np
import pytest

# 确保可以通过包路径导入 src/
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _env_true(name: str) -> bool:
    return os.environ.get(name, '').strip() in {'1', 'true', 'True', 'YES', 'yes'}


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup('capability toggles')
    group.addoption('--runslow', action='store_true', default=False, help='run tests marked as slow')


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line('markers', 'slow: full sample-rate scenarios, enable with --runslow')


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_slow = config.getoption('--runslow') or _env_true('CUTDETECT_RUN_SLOW')
    skip_slow = pytest.mark.skip(reason='slow test skipped; enable with --runslow or CUTDETECT_RUN_SLOW=1')
    for item in items:
        if 'slow' in item.keywords and not run_slow:
            item.add_marker(skip_slow)


def make_noise(num_samples: int, seed: int = 7) -> np.ndarray:
    """White noise stand-in for a recording: every window is distinct."""
    rng = np.random.default_rng(seed)
    return rng.standard_normal(num_samples)


def remove_spans(samples: np.ndarray, spans) -> np.ndarray:
    """Copy of ``samples`` with each ``[start, end)`` span cut out."""
    keep = np.ones(samples.size, dtype=bool)
    for start, end in spans:
        keep[start:end] = False
    return samples[keep]


@pytest.fixture
def noise():
    return make_noise


@pytest.fixture
def cut_out():
    return remove_spans
