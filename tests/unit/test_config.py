# File: tests/unit/test_config.py
# AI-SUMMARY: 扫描配置的默认值、YAML/环境变量/运行时覆盖层次与参数校验测试。

import pytest
import yaml

from cut_detect.config import ScanConfig, load_scan_config, scan_config_from_mapping
from cut_detect.config.settings import DetectionConfig, ResyncConfig
from cut_detect.errors import ConfigurationError


def test_packaged_defaults():
    config = load_scan_config(environ={})
    assert config.sample_rate == 44100
    assert config.detection.correlation_threshold == 0.95
    assert config.correlation_window_samples == 44100
    assert config.resync.window_len_s == 10.0
    assert config.resync.distance == 'mass'
    assert config.logging['level'] == 'INFO'


def test_layers_override_in_order(tmp_path):
    user = tmp_path / 'user.yaml'
    user.write_text(yaml.safe_dump({'resync': {'window_len_s': 20.0, 'match_threshold': 0.8}}), encoding='utf-8')
    config = load_scan_config(
        user,
        overrides={'resync.match_threshold': 0.85},
        environ={'CUTDETECT__RESYNC__WINDOW_LEN_S': '30.5', 'UNRELATED': 'x'},
    )
    assert config.resync.window_len_s == 30.5
    assert config.resync.match_threshold == 0.85
    assert config.detection.correlation_window_s == 1.0


def test_window_samples_conversion():
    config = ScanConfig(sample_rate=8000)
    assert config.correlation_window_samples == 8000
    assert config.window_samples(2.5) == 20000
    assert config.min_reference_samples == 800
    with pytest.raises(ConfigurationError):
        config.window_samples(1.0)
    with pytest.raises(ConfigurationError):
        config.window_samples(0)


@pytest.mark.parametrize('kwargs', [
    {'sample_rate': 0},
    {'detection': DetectionConfig(correlation_threshold=1.5)},
    {'detection': DetectionConfig(correlation_window_s=0.0)},
    {'resync': ResyncConfig(distance='dtw')},
    {'resync': ResyncConfig(window_len_s=0.5)},
    {'resync': ResyncConfig(min_reference_s=2.0)},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        ScanConfig(**kwargs)


def test_mapping_round_trip_and_version_check():
    config = ScanConfig(sample_rate=22050)
    assert scan_config_from_mapping(config.to_mapping()) == config
    with pytest.raises(ConfigurationError):
        scan_config_from_mapping({'version': 2})
    with pytest.raises(ConfigurationError):
        scan_config_from_mapping({'audio': {'sample_rate': 'fast'}})


def test_missing_user_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scan_config(tmp_path / 'nope.yaml', environ={})
