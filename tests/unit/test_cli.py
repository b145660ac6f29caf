# File: tests/unit/test_cli.py
# AI-SUMMARY: 时间戳格式化与命令行入口（文本/JSON 输出、错误退出码）测试。

import json

import pytest
import soundfile as sf

from cut_detect.cli import main
from cut_detect.utils.timefmt import format_sample_index, format_timestamp

SR = 8000


@pytest.mark.parametrize('seconds, expected', [
    (0, '0:00:00.000'),
    (3.75, '0:00:03.750'),
    (3723.5, '1:02:03.500'),
    (-2.0, '0:00:00.000'),
])
def test_format_timestamp(seconds, expected):
    assert format_timestamp(seconds) == expected


def test_format_sample_index():
    assert format_sample_index(36000, SR) == '0:00:04.500'
    with pytest.raises(ValueError):
        format_sample_index(10, 0)


@pytest.fixture
def wav_pair(tmp_path, noise, cut_out):
    orig = 0.3 * noise(96000, seed=71)
    copy = cut_out(orig, [(30000, 36000)])
    orig_path = tmp_path / 'original.wav'
    copy_path = tmp_path / 'copy.wav'
    sf.write(str(orig_path), orig, SR, subtype='FLOAT')
    sf.write(str(copy_path), copy, SR, subtype='FLOAT')
    return orig_path, copy_path


def test_cli_prints_cut_lines(wav_pair, capsys):
    orig_path, copy_path = wav_pair
    assert main([str(orig_path), str(copy_path), '--window-len', '3']) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ['Cut at 0:00:03.750', 'Cut end at 0:00:04.500']


def test_cli_json_report(wav_pair, tmp_path, capsys):
    orig_path, copy_path = wav_pair
    report_path = tmp_path / 'out' / 'cuts.json'
    code = main([str(orig_path), str(copy_path), '--window-len', '3', '--json', '-o', str(report_path)])
    assert code == 0
    printed = json.loads(capsys.readouterr().out)
    saved = json.loads(report_path.read_text(encoding='utf-8'))
    assert printed == saved
    assert printed['sample_rate'] == SR
    assert printed['cuts'] == [{
        'start': 30000,
        'end': 36000,
        'length': 6000,
        'start_s': 3.75,
        'end_s': 4.5,
        'start_time': '0:00:03.750',
        'end_time': '0:00:04.500',
    }]


def test_cli_reports_scan_failure(wav_pair):
    orig_path, copy_path = wav_pair
    # 1.5 秒窗口最多只能检测 0.5 秒的剪切
    assert main([str(orig_path), str(copy_path), '--window-len', '1.5']) == 1


def test_cli_missing_input(tmp_path):
    assert main([str(tmp_path / 'a.wav'), str(tmp_path / 'b.wav')]) == 2
