# File: tests/unit/test_scanner.py
# AI-SUMMARY: 剪切扫描器端到端测试：恒等、单/多剪切往返、首尾剪切、编码噪声、失败时的部分结果与前置校验。

import datetime

import numpy as np
import pytest

from cut_detect import produce_cuts
from cut_detect.config import ScanConfig
from cut_detect.config.settings import ResyncConfig
from cut_detect.core.scanner import CutRecord, CutScanner, ScanState
from cut_detect.errors import ConfigurationError, CutScanError
from cut_detect.io.sources import ArraySampleSource

SR = 8000
CONFIG = ScanConfig(sample_rate=SR)


class CountingSource(ArraySampleSource):
    """Array source recording every seek."""

    def __init__(self, samples, sample_rate=SR):
        super().__init__(samples, sample_rate)
        self.seeks = []

    def seek(self, index):
        self.seeks.append(index)
        super().seek(index)


def _scan(orig, copy, window_len=3.0, config=CONFIG):
    return produce_cuts(ArraySampleSource(orig, SR), ArraySampleSource(copy, SR), window_len, config)


def test_identical_streams_have_no_cuts(noise):
    samples = noise(60000)
    original, copy = CountingSource(samples), CountingSource(samples.copy())
    result = CutScanner(CONFIG).scan(original, copy, 3.0)
    assert result.cuts == []
    assert result.iterations == 0
    assert original.seeks == [] and copy.seeks == []


def test_single_cut_round_trip(noise, cut_out):
    orig = noise(96000)
    cuts = _scan(orig, cut_out(orig, [(30000, 36000)]))
    assert len(cuts) == 1
    assert abs(cuts[0].start - 30000) <= 1
    assert abs(cuts[0].end - 36000) <= 1


def test_multiple_cuts_are_ordered_and_account_for_the_difference(noise, cut_out):
    orig = noise(120000, seed=41)
    spans = [(20000, 23000), (50000, 54000), (80000, 82000)]
    copy = cut_out(orig, spans)
    cuts = _scan(orig, copy)
    assert len(cuts) == 3
    for prev, cur in zip(cuts, cuts[1:]):
        assert prev.end <= cur.start
    assert sum(cut.length for cut in cuts) == len(orig) - len(copy)
    assert [(cut.start, cut.end) for cut in cuts] == spans


def test_cut_at_the_very_start(noise):
    orig = noise(60000, seed=42)
    cuts = _scan(orig, orig[4000:])
    assert cuts == [CutRecord(0, 4000)]


def test_cut_at_the_very_end(noise):
    orig = noise(60000, seed=43)
    cuts = _scan(orig, orig[:-5000])
    assert cuts == [CutRecord(55000, 60000)]


def test_cut_close_to_the_end(noise, cut_out):
    orig = noise(60000, seed=44)
    cuts = _scan(orig, cut_out(orig, [(57000, 58500)]))
    assert cuts == [CutRecord(57000, 58500)]


def test_empty_copy_is_one_cut(noise):
    orig = noise(20000, seed=45)
    assert _scan(orig, orig[:0]) == [CutRecord(0, 20000)]


def test_encoding_noise_is_tolerated(noise, cut_out):
    orig = noise(96000, seed=46)
    copy = cut_out(orig, [(40000, 44500)]) + 1e-3 * noise(91500, seed=47)
    cuts = _scan(orig, copy)
    assert len(cuts) == 1
    assert abs(cuts[0].start - 40000) <= 1
    assert abs(cuts[0].end - 44500) <= 1


def test_naive_distance_configuration(noise, cut_out):
    config = ScanConfig(sample_rate=SR, resync=ResyncConfig(distance='naive'))
    orig = noise(64000, seed=48)
    cuts = _scan(orig, cut_out(orig, [(25000, 27000)]), window_len=1.5, config=config)
    assert cuts == [CutRecord(25000, 27000)]


def test_source_sample_rate_overrides_config(noise, cut_out):
    orig = noise(96000, seed=49)
    copy = cut_out(orig, [(30000, 33000)])
    cuts = produce_cuts(ArraySampleSource(orig, SR), ArraySampleSource(copy, SR), datetime.timedelta(seconds=3))
    assert cuts == [CutRecord(30000, 33000)]


def test_failure_carries_partial_results(noise, cut_out):
    orig = noise(120000, seed=50)
    copy = cut_out(orig, [(20000, 22000), (60000, 72000)])
    with pytest.raises(ConfigurationError) as excinfo:
        _scan(orig, copy, window_len=2.0)
    assert excinfo.value.cuts == [CutRecord(20000, 22000)]


def test_copy_longer_than_original_rejected(noise):
    samples = noise(20000, seed=51)
    with pytest.raises(ConfigurationError):
        _scan(samples[:10000], samples)


def test_sample_rate_mismatch_rejected(noise):
    samples = noise(20000, seed=52)
    with pytest.raises(ConfigurationError):
        produce_cuts(ArraySampleSource(samples, 8000), ArraySampleSource(samples[:15000], 16000), 3.0)


def test_window_len_checked_before_scanning(noise):
    samples = noise(20000, seed=53)
    original, copy = CountingSource(samples), CountingSource(samples[:15000])
    with pytest.raises(ConfigurationError):
        CutScanner(CONFIG).scan(original, copy, 0.5)
    assert original.seeks == []


def test_scan_result_report(noise, cut_out):
    orig = noise(96000, seed=54)
    result = CutScanner(CONFIG).scan(
        ArraySampleSource(orig, SR), ArraySampleSource(cut_out(orig, [(30000, 36000)]), SR), 3.0
    )
    report = result.to_dict()
    assert report['total_cut_samples'] == 6000
    assert report['cuts'][0]['start_s'] == pytest.approx(3.75)
    assert result.state == ScanState(offset=30000, cut_duration=6000)


def test_state_and_record_invariants():
    state = ScanState(offset=100, cut_duration=10)
    assert state.advance(150, 5) == ScanState(150, 15)
    with pytest.raises(ValueError):
        state.advance(50, 5)
    with pytest.raises(ValueError):
        CutRecord(10, 5)
    assert CutRecord(8000, 12000).to_seconds(8000) == (1.0, 1.5)


def test_scan_error_is_catchable_as_base(noise, cut_out):
    orig = noise(120000, seed=55)
    copy = cut_out(orig, [(60000, 75000)])
    with pytest.raises(CutScanError):
        _scan(orig, copy, window_len=1.5)


@pytest.mark.slow
def test_full_rate_scenario(noise, cut_out):
    sr = 44100
    orig = 0.2 * noise(sr * 40, seed=60)
    spans = [(sr * 7, sr * 9 + 123), (sr * 21 + 17, sr * 24)]
    copy = cut_out(orig, spans)
    cuts = produce_cuts(ArraySampleSource(orig, sr), ArraySampleSource(copy, sr), window_len=5)
    assert [(cut.start, cut.end) for cut in cuts] == spans
