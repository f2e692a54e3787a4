import pytest

from midi_uniforms.midi.tempo import TempoEstimator


def test_steady_taps_give_120_bpm():
    tempo = TempoEstimator('left')
    assert tempo.on_sync_edge(0.0) == 0.0
    assert tempo.on_sync_edge(0.5) == pytest.approx(120.0)
    assert tempo.on_sync_edge(1.0) == pytest.approx(120.0)


def test_stale_gap_restarts_reference():
    tempo = TempoEstimator('left')
    tempo.on_sync_edge(0.0)
    assert tempo.on_sync_edge(3.1) == 0.0
    assert tempo.last_edge_time == 3.1
    assert tempo.on_sync_edge(3.6) == pytest.approx(120.0)


def test_sweep_clears_reference_but_keeps_bpm():
    tempo = TempoEstimator('left', staleness_window=2.0)
    tempo.on_sync_edge(0.0)
    tempo.on_sync_edge(0.5)

    tempo.sweep(2.0)
    assert tempo.last_edge_time == 0.5

    tempo.sweep(2.6)
    assert tempo.last_edge_time is None
    assert tempo.bpm == pytest.approx(120.0)


def test_tiny_intervals_are_discarded():
    tempo = TempoEstimator('left', min_interval=0.05)
    tempo.on_sync_edge(1.0)
    assert tempo.on_sync_edge(1.0) == 0.0
    assert tempo.on_sync_edge(1.01) == 0.0
    assert tempo.last_edge_time == 1.01


def test_reset():
    tempo = TempoEstimator('left')
    tempo.on_sync_edge(0.0)
    tempo.on_sync_edge(0.5)
    tempo.reset()
    assert tempo.bpm == 0.0
    assert tempo.last_edge_time is None
