"""
Unit tests for RR interval sequence construction.

Tests for:
- N beats -> N-1 intervals in chronological order
- Index-based neighbour lookup
- Degenerate inputs
- Reference values and outlier flagging
- Outlier correction (missed, ectopic and extra beats)
"""

import pytest
import numpy as np
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config.analysis_config import OutlierConfig
from preprocessing.rr_intervals import OutlierKind, RRIntervalSequence, build_rr_sequence


# =============================================================================
# CONSTRUCTION TESTS
# =============================================================================

class TestSequenceConstruction:
    """Tests for building the sequence from heartbeats."""

    def test_interval_count_is_beats_minus_one(self, normal_beats):
        """N heartbeats give N-1 intervals."""
        seq = build_rr_sequence(normal_beats)
        assert len(seq) == len(normal_beats) - 1

    def test_durations_match_rr(self, normal_beats, normal_rr):
        """Durations reproduce the RR series the beats were built from."""
        seq = RRIntervalSequence.from_heartbeats(normal_beats)
        np.testing.assert_allclose(seq.durations(), normal_rr, atol=1 / 360)

    def test_chronological_order(self, normal_beats):
        """Interval k spans beats k and k+1 and originates from beat k+1."""
        seq = build_rr_sequence(normal_beats)
        for k, rri in enumerate(seq):
            assert rri.index == k
            assert rri.r_peak1 == normal_beats[k].r_position
            assert rri.r_peak2 == normal_beats[k + 1].r_position
            assert rri.heartbeat is normal_beats[k + 1]
        assert np.all(np.diff(seq.timestamps()) > 0)

    def test_neighbours_are_adjacent(self, normal_beats):
        """previous/next resolve to the (k-1)-th and (k+1)-th intervals."""
        seq = build_rr_sequence(normal_beats)
        for k in range(len(seq)):
            prev = seq.previous(k)
            nxt = seq.next(k)
            if k == 0:
                assert prev is None
            else:
                assert prev is seq[k - 1]
            if k == len(seq) - 1:
                assert nxt is None
            else:
                assert nxt is seq[k + 1]

    def test_timestamp_is_midpoint(self, beat_factory):
        """Timestamps sit halfway between both R peaks."""
        seq = build_rr_sequence(beat_factory([1.0], fs=100, start=0))
        assert seq[0].timestamp == 50.0
        assert seq[0].timestamp_sec == 0.5
        assert seq[0].value == 100


# =============================================================================
# DEGENERATE INPUT TESTS
# =============================================================================

class TestDegenerateInput:
    """Fewer than two beats must not crash."""

    def test_no_beats(self):
        seq = build_rr_sequence([])
        assert len(seq) == 0
        assert seq.durations().shape == (0,)

    def test_single_beat(self, beat_factory):
        seq = build_rr_sequence(beat_factory([])[:1])
        assert len(seq) == 0

    def test_two_beats(self, beat_factory):
        seq = build_rr_sequence(beat_factory([0.8]))
        assert len(seq) == 1
        assert seq.previous(0) is None
        assert seq.next(0) is None

    def test_out_of_range_neighbours(self, normal_beats):
        seq = build_rr_sequence(normal_beats)
        assert seq.previous(len(seq)) is None
        assert seq.next(-1) is None


# =============================================================================
# EXPORT AND OUTLIER TESTS
# =============================================================================

class TestSequenceViews:
    """Tests for tabular export, reference values and outliers."""

    def test_to_frame(self, normal_beats):
        frame = build_rr_sequence(normal_beats).to_frame()
        assert len(frame) == len(normal_beats) - 1
        assert list(frame.columns) == ['index', 'r_peak1', 'r_peak2', 'value', 'duration', 'timestamp']

    def test_to_frame_empty(self):
        frame = build_rr_sequence([]).to_frame()
        assert len(frame) == 0

    def test_reference_values_running_median(self, beat_factory):
        seq = build_rr_sequence(beat_factory([0.8, 1.0, 0.9], fs=100))
        np.testing.assert_allclose(seq.reference_values(window=2), [0.8, 0.9, 0.95])

    def test_flag_outliers(self, beat_factory):
        """A premature interval and its compensatory pause are flagged."""
        rr = [0.8, 0.8, 0.8, 0.8, 0.5, 1.1, 0.8, 0.8]
        seq = build_rr_sequence(beat_factory(rr, fs=100))
        mask = seq.flag_outliers(percent=0.15)
        assert mask.tolist() == [False, False, False, False, True, True, False, False]

    def test_flag_outliers_regular_rhythm(self, normal_beats):
        mask = build_rr_sequence(normal_beats).flag_outliers()
        assert not mask.any()


# =============================================================================
# OUTLIER CORRECTION TESTS
# =============================================================================

REGULAR = [0.8] * 7


class TestOutlierCorrection:
    """Tests for correct_outliers / corrected."""

    def test_regular_rhythm_unchanged(self, normal_beats, normal_rr):
        result = build_rr_sequence(normal_beats).correct_outliers()
        assert result.corrections == []
        np.testing.assert_allclose(result.sequence.durations(), normal_rr, atol=1 / 360)

    def test_missed_beat_is_split(self, beat_factory):
        beats = beat_factory(REGULAR + [1.6] + [0.8] * 3, fs=100)
        seq = build_rr_sequence(beats)
        result = seq.correct_outliers()
        assert result.corrections == [(7, OutlierKind.MISSED_BEAT)]
        assert len(result.sequence) == len(seq) + 1
        np.testing.assert_allclose(result.sequence.durations(), 0.8)
        assert result.sequence[7].heartbeat is None
        assert result.sequence[8].heartbeat is beats[8]

    def test_ectopic_pair_is_balanced(self, beat_factory):
        seq = build_rr_sequence(beat_factory(REGULAR + [0.6, 1.0] + [0.8] * 3, fs=100))
        result = seq.correct_outliers()
        assert result.corrections == [(7, OutlierKind.ECTOPIC)]
        assert len(result.sequence) == len(seq)
        np.testing.assert_allclose(result.sequence.durations(), 0.8)

    def test_extra_beat_is_merged(self, beat_factory):
        seq = build_rr_sequence(beat_factory(REGULAR + [0.3, 0.5] + [0.8] * 3, fs=100))
        result = seq.correct_outliers()
        assert result.corrections == [(7, OutlierKind.EXTRA_BEAT)]
        assert len(result.sequence) == len(seq) - 1
        np.testing.assert_allclose(result.sequence.durations(), 0.8)

    def test_unexplained_outlier_removed(self, beat_factory):
        seq = build_rr_sequence(beat_factory(REGULAR + [1.2] + [0.8] * 3, fs=100))
        result = seq.correct_outliers()
        assert result.corrections == [(7, OutlierKind.REMOVED)]
        assert len(result.sequence) == len(seq) - 1

    def test_outlier_during_warm_up_removed(self, beat_factory):
        seq = build_rr_sequence(beat_factory([0.8, 0.8, 1.6, 0.8, 0.8], fs=100))
        result = seq.correct_outliers()
        assert result.corrections == [(2, OutlierKind.REMOVED)]
        np.testing.assert_allclose(result.sequence.durations(), [0.8] * 4)

    def test_zero_intervals_deleted(self, beat_factory):
        seq = build_rr_sequence(beat_factory([0.8, 0.0, 0.8, 0.8], fs=100))
        result = seq.correct_outliers()
        assert result.count(OutlierKind.REMOVED) == 1
        assert [rri.index for rri in result.sequence] == [0, 1, 2]
        assert np.all(result.sequence.values() > 0)

    def test_implausible_first_interval_deleted(self, beat_factory):
        seq = build_rr_sequence(beat_factory([1.5, 0.8, 0.8], fs=100))
        result = seq.correct_outliers()
        assert result.corrections == [(0, OutlierKind.REMOVED)]
        np.testing.assert_allclose(result.sequence.durations(), [0.8, 0.8])

    def test_source_sequence_untouched(self, beat_factory):
        seq = build_rr_sequence(beat_factory(REGULAR + [1.6] + [0.8] * 3, fs=100))
        before = seq.values().copy()
        seq.corrected()
        np.testing.assert_array_equal(seq.values(), before)

    def test_empty_sequence(self):
        result = build_rr_sequence([]).correct_outliers()
        assert len(result.sequence) == 0
        assert result.corrections == []

    def test_custom_first_interval_limits(self, beat_factory):
        seq = build_rr_sequence(beat_factory([1.5, 1.5, 1.5], fs=100))
        config = OutlierConfig(max_first_rr_ms=2000.0)
        assert len(seq.corrected(config)) == 3
        assert len(seq.corrected()) == 0
