"""
Unit tests for analysis configuration.

Tests for:
- Default thresholds
- Validation errors
- Dictionary round trip
"""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config.analysis_config import (
    AnalysisConfig,
    HRVConfig,
    MorphologyConfig,
    OutlierConfig,
    RhythmRuleConfig,
    get_default_config,
)


class TestDefaults:
    """Default values match the published rule sets."""

    def test_default_config_valid(self):
        assert get_default_config().validate()

    def test_rhythm_defaults(self):
        config = RhythmRuleConfig()
        assert config.vf_trigger_max_rr == 0.6
        assert config.vf_min_episode_length == 4
        assert (config.bii_min_rr, config.bii_max_rr) == (2.2, 3.0)

    def test_hrv_defaults(self):
        config = HRVConfig()
        assert config.resampling_rate == 4.0
        assert config.window == 'hamming'
        assert config.lf_band == (0.04, 0.15)


class TestValidation:
    """Invalid settings raise ValueError."""

    @pytest.mark.parametrize("kwargs", [
        {'vf_min_episode_length': 0},
        {'bii_min_rr': 3.0, 'bii_max_rr': 2.0},
        {'vf_trigger_ratio': 0},
    ])
    def test_rhythm(self, kwargs):
        with pytest.raises(ValueError):
            RhythmRuleConfig(**kwargs).validate()

    @pytest.mark.parametrize("kwargs", [
        {'min_qrs_width_sec': 0.2},
        {'max_q_to_r_ratio': 0},
        {'max_pq_time_sec': -1},
    ])
    def test_morphology(self, kwargs):
        with pytest.raises(ValueError):
            MorphologyConfig(**kwargs).validate()

    @pytest.mark.parametrize("kwargs", [
        {'sampling_rate': 0},
        {'resampling_rate': -4},
        {'window': 'kaiser'},
        {'lf_band': (0.15, 0.04)},
    ])
    def test_hrv(self, kwargs):
        with pytest.raises(ValueError):
            HRVConfig(**kwargs).validate()

    def test_window_none_allowed(self):
        assert HRVConfig(window=None).validate()


class TestSerialization:
    """Tests for to_dict / from_dict."""

    def test_round_trip(self):
        config = AnalysisConfig(
            rhythm=RhythmRuleConfig(vf_min_episode_length=5),
            hrv=HRVConfig(window='hanning', hf_band=(0.15, 0.5)),
        )
        restored = AnalysisConfig.from_dict(config.to_dict())
        assert restored == config

    def test_partial_dict(self):
        restored = AnalysisConfig.from_dict({'morphology': {'max_pq_time_sec': 0.3}})
        assert restored.morphology.max_pq_time_sec == 0.3
        assert restored.rhythm == RhythmRuleConfig()

    def test_invalid_dict(self):
        with pytest.raises(ValueError):
            AnalysisConfig.from_dict({'hrv': {'window': 'kaiser'}})


class TestOutlierConfig:
    """Tests for RR outlier correction settings."""

    def test_defaults(self):
        config = OutlierConfig()
        assert config.reference_length == 6
        assert (config.min_first_rr_ms, config.max_first_rr_ms) == (300.0, 1200.0)
        assert config.missed_beat_range == (1.8, 2.2)
        assert config.validate()

    @pytest.mark.parametrize("kwargs", [
        {'reference_length': 0},
        {'min_first_rr_ms': 1300.0},
        {'percent_low': 0},
        {'ectopic_range': (0.9, 0.7)},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            OutlierConfig(**kwargs).validate()

    def test_round_trip(self):
        config = AnalysisConfig(outliers=OutlierConfig(extra_beat_range=(0.85, 1.15)))
        restored = AnalysisConfig.from_dict(config.to_dict())
        assert restored.outliers == config.outliers
