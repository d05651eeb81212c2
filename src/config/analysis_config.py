"""
Analysis configuration for rhythm classification and HRV.

Every threshold used by the classifiers and HRV engines lives here, so a
deployment can tune them in one place. Defaults reproduce the published
rule sets (Tsipouras RR rules, physiological QRS/PQ limits) and the
standard HRV frequency bands.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional, Tuple


# =============================================================================
# EPISODIC RHYTHM RULES
# =============================================================================

@dataclass
class RhythmRuleConfig:
    """
    Thresholds for the RR-interval rule classifier.

    All durations are in seconds.
    """
    # === VF episode trigger ===
    vf_trigger_max_rr: float = 0.6          # rr2 must be below this
    vf_trigger_ratio: float = 1.8           # ratio * rr2 < rr1

    # === VF episode continuation ===
    vf_continue_max_rr: float = 0.7         # all three intervals below this...
    vf_continue_max_sum: float = 1.7        # ...or their sum below this
    vf_min_episode_length: int = 4          # shorter episodes are retracted

    # === PVC ===
    pvc_prematurity_ratio: float = 1.15     # ratio * rr2 < rr1 and rr3
    pvc_max_pair_diff: float = 0.3
    pvc_max_pair_rr: float = 0.8
    pvc_compensatory_ratio: float = 1.2

    # === Second degree heart block ===
    bii_min_rr: float = 2.2
    bii_max_rr: float = 3.0
    bii_max_neighbor_diff: float = 0.2

    def validate(self) -> bool:
        """Validate configuration consistency."""
        if self.vf_min_episode_length < 1:
            raise ValueError("vf_min_episode_length must be at least 1")
        if self.bii_min_rr >= self.bii_max_rr:
            raise ValueError("bii_min_rr must be below bii_max_rr")
        for name in ('vf_trigger_max_rr', 'vf_trigger_ratio', 'vf_continue_max_rr',
                     'vf_continue_max_sum', 'pvc_prematurity_ratio'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        return True


# =============================================================================
# PER-BEAT MORPHOLOGY
# =============================================================================

@dataclass
class MorphologyConfig:
    """
    Physiological limits for single-beat classification.

    The QRS width limits extend the normal 60-100 ms range by roughly 20%
    to absorb deflection-point detection error.
    """
    min_qrs_width_sec: float = 0.05
    max_qrs_width_sec: float = 0.13
    max_q_to_r_ratio: float = 0.35
    max_pq_time_sec: float = 0.25

    def validate(self) -> bool:
        """Validate configuration consistency."""
        if not 0 < self.min_qrs_width_sec < self.max_qrs_width_sec:
            raise ValueError("QRS width limits must satisfy 0 < min < max")
        if self.max_q_to_r_ratio <= 0:
            raise ValueError("max_q_to_r_ratio must be positive")
        if self.max_pq_time_sec <= 0:
            raise ValueError("max_pq_time_sec must be positive")
        return True


# =============================================================================
# RR OUTLIER CORRECTION
# =============================================================================

@dataclass
class OutlierConfig:
    """
    Outlier detection and correction for RR interval sequences.

    Ratios are relative to the running median of accepted intervals.
    """
    reference_length: int = 6               # accepted intervals in the median

    # === First interval must be plausible ===
    min_first_rr_ms: float = 300.0
    max_first_rr_ms: float = 1200.0

    # === Detection ===
    long_rr_ms: float = 500.0               # long intervals use the high threshold
    percent_high: float = 0.2               # vs. reference AND previous interval
    percent_low: float = 0.1                # vs. reference only

    # === Correction ===
    missed_beat_range: Tuple[float, float] = (1.8, 2.2)     # interval ~ 2x reference
    ectopic_range: Tuple[float, float] = (0.675, 0.825)     # short interval ...
    ectopic_pair_range: Tuple[float, float] = (1.8, 2.2)    # ... followed by its compensation
    extra_beat_range: Tuple[float, float] = (0.8, 1.2)      # interval + next ~ reference

    def validate(self) -> bool:
        """Validate configuration consistency."""
        if self.reference_length < 1:
            raise ValueError("reference_length must be at least 1")
        if not 0 <= self.min_first_rr_ms < self.max_first_rr_ms:
            raise ValueError("First interval limits must satisfy 0 <= min < max")
        if self.percent_high <= 0 or self.percent_low <= 0:
            raise ValueError("Outlier percentages must be positive")
        for low, high in (self.missed_beat_range, self.ectopic_range,
                          self.ectopic_pair_range, self.extra_beat_range):
            if not 0 < low < high:
                raise ValueError(f"Invalid correction range ({low}, {high})")
        return True


# =============================================================================
# HEART RATE VARIABILITY
# =============================================================================

WINDOW_TYPES = ('hamming', 'hanning')


@dataclass
class HRVConfig:
    """Parameters for time- and frequency-domain HRV."""
    sampling_rate: float = 1.0              # Hz of the input unit; 1.0 = seconds
    resampling_rate: float = 4.0            # Hz of the uniform spectral grid
    window: Optional[str] = 'hamming'       # 'hamming', 'hanning' or None
    nn50_threshold_ms: float = 50.0

    # Frequency bands (Hz)
    vlf_band: Tuple[float, float] = (0.003, 0.04)
    lf_band: Tuple[float, float] = (0.04, 0.15)
    hf_band: Tuple[float, float] = (0.15, 0.4)

    def validate(self) -> bool:
        """Validate configuration consistency."""
        if self.sampling_rate <= 0:
            raise ValueError("sampling_rate must be positive")
        if self.resampling_rate <= 0:
            raise ValueError("resampling_rate must be positive")
        if self.window is not None and self.window not in WINDOW_TYPES:
            raise ValueError(f"Unknown window '{self.window}', expected one of {WINDOW_TYPES}")
        for low, high in (self.vlf_band, self.lf_band, self.hf_band):
            if not 0 <= low < high:
                raise ValueError(f"Invalid frequency band ({low}, {high})")
        return True


# =============================================================================
# AGGREGATE
# =============================================================================

@dataclass
class AnalysisConfig:
    """Complete configuration for one analysis run."""
    rhythm: RhythmRuleConfig = field(default_factory=RhythmRuleConfig)
    morphology: MorphologyConfig = field(default_factory=MorphologyConfig)
    hrv: HRVConfig = field(default_factory=HRVConfig)
    outliers: OutlierConfig = field(default_factory=OutlierConfig)

    def validate(self) -> bool:
        """Validate all sections."""
        return (self.rhythm.validate() and self.morphology.validate() and
                self.hrv.validate() and self.outliers.validate())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisConfig':
        """Create from dictionary. Missing sections fall back to defaults."""
        hrv = dict(data.get('hrv', {}))
        for band in ('vlf_band', 'lf_band', 'hf_band'):
            if band in hrv:
                hrv[band] = tuple(hrv[band])
        outliers = dict(data.get('outliers', {}))
        for key, value in outliers.items():
            if key.endswith('_range'):
                outliers[key] = tuple(value)
        config = cls(
            rhythm=RhythmRuleConfig(**data.get('rhythm', {})),
            morphology=MorphologyConfig(**data.get('morphology', {})),
            hrv=HRVConfig(**hrv),
            outliers=OutlierConfig(**outliers),
        )
        config.validate()
        return config


def get_default_config() -> AnalysisConfig:
    """Get the default analysis configuration."""
    return AnalysisConfig()
