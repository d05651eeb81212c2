"""
Core data contracts for ECG rhythm and HRV analysis.

Heartbeats and QRS complexes are produced by an upstream detector and are
read-only here. All positions are absolute sample indices into the source
ECG; durations exposed as properties are in seconds.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class QrsClass(Enum):
    """Public beat/rhythm classification."""
    UNKNOWN = "unknown"
    NORMAL = "normal"
    ABNORMAL = "abnormal"


@dataclass(frozen=True)
class QrsComplex:
    """
    Morphological description of one QRS complex.

    Attributes:
        r_position: R-peak sample index in the source signal
        r_value: R-peak amplitude
        q_value: Q-peak amplitude
        baseline_value: Assumed baseline amplitude around the complex
        qrs_width_samples: Samples from Q deflection start to S deflection end
        sampling_rate: Sampling rate of the source signal (Hz)
        previous_r_position: R-peak sample index of the preceding beat
        s_value: S-peak amplitude, if detected
    """
    r_position: int
    r_value: float
    q_value: float
    baseline_value: float
    qrs_width_samples: int
    sampling_rate: float
    previous_r_position: Optional[int] = None
    s_value: Optional[float] = None

    @property
    def qrs_width(self) -> float:
        """QRS width in seconds."""
        return self.qrs_width_samples / self.sampling_rate

    @property
    def rr_distance(self) -> Optional[int]:
        """Samples between the previous R peak and this one."""
        if self.previous_r_position is None:
            return None
        return self.r_position - self.previous_r_position

    @property
    def rr_interval(self) -> float:
        """RR interval to the previous beat in seconds, NaN for the first beat."""
        if self.previous_r_position is None:
            return float('nan')
        return self.rr_distance / self.sampling_rate

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'r_position': self.r_position,
            'r_value': self.r_value,
            'q_value': self.q_value,
            'baseline_value': self.baseline_value,
            'qrs_width_samples': self.qrs_width_samples,
            'sampling_rate': self.sampling_rate,
            'previous_r_position': self.previous_r_position,
            's_value': self.s_value,
        }


@dataclass(frozen=True)
class Heartbeat:
    """
    A detected heartbeat: QRS complex plus optional P-wave landmark.

    Attributes:
        qrs: The beat's QRS complex
        p_peak_position: P-wave peak sample index, None if not measured
    """
    qrs: QrsComplex
    p_peak_position: Optional[int] = None

    @property
    def sampling_rate(self) -> float:
        return self.qrs.sampling_rate

    @property
    def r_position(self) -> int:
        return self.qrs.r_position

    @property
    def pq_time(self) -> float:
        """
        PQ time in seconds, -1.0 when no P wave was measured.

        Approximated from the P peak to the R peak.
        """
        if self.p_peak_position is None:
            return -1.0
        return (self.qrs.r_position - self.p_peak_position) / self.qrs.sampling_rate

    @property
    def heart_rate(self) -> float:
        """Heart rate in bpm based on the last RR interval, 0.0 for the first beat."""
        rr = self.qrs.rr_distance
        if not rr:
            return 0.0
        return 60.0 / (rr / self.qrs.sampling_rate)


@dataclass(frozen=True)
class BeatClass:
    """
    Classification of a single beat.

    Attributes:
        beat: The classified heartbeat (None when classified from a bare QRS)
        qrs_class: Assigned class
        explanation: Free-text reason
    """
    beat: Optional[Heartbeat]
    qrs_class: QrsClass
    explanation: str = "n/a"

    @property
    def is_abnormal(self) -> bool:
        return self.qrs_class == QrsClass.ABNORMAL

    def __str__(self) -> str:
        return ("ABNORMAL" if self.is_abnormal else "Normal") + " beat --> " + self.explanation


@dataclass(frozen=True)
class RRInterval:
    """
    One RR interval inside an RRIntervalSequence.

    Neighbours are not referenced directly; the owning sequence resolves
    them from ``index``.

    Attributes:
        index: Position in the owning sequence
        heartbeat: Beat that closes the interval, None where outlier
            correction created or moved the closing R peak
        r_peak1: Sample index of the opening R peak
        r_peak2: Sample index of the closing R peak
        sampling_rate: Sampling rate of the source signal (Hz)
    """
    index: int
    heartbeat: Optional[Heartbeat]
    r_peak1: int
    r_peak2: int
    sampling_rate: float

    @property
    def value(self) -> int:
        """Interval length in samples."""
        return self.r_peak2 - self.r_peak1

    @property
    def duration(self) -> float:
        """Interval length in seconds."""
        return self.value / self.sampling_rate

    @property
    def timestamp(self) -> float:
        """Midpoint of both R peaks in samples."""
        return (self.r_peak1 + self.r_peak2) / 2

    @property
    def timestamp_sec(self) -> float:
        return self.timestamp / self.sampling_rate

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for tabular export."""
        return {
            'index': self.index,
            'r_peak1': self.r_peak1,
            'r_peak2': self.r_peak2,
            'value': self.value,
            'duration': self.duration,
            'timestamp': self.timestamp,
        }
