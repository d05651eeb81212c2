"""
RR Interval Sequence
Builds the ordered RR-interval sequence from detected heartbeats and
corrects outlier intervals
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from config.analysis_config import OutlierConfig
from data.contracts import Heartbeat, RRInterval

logger = logging.getLogger(__name__)


# =============================================================================
# OUTLIER CORRECTION RESULT
# =============================================================================

class OutlierKind(Enum):
    """How an outlier interval was handled."""
    MISSED_BEAT = "missed_beat"     # split in two at the reference length
    ECTOPIC = "ectopic"             # shared R peak moved to the pair midpoint
    EXTRA_BEAT = "extra_beat"       # merged with the following interval
    REMOVED = "removed"             # deleted


@dataclass
class OutlierCorrection:
    """Corrected sequence and the source indices that were changed."""
    sequence: 'RRIntervalSequence'
    corrections: List[Tuple[int, OutlierKind]] = field(default_factory=list)

    def count(self, kind: OutlierKind) -> int:
        return sum(1 for _, k in self.corrections if k == kind)


# =============================================================================
# SEQUENCE
# =============================================================================

class RRIntervalSequence:
    """
    Ordered sequence of RR intervals.

    Intervals are stored in one list and addressed by index; the previous
    and next interval of ``i`` are ``i - 1`` and ``i + 1``. The sequence is
    built once and never mutated afterwards.
    """

    def __init__(self, intervals: Optional[List[RRInterval]] = None):
        self._intervals: List[RRInterval] = list(intervals) if intervals else []

    @classmethod
    def from_heartbeats(cls, heartbeats: Sequence[Heartbeat]) -> 'RRIntervalSequence':
        """
        Build the sequence in a single left-to-right pass.

        Interval k spans beats k and k+1 and originates from beat k+1.

        Args:
            heartbeats: Chronologically ordered heartbeats

        Returns:
            Sequence with len(heartbeats) - 1 intervals (empty for fewer than 2 beats)
        """
        if len(heartbeats) < 2:
            logger.debug(f"Need at least 2 heartbeats for an RR interval, got {len(heartbeats)}")
            return cls()

        intervals = []
        previous_beat = heartbeats[0]
        for beat in heartbeats[1:]:
            intervals.append(RRInterval(
                index=len(intervals),
                heartbeat=beat,
                r_peak1=previous_beat.r_position,
                r_peak2=beat.r_position,
                sampling_rate=beat.sampling_rate,
            ))
            previous_beat = beat

        return cls(intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __iter__(self) -> Iterator[RRInterval]:
        return iter(self._intervals)

    def __getitem__(self, index: int) -> RRInterval:
        return self._intervals[index]

    def previous(self, index: int) -> Optional[RRInterval]:
        """Interval preceding ``index``, None for the first one."""
        if index <= 0 or index >= len(self._intervals):
            return None
        return self._intervals[index - 1]

    def next(self, index: int) -> Optional[RRInterval]:
        """Interval following ``index``, None for the last one."""
        if index < 0 or index >= len(self._intervals) - 1:
            return None
        return self._intervals[index + 1]

    # -------------------------------------------------------------------------
    # Array views
    # -------------------------------------------------------------------------

    def durations(self) -> np.ndarray:
        """Interval durations in seconds."""
        return np.array([rri.duration for rri in self._intervals], dtype=float)

    def values(self) -> np.ndarray:
        """Interval lengths in samples."""
        return np.array([rri.value for rri in self._intervals], dtype=float)

    def timestamps(self) -> np.ndarray:
        """Interval midpoints in samples."""
        return np.array([rri.timestamp for rri in self._intervals], dtype=float)

    def timestamps_sec(self) -> np.ndarray:
        """Interval midpoints in seconds."""
        return np.array([rri.timestamp_sec for rri in self._intervals], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """One row per interval."""
        columns = ['index', 'r_peak1', 'r_peak2', 'value', 'duration', 'timestamp']
        return pd.DataFrame([rri.to_dict() for rri in self._intervals], columns=columns)

    # -------------------------------------------------------------------------
    # Reference values and outliers
    # -------------------------------------------------------------------------

    def reference_values(self, window: int = 6) -> np.ndarray:
        """
        Running median reference of the last ``window`` durations.

        Args:
            window: Number of intervals (including the current one) in the median

        Returns:
            Array of reference durations in seconds
        """
        durations = self.durations()
        refs = np.empty_like(durations)
        for i in range(len(durations)):
            refs[i] = np.median(durations[max(0, i - window + 1):i + 1])
        return refs

    def flag_outliers(self, percent: float = 0.15, window: int = 6) -> np.ndarray:
        """
        Flag intervals deviating from the running reference.

        The reference is the median of the last ``window`` accepted
        intervals; outliers never enter the reference list. The first
        interval is always accepted.

        Args:
            percent: Allowed relative deviation from the reference
            window: Length of the reference list

        Returns:
            Boolean mask, True for outliers
        """
        durations = self.durations()
        mask = np.zeros(len(durations), dtype=bool)
        reference: List[float] = []

        for i, duration in enumerate(durations):
            if reference:
                ref = float(np.median(reference))
                if abs(duration - ref) > percent * ref:
                    mask[i] = True
                    continue
            reference.append(duration)
            if len(reference) > window:
                reference.pop(0)

        if mask.any():
            logger.debug(f"Flagged {int(mask.sum())} of {len(mask)} RR intervals as outliers")
        return mask

    def correct_outliers(self, config: Optional[OutlierConfig] = None) -> OutlierCorrection:
        """
        Build a corrected copy of the sequence.

        Steps:
        1. Zero-length intervals are deleted
        2. Leading intervals outside the plausible first-interval range are deleted
        3. Each interval is compared with the median of the last accepted
           intervals. Long intervals (above ``long_rr_ms``) must deviate by
           ``percent_high`` from both the reference and an accepted previous
           interval; short ones by ``percent_low`` from the reference.
        4. While the reference list is still filling, outliers are deleted.
           Afterwards they are corrected:
           - about twice the reference: missed beat, split in two
           - short interval whose sum with the next is about twice the
             reference: ectopic beat, shared R peak moved to the midpoint
           - sum with the next about one reference: extra beat, merged
           - anything else is deleted

        Corrected intervals never enter the reference list. This sequence
        is left untouched.

        Args:
            config: Outlier thresholds

        Returns:
            OutlierCorrection with the new sequence and (source index, kind) pairs
        """
        cfg = config or OutlierConfig()
        cfg.validate()
        corrections: List[Tuple[int, OutlierKind]] = []
        if not self._intervals:
            return OutlierCorrection(RRIntervalSequence(), corrections)

        fs = self._intervals[0].sampling_rate

        def to_ms(samples: float) -> float:
            return samples / fs * 1000

        def within(x: float, limits: Tuple[float, float]) -> bool:
            return limits[0] < x < limits[1]

        pending = []
        for rri in self._intervals:
            if rri.value <= 0:
                corrections.append((rri.index, OutlierKind.REMOVED))
            else:
                pending.append(rri)

        while pending and not within(to_ms(pending[0].value),
                                     (cfg.min_first_rr_ms, cfg.max_first_rr_ms)):
            corrections.append((pending.pop(0).index, OutlierKind.REMOVED))

        if not pending:
            logger.warning("No plausible RR interval left after outlier correction")
            return OutlierCorrection(RRIntervalSequence(), corrections)

        first = pending[0]
        segments = [(first.r_peak1, first.r_peak2, first.heartbeat)]
        reference = [first.value]
        previous_accepted = True

        i = 1
        while i < len(pending):
            rri = pending[i]
            value = rri.value
            ref = float(np.median(reference))
            previous = segments[-1][1] - segments[-1][0] if previous_accepted else None

            if not self._is_outlier(value, ref, previous, to_ms(value) > cfg.long_rr_ms, cfg):
                segments.append((rri.r_peak1, rri.r_peak2, rri.heartbeat))
                reference.append(value)
                if len(reference) > cfg.reference_length:
                    reference.pop(0)
                previous_accepted = True
                i += 1
                continue

            nxt = pending[i + 1] if i + 1 < len(pending) else None
            if nxt is not None and nxt.r_peak1 != rri.r_peak2:
                nxt = None
            ratio = value / ref
            pair_ratio = (value + nxt.value) / ref if nxt is not None else None

            if len(reference) < cfg.reference_length:
                kind, consumed = OutlierKind.REMOVED, 1
            elif within(ratio, cfg.missed_beat_range):
                split = rri.r_peak1 + int(round(ref))
                segments.append((rri.r_peak1, split, None))
                segments.append((split, rri.r_peak2, rri.heartbeat))
                kind, consumed = OutlierKind.MISSED_BEAT, 1
            elif (pair_ratio is not None and within(ratio, cfg.ectopic_range) and
                  within(pair_ratio, cfg.ectopic_pair_range)):
                middle = rri.r_peak1 + (nxt.r_peak2 - rri.r_peak1) // 2
                segments.append((rri.r_peak1, middle, None))
                segments.append((middle, nxt.r_peak2, nxt.heartbeat))
                kind, consumed = OutlierKind.ECTOPIC, 2
            elif pair_ratio is not None and within(pair_ratio, cfg.extra_beat_range):
                segments.append((rri.r_peak1, nxt.r_peak2, nxt.heartbeat))
                kind, consumed = OutlierKind.EXTRA_BEAT, 2
            else:
                kind, consumed = OutlierKind.REMOVED, 1

            logger.debug(f"RR interval {rri.index} ({to_ms(value):.0f} ms, "
                         f"reference {to_ms(ref):.0f} ms): {kind.value}")
            corrections.append((rri.index, kind))
            if kind != OutlierKind.REMOVED:
                previous_accepted = False
            i += consumed

        intervals = [
            RRInterval(index=k, heartbeat=beat, r_peak1=r1, r_peak2=r2, sampling_rate=fs)
            for k, (r1, r2, beat) in enumerate(segments)
        ]
        if corrections:
            logger.debug(f"Outlier correction changed {len(corrections)} of "
                         f"{len(self._intervals)} RR intervals")
        return OutlierCorrection(RRIntervalSequence(intervals), corrections)

    def corrected(self, config: Optional[OutlierConfig] = None) -> 'RRIntervalSequence':
        """Outlier-corrected copy of the sequence (see correct_outliers)."""
        return self.correct_outliers(config).sequence

    @staticmethod
    def _is_outlier(value: float, reference: float, previous: Optional[float],
                    long_interval: bool, cfg: OutlierConfig) -> bool:
        diff_ref = abs(value - reference) / reference
        diff_prev = abs(value - previous) / previous if previous else diff_ref
        if long_interval:
            return diff_ref > cfg.percent_high and diff_prev > cfg.percent_high
        return diff_ref > cfg.percent_low


def build_rr_sequence(heartbeats: Sequence[Heartbeat]) -> RRIntervalSequence:
    """Convenience wrapper for RRIntervalSequence.from_heartbeats."""
    return RRIntervalSequence.from_heartbeats(heartbeats)
