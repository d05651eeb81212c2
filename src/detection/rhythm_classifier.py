"""
Rule-Based Rhythm Classifier (Tsipouras et al.).

Classifies every RR interval of a beat sequence from three consecutive
interval durations (rr1, rr2, rr3) around it.

Rules, evaluated in priority order per index:
1. Index already part of a confirmed episode -> skip
2. VF episode onset -> scan forward; confirm or retract
3. PVC (premature ventricular contraction)
4. BII (second degree heart block)

Only confirmed VF episodes label indices other than the current one.
The first two and the last index never have full neighbour context and
are reported as UNKNOWN.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from config.analysis_config import RhythmRuleConfig
from data.contracts import BeatClass, Heartbeat, QrsClass, QrsComplex
from preprocessing.rr_intervals import RRIntervalSequence
from .classifier import Classifier

logger = logging.getLogger(__name__)


# =============================================================================
# LABELS AND EPISODE STATE
# =============================================================================

class TsipourasClass(Enum):
    """Internal working classes of the rule classifier."""
    UNKNOWN = "unknown"
    NORMAL = "normal"
    PVC = "pvc"     # Premature ventricular contraction
    VF = "vf"       # Ventricular flutter / fibrillation
    BII = "bii"     # Second degree heart block

    def to_qrs_class(self) -> QrsClass:
        """Collapse to the public ternary class."""
        if self == TsipourasClass.UNKNOWN:
            return QrsClass.UNKNOWN
        if self == TsipourasClass.NORMAL:
            return QrsClass.NORMAL
        return QrsClass.ABNORMAL


class EpisodeState(Enum):
    """
    VF episode scan states.

    IDLE -> CANDIDATE -> CONFIRMED | RETRACTED
    """
    IDLE = "idle"
    CANDIDATE = "candidate"
    CONFIRMED = "confirmed"
    RETRACTED = "retracted"


@dataclass
class EpisodeScan:
    """Outcome of a VF episode scan starting at ``start``."""
    state: EpisodeState
    start: int
    end: int  # exclusive

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class RhythmEpisode:
    """Contiguous run of intervals sharing one abnormal rhythm."""
    rhythm: TsipourasClass
    start_index: int
    end_index: int  # exclusive

    @property
    def length(self) -> int:
        return self.end_index - self.start_index


# =============================================================================
# CLASSIFIER
# =============================================================================

class TsipourasRuleBasedClassifier(Classifier):
    """
    Episodic rhythm classifier over RR-interval durations (seconds).

    Single QRS complexes or heartbeats carry no rhythm context, so the
    single-item operations are unsupported.
    """

    def __init__(self, config: Optional[RhythmRuleConfig] = None):
        self.config = config or RhythmRuleConfig()
        self.config.validate()

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def is_vf_onset(self, rr1: float, rr2: float) -> bool:
        cfg = self.config
        return rr2 < cfg.vf_trigger_max_rr and cfg.vf_trigger_ratio * rr2 < rr1

    def continues_vf(self, rr1: float, rr2: float, rr3: float) -> bool:
        cfg = self.config
        all_short = (rr1 < cfg.vf_continue_max_rr and
                     rr2 < cfg.vf_continue_max_rr and
                     rr3 < cfg.vf_continue_max_rr)
        return all_short or (rr1 + rr2 + rr3 < cfg.vf_continue_max_sum)

    def is_pvc(self, rr1: float, rr2: float, rr3: float) -> bool:
        cfg = self.config
        premature = (cfg.pvc_prematurity_ratio * rr2 < rr1 and
                     cfg.pvc_prematurity_ratio * rr2 < rr3)
        leading_pair = (abs(rr1 - rr2) < cfg.pvc_max_pair_diff and
                        rr1 < cfg.pvc_max_pair_rr and rr2 < cfg.pvc_max_pair_rr and
                        rr3 > cfg.pvc_compensatory_ratio * (rr1 + rr2) / 2)
        trailing_pair = (abs(rr2 - rr3) < cfg.pvc_max_pair_diff and
                         rr2 < cfg.pvc_max_pair_rr and rr3 < cfg.pvc_max_pair_rr and
                         rr1 > cfg.pvc_compensatory_ratio * (rr2 + rr3) / 2)
        return premature or leading_pair or trailing_pair

    def is_bii(self, rr1: float, rr2: float, rr3: float) -> bool:
        cfg = self.config
        return (cfg.bii_min_rr < rr2 < cfg.bii_max_rr and
                (abs(rr1 - rr2) < cfg.bii_max_neighbor_diff or
                 abs(rr2 - rr3) < cfg.bii_max_neighbor_diff))

    # -------------------------------------------------------------------------
    # VF episode state machine
    # -------------------------------------------------------------------------

    def scan_vf_episode(self, rr: Sequence[float], start: int) -> EpisodeScan:
        """
        Run the VF episode state machine from index ``start``.

        The scan never looks past index n-2 so every continuation check has
        a right neighbour. Labels are not touched; callers apply a
        CONFIRMED scan themselves.

        Args:
            rr: RR durations in seconds
            start: Candidate onset index, 1 <= start <= n-2

        Returns:
            EpisodeScan; IDLE when the onset rule does not fire
        """
        n = len(rr)
        if start < 1 or start > n - 2 or not self.is_vf_onset(rr[start - 1], rr[start]):
            return EpisodeScan(EpisodeState.IDLE, start, start)

        scan = EpisodeScan(EpisodeState.CANDIDATE, start, start + 1)
        while scan.end <= n - 2 and self.continues_vf(rr[scan.end - 1], rr[scan.end], rr[scan.end + 1]):
            scan.end += 1

        if scan.length >= self.config.vf_min_episode_length:
            scan.state = EpisodeState.CONFIRMED
        else:
            scan.state = EpisodeState.RETRACTED
        return scan

    # -------------------------------------------------------------------------
    # Labeling
    # -------------------------------------------------------------------------

    def label_rr_intervals(self, rr: Sequence[float]) -> List[TsipourasClass]:
        """
        Assign an internal rhythm label to every RR interval.

        Args:
            rr: RR durations in seconds

        Returns:
            One TsipourasClass per interval, same order
        """
        rr = np.asarray(rr, dtype=float)
        n = len(rr)
        labels = [TsipourasClass.NORMAL] * n

        for i in range(1, n - 1):
            if labels[i] != TsipourasClass.NORMAL:
                continue

            scan = self.scan_vf_episode(rr, i)
            if scan.state == EpisodeState.CONFIRMED:
                labels[scan.start:scan.end] = [TsipourasClass.VF] * scan.length
                logger.debug(f"VF episode confirmed at [{scan.start}, {scan.end})")
                continue
            if scan.state == EpisodeState.RETRACTED:
                logger.debug(f"VF episode at [{scan.start}, {scan.end}) retracted "
                             f"({scan.length} < {self.config.vf_min_episode_length})")

            rr1, rr2, rr3 = rr[i - 1], rr[i], rr[i + 1]
            if self.is_pvc(rr1, rr2, rr3):
                labels[i] = TsipourasClass.PVC
            elif self.is_bii(rr1, rr2, rr3):
                labels[i] = TsipourasClass.BII

        if n > 0:
            labels[0] = TsipourasClass.UNKNOWN
            labels[n - 1] = TsipourasClass.UNKNOWN
            if n > 1:
                labels[1] = TsipourasClass.UNKNOWN

        return labels

    def classify_rr_intervals(self, rr: Sequence[float]) -> List[QrsClass]:
        """Classify RR durations (seconds) into the public ternary classes."""
        return [label.to_qrs_class() for label in self.label_rr_intervals(rr)]

    def classify_sequence(self, sequence: RRIntervalSequence) -> List[QrsClass]:
        """Classify every interval of an RRIntervalSequence."""
        return self.classify_rr_intervals(sequence.durations())

    def find_episodes(self, rr: Sequence[float]) -> List[RhythmEpisode]:
        """
        Group abnormal labels into episodes.

        Returns:
            Episodes in chronological order
        """
        episodes: List[RhythmEpisode] = []
        for i, label in enumerate(self.label_rr_intervals(rr)):
            if label in (TsipourasClass.NORMAL, TsipourasClass.UNKNOWN):
                continue
            last = episodes[-1] if episodes else None
            if last is not None and last.rhythm == label and last.end_index == i:
                last.end_index = i + 1
            else:
                episodes.append(RhythmEpisode(label, i, i + 1))
        return episodes

    # -------------------------------------------------------------------------
    # Classifier interface
    # -------------------------------------------------------------------------

    def classify_qrs_complexes(self, qrs_complexes: Sequence[QrsComplex]) -> List[QrsClass]:
        """Classify from each complex's RR interval to its predecessor."""
        return self.classify_rr_intervals([qrs.rr_interval for qrs in qrs_complexes])

    def classify_beats(self, beats: Sequence[Heartbeat]) -> List[QrsClass]:
        return self.classify_qrs_complexes([beat.qrs for beat in beats])

    def classify_qrs(self, qrs: QrsComplex) -> BeatClass:
        raise self._unsupported("single QRS complex classification")

    def classify_beat(self, beat: Heartbeat) -> BeatClass:
        raise self._unsupported("single heartbeat classification")
