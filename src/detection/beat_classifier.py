"""
Physiological Beat Classifier.

Classifies single beats purely from textbook morphology limits:
QRS width, Q wave height relative to the R wave, and PQ time.
"""

from typing import List, Optional, Sequence

from config.analysis_config import MorphologyConfig
from data.contracts import BeatClass, Heartbeat, QrsClass, QrsComplex
from .classifier import Classifier


class PhysiologicalClassifier(Classifier):
    """
    Per-beat NORMAL/ABNORMAL classifier with a reason string.

    Lists of beats are not supported; use the rhythm classifier for
    sequence-level decisions.
    """

    def __init__(self, config: Optional[MorphologyConfig] = None):
        self.config = config or MorphologyConfig()
        self.config.validate()

    def classify_qrs(self, qrs: QrsComplex) -> BeatClass:
        return self._classify_qrs(qrs, beat=None)

    def _classify_qrs(self, qrs: QrsComplex, beat: Optional[Heartbeat]) -> BeatClass:
        cfg = self.config

        # ========= QRS width =========
        qrs_width = qrs.qrs_width
        if qrs_width < cfg.min_qrs_width_sec or qrs_width > cfg.max_qrs_width_sec:
            return BeatClass(beat, QrsClass.ABNORMAL, f"Abnormal QRS width: {qrs_width:.4f}s")

        # ========= Q height =========
        r_height = abs(qrs.r_value - qrs.baseline_value)
        if r_height == 0:
            return BeatClass(beat, QrsClass.ABNORMAL,
                             "Undefined Q/R ratio: R amplitude equals baseline")

        q2r = abs(qrs.q_value - qrs.baseline_value) / r_height
        if q2r > cfg.max_q_to_r_ratio:
            return BeatClass(beat, QrsClass.ABNORMAL, f"Abnormal Q wave height: {q2r:.2f}")

        return BeatClass(beat, QrsClass.NORMAL)

    def classify_beat(self, beat: Heartbeat) -> BeatClass:
        beat_class = self._classify_qrs(beat.qrs, beat=beat)
        if beat_class.is_abnormal:
            return beat_class

        # ========= PQ time =========
        pq_time = beat.pq_time
        if pq_time > 0 and pq_time > self.config.max_pq_time_sec:
            return BeatClass(beat, QrsClass.ABNORMAL, f"Abnormal PQ time: {pq_time:.3f}s")

        return BeatClass(beat, QrsClass.NORMAL)

    def classify_qrs_complexes(self, qrs_complexes: Sequence[QrsComplex]) -> List[QrsClass]:
        raise self._unsupported("QRS complex list classification")

    def classify_beats(self, beats: Sequence[Heartbeat]) -> List[QrsClass]:
        raise self._unsupported("heartbeat list classification")
