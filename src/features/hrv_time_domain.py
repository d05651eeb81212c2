"""
Time-Domain Heart Rate Variability
Scalar HRV statistics from RR interval series

Each statistic takes one explicit input unit:
- seconds:      sdnn, rmssd
- milliseconds: nn50, pnn50
- samples:      heart_rates, mean_heart_rate, rmssd_samples, sdsd, sd1, sd2

Sample-domain statistics are converted with ``sampling_rate``; pass
``sampling_rate=1.0`` to feed seconds into them.
"""

import logging
from typing import Optional

import numpy as np

from config.analysis_config import HRVConfig

logger = logging.getLogger(__name__)


class HRVTimeDomain:
    """
    Time-domain HRV engine

    Insufficient input never raises: statistics that need a sample
    standard deviation return NaN below their minimum length.
    """

    def __init__(self, sampling_rate: float = 1.0, config: Optional[HRVConfig] = None):
        """
        Initialize time-domain engine

        Args:
            sampling_rate: Rate (Hz) of sample-domain inputs
            config: HRV parameters (NN50 threshold)
        """
        if sampling_rate <= 0:
            raise ValueError("sampling_rate must be positive")
        self.fs = sampling_rate
        self.config = config or HRVConfig(sampling_rate=sampling_rate)

    # -------------------------------------------------------------------------
    # Heart rate
    # -------------------------------------------------------------------------

    def heart_rates(self, intervals: np.ndarray) -> np.ndarray:
        """
        Instantaneous heart rate per interval

        Args:
            intervals: RR intervals in samples

        Returns:
            Integer bpm per interval, truncated; 0 for non-positive intervals
        """
        intervals = np.asarray(intervals, dtype=float)
        if len(intervals) == 0:
            return np.zeros(0, dtype=int)

        valid = intervals > 0
        if not np.all(valid):
            logger.warning(f"{int(np.sum(~valid))} non-positive RR intervals, heart rate set to 0")
        safe = np.where(valid, intervals, np.inf)
        return np.trunc(60.0 / (safe / self.fs)).astype(int)

    def mean_heart_rate(self, intervals: np.ndarray) -> int:
        """
        Heart rate of the mean interval

        This is not the mean of per-interval heart rates.

        Args:
            intervals: RR intervals in samples

        Returns:
            Integer bpm, 0 for empty input or a non-positive mean interval
        """
        intervals = np.asarray(intervals, dtype=float)
        if len(intervals) == 0:
            logger.warning("Mean heart rate requested for an empty RR series")
            return 0
        mean_rri = np.mean(intervals)
        if not mean_rri > 0:
            logger.warning(f"Mean RR interval is {mean_rri}, heart rate set to 0")
            return 0
        return int(60.0 / (mean_rri / self.fs))

    # -------------------------------------------------------------------------
    # Variability
    # -------------------------------------------------------------------------

    def sdnn(self, rr_intervals: np.ndarray) -> float:
        """
        SDNN - standard deviation of NN intervals

        Args:
            rr_intervals: RR intervals in seconds

        Returns:
            Sample standard deviation in ms, NaN for fewer than 2 intervals
        """
        rr = np.asarray(rr_intervals, dtype=float)
        if len(rr) < 2:
            return float('nan')
        return float(np.std(rr, ddof=1) * 1000)

    def rmssd(self, rr_intervals: np.ndarray) -> float:
        """
        RMSSD - root mean square of successive differences

        Args:
            rr_intervals: RR intervals in seconds

        Returns:
            RMSSD in ms, NaN for fewer than 2 intervals
        """
        rr = np.asarray(rr_intervals, dtype=float)
        if len(rr) < 2:
            return float('nan')
        return float(np.sqrt(np.mean(np.diff(rr) ** 2)) * 1000)

    def rmssd_samples(self, rr_intervals: np.ndarray) -> float:
        """
        RMSSD for sample-domain input

        Args:
            rr_intervals: RR intervals in samples

        Returns:
            RMSSD * 1000 / sampling_rate (ms), NaN for fewer than 2 intervals
        """
        rr = np.asarray(rr_intervals, dtype=float)
        if len(rr) < 2:
            return float('nan')
        return float(np.sqrt(np.mean(np.diff(rr) ** 2)) * 1000 / self.fs)

    def nn50(self, rr_intervals_ms: np.ndarray) -> int:
        """
        NN50 - successive differences larger than the threshold

        Args:
            rr_intervals_ms: RR intervals in milliseconds

        Returns:
            Count of |diff| > nn50_threshold_ms (50 ms by default)
        """
        rr = np.asarray(rr_intervals_ms, dtype=float)
        if len(rr) < 2:
            return 0
        return int(np.sum(np.abs(np.diff(rr)) > self.config.nn50_threshold_ms))

    def pnn50(self, rr_intervals_ms: np.ndarray) -> float:
        """
        pNN50 - NN50 as a fraction of successive differences

        Args:
            rr_intervals_ms: RR intervals in milliseconds

        Returns:
            NN50 / (n - 1), NaN for fewer than 2 intervals
        """
        rr = np.asarray(rr_intervals_ms, dtype=float)
        if len(rr) < 2:
            return float('nan')
        return self.nn50(rr) / (len(rr) - 1)

    def sdsd(self, rr_intervals: np.ndarray) -> float:
        """
        SDSD - standard deviation of successive differences

        Args:
            rr_intervals: RR intervals in samples

        Returns:
            std(diff) * 1000 / sampling_rate (ms), NaN for fewer than 3 intervals
        """
        rr = np.asarray(rr_intervals, dtype=float)
        if len(rr) < 3:
            return float('nan')
        return float(np.std(np.diff(rr), ddof=1) * 1000 / self.fs)

    def _sdnn_samples(self, rr_intervals: np.ndarray) -> float:
        rr = np.asarray(rr_intervals, dtype=float)
        if len(rr) < 2:
            return float('nan')
        return float(np.std(rr, ddof=1) * 1000 / self.fs)

    # -------------------------------------------------------------------------
    # Poincare descriptors
    # -------------------------------------------------------------------------

    def sd1(self, rr_intervals: np.ndarray) -> float:
        """
        SD1 - Poincare short-term variability

        Args:
            rr_intervals: RR intervals in samples

        Returns:
            SDSD / sqrt(2) in ms
        """
        return float(self.sdsd(rr_intervals) / np.sqrt(2))

    def sd2(self, rr_intervals: np.ndarray) -> float:
        """
        SD2 - Poincare long-term variability

        Args:
            rr_intervals: RR intervals in samples

        Returns:
            sqrt(2*SDNN^2 - 0.5*SDSD^2) in ms, NaN if undefined
        """
        sdnn = self._sdnn_samples(rr_intervals)
        sdsd = self.sdsd(rr_intervals)
        radicand = 2 * sdnn ** 2 - 0.5 * sdsd ** 2
        if np.isnan(radicand) or radicand < 0:
            return float('nan')
        return float(np.sqrt(radicand))
