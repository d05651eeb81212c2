"""
Frequency-Domain Heart Rate Variability
Power spectral density of resampled RR interval series

Pipeline (run once, at construction):
1. Normalize values and timestamps to seconds, drop zero-length intervals
2. Build a uniform grid between the first and last timestamp
3. Spline-interpolate the RR series onto the grid
4. Detrend (subtract mean) and scale to milliseconds
5. Window (Hamming by default)
6. Discrete Fourier transform
"""

import logging
from dataclasses import replace
from typing import Dict, Optional

import numpy as np

from config.analysis_config import HRVConfig
from preprocessing.rr_intervals import RRIntervalSequence
from preprocessing.signal_processing import (
    apply_window,
    interpolate,
    transform,
    uniform_time_grid,
)

logger = logging.getLogger(__name__)


class HRVFrequencyDomain:
    """
    Spectral HRV engine for one RR series

    The resampled series, its transform and the PSD belong to this
    instance only.
    """

    def __init__(self, rr_values: np.ndarray, rr_timestamps: np.ndarray,
                 sampling_rate: float = 1.0, resampling_rate: float = 4.0,
                 window: Optional[str] = 'hamming',
                 config: Optional[HRVConfig] = None):
        """
        Initialize and run the spectral pipeline

        Args:
            rr_values: RR intervals (samples, or seconds with sampling_rate=1)
            rr_timestamps: Time points of the intervals, same unit as rr_values
            sampling_rate: Rate (Hz) used to normalize inputs to seconds
            resampling_rate: Rate (Hz) of the uniform grid
            window: 'hamming', 'hanning' or None
            config: HRV parameters (frequency bands)
        """
        self.config = replace(config or HRVConfig(), sampling_rate=sampling_rate,
                              resampling_rate=resampling_rate, window=window)
        self.config.validate()

        self.sampling_rate = sampling_rate
        self.resampling_rate = resampling_rate
        self.window = window

        rr_values = np.asarray(rr_values, dtype=float)
        rr_timestamps = np.asarray(rr_timestamps, dtype=float)
        if len(rr_values) != len(rr_timestamps):
            raise ValueError("rr_values and rr_timestamps must have the same length")

        self._x, self._y = self._resample(rr_values / sampling_rate,
                                          rr_timestamps / sampling_rate)
        self._real, self._imag = transform(self._y)

    @classmethod
    def from_sequence(cls, sequence: RRIntervalSequence,
                      resampling_rate: float = 4.0,
                      window: Optional[str] = 'hamming',
                      config: Optional[HRVConfig] = None) -> 'HRVFrequencyDomain':
        """Build from an RR sequence (sample values at midpoint timestamps)"""
        sampling_rate = sequence[0].sampling_rate if len(sequence) else 1.0
        return cls(sequence.values(), sequence.timestamps(), sampling_rate,
                   resampling_rate, window, config)

    def _resample(self, values: np.ndarray, timestamps: np.ndarray):
        nonzero = values > 0
        if not np.all(nonzero):
            logger.debug(f"Dropped {int(np.sum(~nonzero))} zero-length RR intervals")
            values, timestamps = values[nonzero], timestamps[nonzero]

        if len(values) < 2:
            logger.warning(f"Need at least 2 RR intervals for spectral analysis, got {len(values)}")
            return np.zeros(0), np.zeros(0)

        x = uniform_time_grid(timestamps[0], timestamps[-1], self.resampling_rate)
        y = interpolate(timestamps, values, x)
        if len(y) == 0:
            return x, y

        y = (y - np.mean(y)) * 1000
        y = apply_window(y, self.window)

        logger.debug(f"Resampled {len(values)} RR intervals to {len(y)} points "
                     f"at {self.resampling_rate} Hz")
        return x, y

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def rri_values(self) -> np.ndarray:
        """Detrended, windowed, resampled RR series (ms)"""
        return self._y

    @property
    def rri_timestamps(self) -> np.ndarray:
        """Uniform grid timestamps (s)"""
        return self._x

    @property
    def real(self) -> np.ndarray:
        return self._real

    @property
    def imag(self) -> np.ndarray:
        return self._imag

    # -------------------------------------------------------------------------
    # Spectrum
    # -------------------------------------------------------------------------

    def compute_psd(self) -> np.ndarray:
        """
        Power spectral density of the first half of the spectrum

        Returns:
            (real^2 + imag^2) / (sampling_rate * N) for bins 0..N//2-1
        """
        n = len(self._real)
        half = n // 2
        power = self._real[:half] ** 2 + self._imag[:half] ** 2
        return power / (self.sampling_rate * n) if n else power

    def frequencies(self) -> np.ndarray:
        """Bin frequencies (Hz) aligned with compute_psd()"""
        n = len(self._real)
        return np.arange(n // 2) * self.resampling_rate / n if n else np.zeros(0)

    def band_powers(self) -> Dict[str, float]:
        """
        Integrated power per standard HRV band

        Returns:
            Dictionary with vlf/lf/hf/total power, normalized units and LF/HF
        """
        freqs = self.frequencies()
        psd = self.compute_psd()
        df = freqs[1] - freqs[0] if len(freqs) > 1 else 1.0

        def band(limits) -> float:
            mask = (freqs >= limits[0]) & (freqs < limits[1])
            return float(np.sum(psd[mask]) * df) if np.any(mask) else 0.0

        vlf_power = band(self.config.vlf_band)
        lf_power = band(self.config.lf_band)
        hf_power = band(self.config.hf_band)
        lf_hf_total = lf_power + hf_power

        return {
            'vlf_power': vlf_power,
            'lf_power': lf_power,
            'hf_power': hf_power,
            'total_power': vlf_power + lf_power + hf_power,
            'lf_nu': (lf_power / lf_hf_total) * 100 if lf_hf_total > 0 else 0.0,
            'hf_nu': (hf_power / lf_hf_total) * 100 if lf_hf_total > 0 else 0.0,
            'lf_hf_ratio': lf_power / hf_power if hf_power > 0 else 0.0,
        }
