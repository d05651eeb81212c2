"""
Heart Rate Variability (HRV) Feature Extraction
Flat HRV feature dictionaries from RR interval series in seconds
"""

import numpy as np
from typing import Dict, Optional

from config.analysis_config import HRVConfig
from .hrv_frequency_domain import HRVFrequencyDomain
from .hrv_time_domain import HRVTimeDomain


TIME_DOMAIN_KEYS = (
    'mean_rr', 'mean_hr', 'sdnn', 'rmssd', 'nn50', 'pnn50', 'sdsd', 'sd1', 'sd2',
)

FREQUENCY_DOMAIN_KEYS = (
    'vlf_power', 'lf_power', 'hf_power', 'total_power', 'lf_nu', 'hf_nu', 'lf_hf_ratio',
)


class HRVFeatureExtractor:
    """
    Extracts HRV features from RR interval series

    Combines the time-domain and frequency-domain engines. Inputs are in
    seconds, so both engines run with a unit sampling rate.
    """

    def __init__(self, config: Optional[HRVConfig] = None):
        """
        Initialize HRV feature extractor

        Args:
            config: HRV parameters (resampling rate, window, bands)
        """
        self.config = config or HRVConfig()
        self.config.validate()
        self.time_domain = HRVTimeDomain(sampling_rate=1.0, config=self.config)

    def extract_time_domain_features(self, rr_intervals: np.ndarray) -> Dict[str, float]:
        """
        Extract time-domain HRV features

        Args:
            rr_intervals: Array of RR intervals in seconds

        Returns:
            Dictionary of time-domain HRV features (ms, bpm, fraction)
        """
        rr_intervals = np.asarray(rr_intervals, dtype=float)
        if len(rr_intervals) < 2:
            return self._empty_features(TIME_DOMAIN_KEYS)

        td = self.time_domain
        rr_ms = rr_intervals * 1000

        features = {}
        features['mean_rr'] = float(np.mean(rr_ms))
        features['mean_hr'] = float(td.mean_heart_rate(rr_intervals))
        features['sdnn'] = td.sdnn(rr_intervals)
        features['rmssd'] = td.rmssd(rr_intervals)
        features['nn50'] = float(td.nn50(rr_ms))
        features['pnn50'] = td.pnn50(rr_ms)
        features['sdsd'] = td.sdsd(rr_intervals)
        features['sd1'] = td.sd1(rr_intervals)
        features['sd2'] = td.sd2(rr_intervals)
        return features

    def extract_frequency_domain_features(self, rr_intervals: np.ndarray,
                                          timestamps: Optional[np.ndarray] = None) -> Dict[str, float]:
        """
        Extract frequency-domain HRV features

        Args:
            rr_intervals: Array of RR intervals in seconds
            timestamps: Time points of the intervals in seconds
                (defaults to the cumulative sum of the intervals)

        Returns:
            Dictionary of band powers (ms^2), normalized units and LF/HF
        """
        rr_intervals = np.asarray(rr_intervals, dtype=float)
        if len(rr_intervals) < 2:
            return self._empty_features(FREQUENCY_DOMAIN_KEYS)

        if timestamps is None:
            timestamps = np.cumsum(rr_intervals)

        spectrum = HRVFrequencyDomain(
            rr_intervals, timestamps,
            sampling_rate=1.0,
            resampling_rate=self.config.resampling_rate,
            window=self.config.window,
            config=self.config,
        )
        return spectrum.band_powers()

    def extract_all_features(self, rr_intervals: np.ndarray,
                             timestamps: Optional[np.ndarray] = None) -> Dict[str, float]:
        """
        Extract all HRV features

        Args:
            rr_intervals: RR intervals in seconds
            timestamps: Optional interval time points in seconds

        Returns:
            Dictionary with all HRV features
        """
        features = {}
        features.update(self.extract_time_domain_features(rr_intervals))
        features.update(self.extract_frequency_domain_features(rr_intervals, timestamps))
        return features

    @staticmethod
    def _empty_features(keys) -> Dict[str, float]:
        """Return NaN for every feature"""
        return {key: float('nan') for key in keys}


def main():
    """Demonstrate HRV feature extraction"""
    np.random.seed(42)

    # Normal sinus rhythm (~70 BPM, ~857ms RR)
    normal_rr = 0.857 + 0.05 * np.random.randn(300)

    # Tachycardia (~120 BPM, ~500ms RR)
    tachy_rr = 0.500 + 0.02 * np.random.randn(300)

    extractor = HRVFeatureExtractor()

    print("Normal Rhythm HRV Features:")
    normal_features = extractor.extract_all_features(normal_rr)
    for key, value in normal_features.items():
        print(f"  {key}: {value:.4f}")

    print("\nTachycardia HRV Features:")
    tachy_features = extractor.extract_all_features(tachy_rr)
    for key, value in tachy_features.items():
        print(f"  {key}: {value:.4f}")

    print("\n=== Key Differences ===")
    print(f"Mean HR: Normal={normal_features['mean_hr']:.1f}, Tachy={tachy_features['mean_hr']:.1f}")
    print(f"RMSSD: Normal={normal_features['rmssd']:.2f}, Tachy={tachy_features['rmssd']:.2f}")
    print(f"LF/HF: Normal={normal_features['lf_hf_ratio']:.2f}, Tachy={tachy_features['lf_hf_ratio']:.2f}")


if __name__ == '__main__':
    main()
