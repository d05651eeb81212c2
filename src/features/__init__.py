# Feature module
# Time- and frequency-domain heart rate variability

from .hrv_time_domain import HRVTimeDomain
from .hrv_frequency_domain import HRVFrequencyDomain
from .hrv_features import (
    HRVFeatureExtractor,
    TIME_DOMAIN_KEYS,
    FREQUENCY_DOMAIN_KEYS,
)

__all__ = [
    'HRVTimeDomain',
    'HRVFrequencyDomain',
    'HRVFeatureExtractor',
    'TIME_DOMAIN_KEYS',
    'FREQUENCY_DOMAIN_KEYS',
]
