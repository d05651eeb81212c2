"""
Configuration module for ECG rhythm and HRV analysis.

Contains the rule thresholds, morphology limits and HRV parameters.
"""

from .analysis_config import (
    RhythmRuleConfig,
    MorphologyConfig,
    HRVConfig,
    OutlierConfig,
    AnalysisConfig,
    WINDOW_TYPES,
    get_default_config,
)

__all__ = [
    'RhythmRuleConfig',
    'MorphologyConfig',
    'HRVConfig',
    'OutlierConfig',
    'AnalysisConfig',
    'WINDOW_TYPES',
    'get_default_config',
]
