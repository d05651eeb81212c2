"""
Test package for ECG rhythm classification and HRV analysis.

Covers:
- RR sequence construction and outlier flagging
- Rule-based rhythm and physiological beat classifiers
- Time- and frequency-domain HRV engines
- Configuration round-trips
"""
