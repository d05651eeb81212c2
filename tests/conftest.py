"""
pytest configuration and shared fixtures.

This module provides shared fixtures and configuration for all tests.
"""

import pytest
import numpy as np
import sys
import os

# Add src to path for all tests
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from data.contracts import Heartbeat, QrsComplex


# =============================================================================
# CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# =============================================================================
# HELPERS
# =============================================================================

FS = 360


def make_qrs(r_position, previous_r_position=None, fs=FS, qrs_width_sec=0.09,
             r_value=1.0, q_value=-0.1, baseline_value=0.0):
    """Build a QRS complex with normal morphology by default."""
    return QrsComplex(
        r_position=r_position,
        r_value=r_value,
        q_value=q_value,
        baseline_value=baseline_value,
        qrs_width_samples=int(round(qrs_width_sec * fs)),
        sampling_rate=fs,
        previous_r_position=previous_r_position,
    )


def beats_from_rr(rr_seconds, fs=FS, start=100):
    """Build a chronological heartbeat list whose RR intervals match rr_seconds."""
    positions = [start]
    for rr in rr_seconds:
        positions.append(positions[-1] + int(round(rr * fs)))

    beats = []
    previous = None
    for pos in positions:
        beats.append(Heartbeat(qrs=make_qrs(pos, previous_r_position=previous, fs=fs)))
        previous = pos
    return beats


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def random_seed():
    """Set random seed for reproducibility."""
    np.random.seed(42)
    return 42


@pytest.fixture
def sampling_rate():
    return FS


@pytest.fixture
def qrs_factory():
    """Factory for QRS complexes (see make_qrs)."""
    return make_qrs


@pytest.fixture
def beat_factory():
    """Factory for heartbeat lists from RR durations (see beats_from_rr)."""
    return beats_from_rr


@pytest.fixture
def normal_rr():
    """Regular sinus rhythm around 75 bpm (seconds)."""
    return np.array([0.80, 0.82, 0.79, 0.81, 0.80, 0.83, 0.78, 0.80, 0.81, 0.79])


@pytest.fixture
def normal_beats(normal_rr):
    """Heartbeats matching normal_rr."""
    return beats_from_rr(normal_rr)


@pytest.fixture
def vf_rr():
    """Sinus rhythm interrupted by a sustained run of short intervals."""
    return np.array([1.0, 1.0, 1.0, 0.3, 0.25, 0.3, 0.28, 0.3, 1.0, 1.0, 1.0])


@pytest.fixture
def sinusoid_rr(random_seed):
    """Uniformly sampled RR series modulated at 0.1 Hz."""
    rate = 4.0
    t = np.arange(0, 256) / rate
    rr = 0.8 + 0.05 * np.sin(2 * np.pi * 0.1 * t)
    return t, rr, rate
