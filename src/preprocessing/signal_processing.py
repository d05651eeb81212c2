"""
RR Series Signal Processing Module
Resampling, windowing and spectral transform helpers for RR-interval series
"""

import logging

import numpy as np
from scipy import fft, signal
from scipy.interpolate import CubicSpline
from typing import Optional, Tuple


# Below this many knots interpolation is linear
MIN_SPLINE_KNOTS = 4

logger = logging.getLogger(__name__)


def uniform_time_grid(start: float, end: float, rate: float) -> np.ndarray:
    """
    Build a uniform time grid

    Args:
        start: First timestamp in seconds
        end: Last timestamp in seconds
        rate: Grid rate in Hz

    Returns:
        floor((end - start) * rate) points spaced 1/rate apart, starting at start
    """
    n_points = max(0, int(np.floor((end - start) * rate)))
    return start + np.arange(n_points) / rate


def increasing_knots(x: np.ndarray) -> np.ndarray:
    """
    Mask of knots that extend a strictly increasing run

    The first knot is always kept; every later knot must lie after all
    knots kept before it.
    """
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        return np.zeros(0, dtype=bool)
    running_max = np.maximum.accumulate(x)
    mask = np.ones(len(x), dtype=bool)
    mask[1:] = x[1:] > running_max[:-1]
    return mask


def interpolate(x: np.ndarray, y: np.ndarray, x_new: np.ndarray) -> np.ndarray:
    """
    Interpolate an irregularly sampled series onto new timestamps

    Uses a natural cubic spline; falls back to linear interpolation when
    fewer than four knots are available. Knots that do not increase
    strictly (duplicate or backwards timestamps) are dropped.

    Args:
        x: Irregular timestamps
        y: Values at x
        x_new: Timestamps to evaluate

    Returns:
        One value per entry of x_new
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    x_new = np.asarray(x_new, dtype=float)

    keep = increasing_knots(x)
    if not np.all(keep):
        logger.debug(f"Dropped {int(np.sum(~keep))} non-increasing interpolation knots")
        x, y = x[keep], y[keep]

    if len(x_new) == 0 or len(x) == 0:
        return np.zeros(len(x_new))
    if len(x) == 1:
        return np.full(len(x_new), y[0])
    if len(x) < MIN_SPLINE_KNOTS:
        return np.interp(x_new, x, y)

    spline = CubicSpline(x, y, bc_type='natural')
    return spline(x_new)


def hamming_window(values: np.ndarray) -> np.ndarray:
    """Apply 0.54 - 0.46*cos(2*pi*j/N) over the full length"""
    if len(values) == 0:
        return np.asarray(values, dtype=float)
    return values * signal.get_window('hamming', len(values), fftbins=True)


def hanning_window(values: np.ndarray) -> np.ndarray:
    """Apply 0.5*(1 - cos(2*pi*j/N)) over the full length"""
    if len(values) == 0:
        return np.asarray(values, dtype=float)
    return values * signal.get_window('hann', len(values), fftbins=True)


WINDOW_FUNCTIONS = {
    'hamming': hamming_window,
    'hanning': hanning_window,
}


def apply_window(values: np.ndarray, window: Optional[str]) -> np.ndarray:
    """Apply a named window, None leaves the series untouched"""
    if window is None:
        return np.asarray(values, dtype=float)
    try:
        return WINDOW_FUNCTIONS[window](values)
    except KeyError:
        raise ValueError(f"Unknown window '{window}'") from None


def transform(values: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Discrete Fourier transform of a real series

    Args:
        values: Real-valued series of any length

    Returns:
        Tuple of (real, imag) coefficient arrays, same length as values
    """
    if len(values) == 0:
        return np.zeros(0), np.zeros(0)
    spectrum = fft.fft(np.asarray(values, dtype=float))
    return spectrum.real.copy(), spectrum.imag.copy()
