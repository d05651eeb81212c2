# Preprocessing module
# RR sequence construction and RR series resampling helpers

from .rr_intervals import (
    RRIntervalSequence,
    OutlierCorrection,
    OutlierKind,
    build_rr_sequence,
)

from .signal_processing import (
    uniform_time_grid,
    increasing_knots,
    interpolate,
    hamming_window,
    hanning_window,
    apply_window,
    transform,
)

__all__ = [
    # RR sequence
    'RRIntervalSequence',
    'OutlierCorrection',
    'OutlierKind',
    'build_rr_sequence',

    # Signal processing
    'uniform_time_grid',
    'increasing_knots',
    'interpolate',
    'hamming_window',
    'hanning_window',
    'apply_window',
    'transform',
]
