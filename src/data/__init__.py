# Data contracts for heartbeats, QRS complexes and RR intervals

from .contracts import (
    QrsClass,
    QrsComplex,
    Heartbeat,
    BeatClass,
    RRInterval,
)

__all__ = [
    'QrsClass',
    'QrsComplex',
    'Heartbeat',
    'BeatClass',
    'RRInterval',
]
