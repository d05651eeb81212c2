# Detection module
# Episodic rhythm rules and per-beat morphology classification

# Shared interface
from .classifier import (
    Classifier,
    UnsupportedClassificationError,
)

# Rhythm classifier (RR-interval rules)
from .rhythm_classifier import (
    TsipourasRuleBasedClassifier,
    TsipourasClass,
    EpisodeState,
    EpisodeScan,
    RhythmEpisode,
)

# Beat classifier (morphology rules)
from .beat_classifier import (
    PhysiologicalClassifier,
)

__all__ = [
    # Interface
    'Classifier',
    'UnsupportedClassificationError',

    # Rhythm classifier
    'TsipourasRuleBasedClassifier',
    'TsipourasClass',
    'EpisodeState',
    'EpisodeScan',
    'RhythmEpisode',

    # Beat classifier
    'PhysiologicalClassifier',
]
