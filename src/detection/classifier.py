"""
Shared classifier interface.

A classifier can be asked about a single QRS complex, a single heartbeat,
or a whole list of either. Not every classifier supports every input:
rhythm rules need neighbouring intervals, morphology rules look at one
beat at a time. Unsupported inputs raise UnsupportedClassificationError
instead of returning an empty result.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Union

from data.contracts import BeatClass, Heartbeat, QrsClass, QrsComplex


class UnsupportedClassificationError(NotImplementedError):
    """Raised when a classifier does not support the requested input kind."""

    def __init__(self, classifier: str, operation: str):
        self.classifier = classifier
        self.operation = operation
        super().__init__(f"{classifier} does not support {operation}")


class Classifier(ABC):
    """Base class for beat and rhythm classifiers."""

    @abstractmethod
    def classify_qrs(self, qrs: QrsComplex) -> BeatClass:
        """Classify a single QRS complex."""

    @abstractmethod
    def classify_beat(self, beat: Heartbeat) -> BeatClass:
        """Classify a single heartbeat."""

    @abstractmethod
    def classify_qrs_complexes(self, qrs_complexes: Sequence[QrsComplex]) -> List[QrsClass]:
        """Classify an ordered list of QRS complexes."""

    @abstractmethod
    def classify_beats(self, beats: Sequence[Heartbeat]) -> List[QrsClass]:
        """Classify an ordered list of heartbeats."""

    def classify(
        self,
        item: Union[QrsComplex, Heartbeat, Sequence[QrsComplex], Sequence[Heartbeat]],
    ) -> Union[BeatClass, List[QrsClass]]:
        """Dispatch on the input kind."""
        if isinstance(item, QrsComplex):
            return self.classify_qrs(item)
        if isinstance(item, Heartbeat):
            return self.classify_beat(item)

        items = list(item)
        if all(isinstance(i, Heartbeat) for i in items):
            return self.classify_beats(items)
        if all(isinstance(i, QrsComplex) for i in items):
            return self.classify_qrs_complexes(items)
        raise TypeError("Expected a QrsComplex, a Heartbeat, or a homogeneous list of either")

    def _unsupported(self, operation: str) -> UnsupportedClassificationError:
        return UnsupportedClassificationError(type(self).__name__, operation)
