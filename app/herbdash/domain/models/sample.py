from typing import Dict, Sequence
import numpy as np
from herbdash.domain.models.features import (
    FeatureSpec,
    Modality,
    FULL_CHEM_SPEC,
    Q_MARKER_SPEC,
    SENSOR_SPEC,
)
from herbdash.core.exceptions import InputShapeException


class Sample:
    """
    Domain model for one measured sample in a single modality.
    Subclasses fix the modality; the vector length always equals the
    modality's feature count and the vector is read-only once built.
    """
    spec: FeatureSpec = None

    def __init__(self, values: Sequence[float]):
        vector = np.array(values, dtype=float).reshape(-1)
        if vector.shape[0] != len(self.spec):
            raise InputShapeException(self.modality.value, len(self.spec), vector.shape[0])
        vector.setflags(write=False)
        self._vector = vector

    @property
    def modality(self) -> Modality:
        return self.spec.modality

    @property
    def vector(self) -> np.ndarray:
        return self._vector

    def as_dict(self) -> Dict[str, float]:
        return {key: float(value) for key, value in zip(self.spec.keys, self._vector)}

    def __eq__(self, other):
        return type(self) is type(other) and np.array_equal(self._vector, other._vector)

    def __hash__(self):
        return hash((type(self).__name__, self._vector.tobytes()))

    def __repr__(self):
        return f"{type(self).__name__}({self.as_dict()})"


class FullChemSample(Sample):
    spec = FULL_CHEM_SPEC


class QMarkerSample(Sample):
    spec = Q_MARKER_SPEC


class SensorSample(Sample):
    spec = SENSOR_SPEC


SAMPLE_TYPES = {
    Modality.FULL_CHEM: FullChemSample,
    Modality.Q_MARKER: QMarkerSample,
    Modality.SENSOR: SensorSample,
}


def sample_class_for(modality: Modality):
    return SAMPLE_TYPES[modality]
