from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple
import numpy as np
from herbdash.domain.models.category import Category
from herbdash.domain.models.features import FeatureSpec

SENSOR_TOLERANCE_KEY = "sensor"


@dataclass(frozen=True)
class TrainingRecord:
    """One labelled reference observation carrying every full-chem and sensor value."""
    category: Category
    values: Mapping[str, float] = field(default_factory=dict)

    def vector(self, spec: FeatureSpec) -> np.ndarray:
        return np.array([self.values[key] for key in spec.keys], dtype=float)


class ReferenceData:
    """
    Domain model for the bundled reference set: labelled records split by
    fixed index, per-category centroids and the tolerance table.
    Read-only after construction.
    """
    def __init__(
        self,
        records: List[TrainingRecord],
        centroids: Dict[Category, Dict[str, float]],
        tolerances: Dict[str, float],
        evaluation_size: int,
    ):
        split_index = len(records) - evaluation_size
        self._records = tuple(records)
        self._training = self._records[:split_index]
        self._evaluation = self._records[split_index:]
        self._centroids = MappingProxyType(
            {category: MappingProxyType(dict(values)) for category, values in centroids.items()}
        )
        self._tolerances = MappingProxyType(dict(tolerances))

    @property
    def categories(self) -> List[Category]:
        return list(Category)

    @property
    def records(self) -> Tuple[TrainingRecord, ...]:
        return self._records

    @property
    def training(self) -> Tuple[TrainingRecord, ...]:
        return self._training

    @property
    def evaluation(self) -> Tuple[TrainingRecord, ...]:
        return self._evaluation

    @property
    def centroids(self) -> Mapping[Category, Mapping[str, float]]:
        return self._centroids

    @property
    def tolerances(self) -> Mapping[str, float]:
        return self._tolerances

    def centroid(self, category: Category, key: str) -> float:
        return self._centroids[category][key]

    def centroid_vector(self, category: Category, spec: FeatureSpec) -> np.ndarray:
        return np.array([self._centroids[category][key] for key in spec.keys], dtype=float)

    def tolerance(self, key: str) -> float:
        if key.startswith("sensor_"):
            return self._tolerances[SENSOR_TOLERANCE_KEY]
        return self._tolerances[key]

    def design_matrix(self, records, spec: FeatureSpec) -> Tuple[np.ndarray, np.ndarray]:
        """Return (X, y) for the given records, y holding integer-encoded categories."""
        X = np.array([record.vector(spec) for record in records], dtype=float).reshape(-1, len(spec))
        y = np.array([record.category.index for record in records], dtype=int)
        return X, y

    def __repr__(self):
        return (
            f"ReferenceData(records={len(self._records)}, training={len(self._training)}, "
            f"evaluation={len(self._evaluation)}, categories={len(self._centroids)})"
        )
