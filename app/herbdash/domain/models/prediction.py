from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
from herbdash.domain.models.category import Category
from herbdash.domain.models.features import Modality


@dataclass(frozen=True)
class CategoryPrediction:
    """Output of a classifier: winning category plus a distribution over all categories."""
    category: Category
    probabilities: Mapping[Category, float]

    @property
    def confidence(self) -> float:
        return self.probabilities[self.category]


@dataclass(frozen=True)
class PredictionResult:
    """
    Everything the presentation layer receives for one identification call.
    Deviations are aligned 1:1 with ``feature_keys``.
    """
    category: Category
    modality: Modality
    confidence: float
    probabilities: Mapping[Category, float]
    deviations: Tuple[float, ...]
    feature_keys: Tuple[str, ...]
    quality_score: float
    strategy: str
    q_markers: Tuple[str, ...] = field(default_factory=tuple)
    quality_threshold: float = 0.6

    def deviation_map(self) -> Dict[str, float]:
        return dict(zip(self.feature_keys, self.deviations))

    def meets_quality_threshold(self, threshold: Optional[float] = None) -> bool:
        threshold = self.quality_threshold if threshold is None else threshold
        return self.quality_score > threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.category.display_name,
            "category": self.category.code,
            "modality": self.modality.value,
            "confidence": self.confidence,
            "probabilities": {c.code: p for c, p in self.probabilities.items()},
            "deviations": list(self.deviations),
            "feature_keys": list(self.feature_keys),
            "quality_score": self.quality_score,
            "strategy": self.strategy,
            "q_markers": list(self.q_markers),
            "quality_threshold": self.quality_threshold,
            "quality_pass": self.meets_quality_threshold(),
        }


@dataclass(frozen=True)
class ModelEvaluation:
    """Held-out evaluation of a trained classifier; diagnostic only."""
    modality: Modality
    correct: int
    total: int
    confusion_matrix: Mapping[str, Mapping[str, int]]

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0
