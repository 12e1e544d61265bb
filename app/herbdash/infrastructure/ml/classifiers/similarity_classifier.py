import numpy as np
from herbdash.infrastructure.ml.classifiers.base import BaseClassifier
from herbdash.domain.models.category import Category
from herbdash.domain.models.features import Modality
from herbdash.domain.models.prediction import CategoryPrediction
from herbdash.domain.models.reference import ReferenceData
from herbdash.domain.models.sample import Sample
from herbdash.config.settings import get_settings, Settings
from herbdash.config.logging import get_logger

logger = get_logger(__name__)


class SimilarityClassifier(BaseClassifier):
    """
    Gaussian-kernel similarity to each category centroid.

    For every key, similarity is exp(-(x - c)^2 / (2 * s^2)) with s taken from
    the tolerance table (sensor channels share one tolerance). Per-category
    similarities are averaged over the keys and normalized into a
    distribution, so the reported confidence is the winner's similarity share.
    """
    strategy = "similarity"

    def __init__(self, modality: Modality, reference: ReferenceData, config: Settings = None):
        super().__init__(modality, config)
        self.config = config or get_settings()
        self.reference = reference
        self.centroids = None
        self.tolerances = None

    def train(self) -> None:
        if self.is_trained:
            return
        self.centroids = np.array(
            [self.reference.centroid_vector(category, self.spec) for category in Category]
        )
        self.tolerances = np.array([self.reference.tolerance(key) for key in self.spec.keys])
        self.is_trained = True
        logger.info(f"Similarity classifier ready for {self.modality.value} ({len(self.spec)} keys)")

    def classify_sync(self, sample: Sample) -> CategoryPrediction:
        self._check_trained()
        diff = sample.vector - self.centroids
        kernel = np.exp(-(diff ** 2) / (2 * self.tolerances ** 2))
        scores = kernel.mean(axis=1)

        total = scores.sum()
        if total <= 0:
            # Sample is far from every centroid; fall back to a uniform distribution
            shares = np.full(len(Category), 1.0 / len(Category))
        else:
            shares = scores / total

        winner = Category.from_index(int(np.argmax(shares)))
        probabilities = {category: float(shares[category.index]) for category in Category}
        return CategoryPrediction(category=winner, probabilities=probabilities)
