from typing import Optional
import numpy as np
from sklearn.ensemble import RandomForestClassifier
from herbdash.infrastructure.ml.classifiers.base import BaseClassifier
from herbdash.infrastructure.ml.evaluation import evaluate_classifier
from herbdash.domain.models.category import Category
from herbdash.domain.models.features import Modality
from herbdash.domain.models.prediction import CategoryPrediction, ModelEvaluation
from herbdash.domain.models.reference import ReferenceData
from herbdash.domain.models.sample import Sample
from herbdash.config.settings import get_settings, Settings
from herbdash.core.exceptions import ModelConfigurationException
from herbdash.config.logging import get_logger

logger = get_logger(__name__)


class EnsembleClassifier(BaseClassifier):
    """
    Bagged decision-tree forest for one modality.

    Trees are fitted on bootstrap samples of the training split with a fixed
    seed, so training twice yields identical trees. The category is the
    majority vote over trees (ties go to the earlier category).

    Confidence reporting depends on ``confidence_mode``:
      * ``fixed``: the winner is reported with ``fixed_confidence`` and the
        remaining mass is split evenly over the other categories. This keeps
        outputs identical to earlier releases and does not reflect the votes.
      * ``votes``: the reported distribution is the per-category vote share.
    """
    strategy = "ensemble"

    def __init__(self, modality: Modality, reference: ReferenceData, config: Settings = None):
        super().__init__(modality, config)
        self.config = config or get_settings()
        self.reference = reference
        self.n_estimators = self.config.n_estimators
        self.random_seed = self.config.random_seed
        self.confidence_mode = self.config.confidence_mode
        self.fixed_confidence = self.config.fixed_confidence
        self.model: Optional[RandomForestClassifier] = None
        self.evaluation: Optional[ModelEvaluation] = None

        n_categories = len(Category)
        self.other_confidence = (1.0 - self.fixed_confidence) / (n_categories - 1)
        if self.confidence_mode == "fixed" and self.fixed_confidence <= self.other_confidence:
            raise ModelConfigurationException(
                f"fixed_confidence={self.fixed_confidence} would not make the predicted category the most probable."
            )

    def train(self) -> None:
        if self.is_trained:
            return
        X, y = self.reference.design_matrix(self.reference.training, self.spec)
        logger.info(
            f"Training {self.modality.value} forest: {self.n_estimators} trees, "
            f"{X.shape[0]} training / {len(self.reference.evaluation)} evaluation records"
        )
        self.model = RandomForestClassifier(
            n_estimators=self.n_estimators,
            bootstrap=True,
            random_state=self.random_seed,
        )
        self.model.fit(X, y)
        self.is_trained = True

        self.evaluation = evaluate_classifier(self, self.reference.evaluation)

    def vote_counts(self, sample: Sample) -> np.ndarray:
        """Number of trees voting for each category, indexed by category order."""
        X = sample.vector.reshape(1, -1)
        # Fitted trees predict positions in the forest's classes_ array
        tree_votes = np.array([tree.predict(X)[0] for tree in self.model.estimators_]).astype(int)
        labels = self.model.classes_[tree_votes]
        return np.bincount(labels, minlength=len(Category))

    def classify_sync(self, sample: Sample) -> CategoryPrediction:
        self._check_trained()
        counts = self.vote_counts(sample)
        winner = Category.from_index(int(np.argmax(counts)))

        if self.confidence_mode == "votes":
            shares = counts / counts.sum()
            probabilities = {category: float(shares[category.index]) for category in Category}
        else:
            probabilities = {
                category: self.fixed_confidence if category is winner else self.other_confidence
                for category in Category
            }

        logger.debug(f"{self.modality.value} votes {counts.tolist()} -> {winner.code}")
        return CategoryPrediction(category=winner, probabilities=probabilities)
