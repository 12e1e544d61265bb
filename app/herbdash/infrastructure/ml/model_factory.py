import threading
from typing import Dict, Optional, Tuple
from herbdash.infrastructure.ml.classifiers.base import BaseClassifier
from herbdash.infrastructure.ml.classifiers.ensemble_classifier import EnsembleClassifier
from herbdash.infrastructure.ml.classifiers.similarity_classifier import SimilarityClassifier
from herbdash.domain.models.features import Modality
from herbdash.domain.repositories.reference_repository import ReferenceRepository
from herbdash.config.settings import get_settings, Settings
from herbdash.core.exceptions import ModelConfigurationException
from herbdash.config.logging import get_logger

logger = get_logger(__name__)

CLASSIFIERS = {
    "ensemble": EnsembleClassifier,
    "similarity": SimilarityClassifier,
}


class ModelFactory:
    """
    Factory for trained classifier instances keyed by strategy and modality.

    Each classifier is built and trained at most once per factory. Creation
    is serialized by a lock so concurrent first calls never train twice or
    see a half-built model; later calls return the cached instance.
    """
    def __init__(self, reference_repo: ReferenceRepository, config: Settings = None):
        self.reference_repo = reference_repo
        self.config = config or get_settings()
        self._classifiers: Dict[Tuple[str, Modality], BaseClassifier] = {}
        self._lock = threading.Lock()

    def get_classifier(self, modality: Modality, strategy: Optional[str] = None) -> BaseClassifier:
        strategy = strategy or self.config.classification_strategy
        if strategy not in CLASSIFIERS:
            raise ModelConfigurationException(f"Unknown classification strategy: {strategy}")

        key = (strategy, modality)
        classifier = self._classifiers.get(key)
        if classifier is not None:
            return classifier

        with self._lock:
            classifier = self._classifiers.get(key)
            if classifier is None:
                classifier = CLASSIFIERS[strategy](modality, self.reference_repo.load(), self.config)
                classifier.train()
                self._classifiers[key] = classifier
                logger.debug(f"Cached {classifier}")
        return classifier

    def initialize(self, strategy: Optional[str] = None) -> None:
        """Train every modality's classifier up front instead of on first use."""
        for modality in Modality:
            self.get_classifier(modality, strategy)
        logger.info(f"All {strategy or self.config.classification_strategy} classifiers ready")

    def is_initialized(self, strategy: Optional[str] = None) -> bool:
        strategy = strategy or self.config.classification_strategy
        return all((strategy, modality) in self._classifiers for modality in Modality)
