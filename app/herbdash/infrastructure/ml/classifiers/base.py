from typing import Optional
from herbdash.domain.models.features import Modality, FeatureSpec, get_feature_spec
from herbdash.domain.models.prediction import CategoryPrediction
from herbdash.domain.models.sample import Sample
from herbdash.core.exceptions import ClassificationException


class BaseClassifier:
    """
    Abstract base classifier interface. A classifier is bound to one modality
    and must be trained before ``classify_sync`` is used.
    """
    strategy: str = None

    def __init__(self, modality: Modality, config=None):
        self.modality = modality
        self.spec: FeatureSpec = get_feature_spec(modality)
        self.config = config
        self.is_trained = False

    def train(self) -> None:
        raise NotImplementedError("Subclasses must implement train()")

    def classify_sync(self, sample: Sample) -> CategoryPrediction:
        """
        Synchronous classification for CPU-bound work. Subclasses should override.
        """
        raise NotImplementedError("Subclasses must implement classify_sync()")

    async def classify(self, sample: Sample) -> CategoryPrediction:
        """
        Async wrapper that runs the synchronous classify in a thread.
        """
        import asyncio
        return await asyncio.to_thread(self.classify_sync, sample)

    def _check_trained(self) -> None:
        # Samples reach a classifier through ModelFactory, keyed by sample.modality
        if not self.is_trained:
            raise ClassificationException(f"{type(self).__name__} for {self.modality.value} is not trained.")

    def __repr__(self):
        return f"{type(self).__name__}(modality={self.modality.value}, trained={self.is_trained})"
