import asyncio
from typing import Any, Mapping, Optional, Union
from herbdash.domain.models.features import Modality, Q_MARKER_NAMES
from herbdash.domain.models.prediction import PredictionResult
from herbdash.domain.models.sample import Sample
from herbdash.domain.services.deviation_service import DeviationService
from herbdash.domain.services.quality_service import QualityService
from herbdash.infrastructure.ml.feature_adapter import adapt_input
from herbdash.infrastructure.ml.model_factory import ModelFactory
from herbdash.config.settings import Settings, get_settings
from herbdash.config.logging import get_logger

logger = get_logger(__name__)


class ClassificationService:
    def __init__(
        self,
        model_factory: ModelFactory,
        deviation_service: DeviationService,
        quality_service: QualityService,
        settings: Optional[Settings] = None
    ):
        """Service for identification requests. Injects model factory, analyzers and settings."""
        self.model_factory = model_factory
        self.deviation_service = deviation_service
        self.quality_service = quality_service
        self.settings = settings or get_settings()

    def identify(
        self,
        data: Union[Mapping[str, Any], Sample],
        modality: Optional[Modality] = None,
        strategy: Optional[str] = None
    ) -> PredictionResult:
        """
        Identify the processing category of a sample and score its quality.

        Args:
            data: Flat numeric mapping (modality is sniffed unless given) or a Sample
            modality: Force a modality for mapping input
            strategy: Override the configured classification strategy

        Returns:
            PredictionResult combining category, probabilities, deviations and quality score

        Raises:
            InputValidationException: If the mapping holds non-numeric values
        """
        sample = data if isinstance(data, Sample) else adapt_input(data, modality)
        classifier = self.model_factory.get_classifier(sample.modality, strategy)
        prediction = classifier.classify_sync(sample)
        deviations = self.deviation_service.deviations(sample, prediction.category)
        # The quality index always reads the full-chem keys of the same input
        quality_score = self.quality_service.score(data)

        result = PredictionResult(
            category=prediction.category,
            modality=sample.modality,
            confidence=prediction.confidence,
            probabilities=prediction.probabilities,
            deviations=deviations,
            feature_keys=tuple(sample.spec.keys),
            quality_score=quality_score,
            strategy=classifier.strategy,
            q_markers=tuple(Q_MARKER_NAMES),
            quality_threshold=self.settings.quality_threshold,
        )
        logger.info(
            f"Identified {sample.modality.value} sample as {result.category.code} "
            f"(confidence={result.confidence:.2f}, quality={result.quality_score:.3f})"
        )
        return result

    async def identify_async(
        self,
        data: Union[Mapping[str, Any], Sample],
        modality: Optional[Modality] = None,
        strategy: Optional[str] = None
    ) -> PredictionResult:
        """Run ``identify`` in a worker thread for async hosts."""
        return await asyncio.to_thread(self.identify, data, modality, strategy)

    def score_quality(self, data: Union[Mapping[str, Any], Sample]) -> float:
        return self.quality_service.score(data)
