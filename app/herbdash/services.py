"""Service locator and in-process entry points for the identification engine."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

from herbdash.config.settings import get_settings, Settings
from herbdash.config.logging import get_logger
from herbdash.domain.models.prediction import PredictionResult
from herbdash.domain.services.classification_service import ClassificationService
from herbdash.domain.services.deviation_service import DeviationService
from herbdash.domain.services.quality_service import QualityService
from herbdash.domain.services.weight_service import WeightService
from herbdash.infrastructure.ml.model_factory import ModelFactory
from herbdash.infrastructure.storage.reference_store import FileReferenceRepository

logger = get_logger(__name__)


@lru_cache()
def get_config() -> Settings:
    return get_settings()


@lru_cache()
def get_reference_repository() -> FileReferenceRepository:
    return FileReferenceRepository(get_config())


@lru_cache()
def get_weight_service() -> WeightService:
    return WeightService(get_reference_repository(), settings=get_config())


@lru_cache()
def get_model_factory() -> ModelFactory:
    return ModelFactory(get_reference_repository(), config=get_config())


@lru_cache()
def get_deviation_service() -> DeviationService:
    return DeviationService(get_reference_repository(), settings=get_config())


@lru_cache()
def get_quality_service() -> QualityService:
    return QualityService(get_reference_repository(), get_weight_service(), settings=get_config())


@lru_cache()
def get_classification_service() -> ClassificationService:
    return ClassificationService(
        model_factory=get_model_factory(),
        deviation_service=get_deviation_service(),
        quality_service=get_quality_service(),
        settings=get_config(),
    )


def initialize() -> None:
    """
    Load the reference data, derive the weights and train every classifier.
    Hosts call this once before serving; a malformed reference set raises
    ReferenceDataException here and the host must not start.
    """
    get_reference_repository().load()
    get_weight_service().get_weights()
    get_model_factory().initialize()
    logger.info("Identification engine initialized")


def identify(data: Mapping[str, Any]) -> PredictionResult:
    return get_classification_service().identify(data)


def score_quality(data: Mapping[str, Any]) -> float:
    return get_quality_service().score(data)


def reset() -> None:
    """Drop every cached service so the next call rebuilds them from fresh settings."""
    for factory in (
        get_classification_service,
        get_quality_service,
        get_deviation_service,
        get_model_factory,
        get_weight_service,
        get_reference_repository,
        get_config,
    ):
        factory.cache_clear()
