from typing import Mapping, Optional, Tuple, Union
import numpy as np
from herbdash.domain.models.features import FULL_CHEM_SPEC
from herbdash.domain.models.sample import Sample
from herbdash.domain.repositories.reference_repository import ReferenceRepository
from herbdash.domain.services.weight_service import WeightService
from herbdash.shared.utils.validators import coerce_features
from herbdash.config.settings import Settings, get_settings
from herbdash.config.logging import get_logger

logger = get_logger(__name__)


class QualityService:
    """
    TOPSIS-style quality index over the full physicochemical panel.

    Each value is scaled into [0, 1] against bounds spanning every category
    centroid widened by the configured margins, weighted by the fused
    CRITIC/entropy weights, and scored by relative distance to the weight
    vector (positive ideal) and to the origin (negative ideal). The score
    is not clamped: values outside the widened bounds can leave [0, 1].
    """
    def __init__(
        self,
        reference_repo: ReferenceRepository,
        weight_service: WeightService,
        settings: Optional[Settings] = None
    ):
        self.reference_repo = reference_repo
        self.weight_service = weight_service
        self.settings = settings or get_settings()

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        reference = self.reference_repo.load()
        centroids = np.array(
            [reference.centroid_vector(category, FULL_CHEM_SPEC) for category in reference.categories]
        )
        lower = centroids.min(axis=0) * self.settings.bound_lower_margin
        upper = centroids.max(axis=0) * self.settings.bound_upper_margin
        return lower, upper

    def score(self, data: Union[Mapping[str, float], Sample]) -> float:
        """
        Score a sample's full-chem values. Keys outside the panel are ignored and
        missing panel keys count as 0.

        Args:
            data: Flat numeric mapping or a Sample of any modality

        Returns:
            Quality index, nominally in [0, 1]; higher is better
        """
        values = data.as_dict() if isinstance(data, Sample) else data
        vector, _ = coerce_features(values, FULL_CHEM_SPEC.keys)
        return self.score_vector(vector)

    def score_vector(self, vector: np.ndarray) -> float:
        eps = self.settings.epsilon
        lower, upper = self.bounds()
        span = upper - lower
        span = np.where(span == 0, eps, span)
        better = np.array([f.higher_is_better for f in FULL_CHEM_SPEC.features])
        normalized = np.where(better, (vector - lower) / span, (upper - vector) / span)

        weights = self.weight_service.get_weights().as_array()
        weighted = normalized * weights
        d_pos = float(np.linalg.norm(weighted - weights))
        d_neg = float(np.linalg.norm(weighted))

        score = d_neg / (d_pos + d_neg + eps)
        logger.debug(f"Quality score {score:.4f} (d+={d_pos:.4f}, d-={d_neg:.4f})")
        return score
