from typing import Optional, Tuple
import numpy as np
from herbdash.domain.models.category import Category
from herbdash.domain.models.sample import Sample
from herbdash.domain.repositories.reference_repository import ReferenceRepository
from herbdash.config.settings import Settings, get_settings


class DeviationService:
    """Signed relative deviation of a sample from a category centroid."""

    def __init__(self, reference_repo: ReferenceRepository, settings: Optional[Settings] = None):
        self.reference_repo = reference_repo
        self.settings = settings or get_settings()

    def deviations(self, sample: Sample, category: Category) -> Tuple[float, ...]:
        """
        (value - centroid) / centroid for each key of the sample's modality, in
        key order. A zero centroid is replaced by epsilon; positive means the
        sample exceeds the centroid.
        """
        reference = self.reference_repo.load()
        centroid = reference.centroid_vector(category, sample.spec)
        denominator = np.where(centroid == 0, self.settings.epsilon, centroid)
        return tuple(float(d) for d in (sample.vector - centroid) / denominator)
