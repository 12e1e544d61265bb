import numpy as np
from ..config.settings import Settings
from ..domain.models.category import Category
from ..domain.models.features import FULL_CHEM_SPEC, SENSOR_SPEC
from ..domain.models.reference import ReferenceData, TrainingRecord
from ..domain.repositories.reference_repository import ReferenceRepository

RAW_CENTROID_CHEM = {
    "polysaccharide": 43.98,
    "ferulicAcid": 0.0907,
    "totalAsh": 5.65,
    "acidInsolubleAsh": 0.458,
    "volatileOil": 0.496,
    "moisture": 8.63,
    "extractContent": 48.36,
}


def make_settings(**overrides) -> Settings:
    values = {"log_to_file": False}
    values.update(overrides)
    return Settings(**values)


class InMemoryReferenceRepository(ReferenceRepository):
    def __init__(self, data: ReferenceData):
        self.data = data

    def load(self) -> ReferenceData:
        return self.data


def synthetic_reference(per_category: int = 6, evaluation_size: int = 5, constant_key: str = None, seed: int = 7):
    """Small random reference set around distinct per-category profiles."""
    rng = np.random.default_rng(seed)
    keys = FULL_CHEM_SPEC.keys + SENSOR_SPEC.keys
    centroids = {
        category: {key: 1.0 + category.index + 0.1 * i for i, key in enumerate(keys)}
        for category in Category
    }
    records = []
    for _ in range(per_category):
        for category in Category:
            values = {key: centroids[category][key] + rng.normal(0, 0.05) for key in keys}
            if constant_key:
                values[constant_key] = 3.0
            records.append(TrainingRecord(category, values))
    tolerances = {key: 0.5 for key in FULL_CHEM_SPEC.keys}
    tolerances["sensor"] = 0.5
    return ReferenceData(records, centroids, tolerances, evaluation_size)
