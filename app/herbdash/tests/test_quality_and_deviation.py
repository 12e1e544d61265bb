from unittest import TestCase

import numpy as np

from ..domain.models.category import Category
from ..domain.models.features import FULL_CHEM_SPEC, Q_MARKER_SPEC, SENSOR_SPEC
from ..domain.models.sample import FullChemSample, QMarkerSample, SensorSample
from ..domain.services.deviation_service import DeviationService
from ..domain.services.quality_service import QualityService
from ..domain.services.weight_service import WeightService
from ..infrastructure.storage.reference_store import FileReferenceRepository
from .utils import InMemoryReferenceRepository, make_settings, synthetic_reference


class TestDeviationService(TestCase):

    def setUp(self):
        self.settings = make_settings()
        self.repo = FileReferenceRepository(self.settings)
        self.service = DeviationService(self.repo, self.settings)
        self.reference = self.repo.load()

    def test_own_centroid_gives_zero_vector(self):
        for category in Category:
            for sample_cls, spec in ((FullChemSample, FULL_CHEM_SPEC),
                                     (QMarkerSample, Q_MARKER_SPEC),
                                     (SensorSample, SENSOR_SPEC)):
                sample = sample_cls(self.reference.centroid_vector(category, spec))

                assert self.service.deviations(sample, category) == (0.0,) * len(spec)

    def test_sign_and_order(self):
        centroid = self.reference.centroid_vector(Category.WINE_SOAKED, Q_MARKER_SPEC)
        sample = QMarkerSample(centroid * np.array([1.1, 0.5, 1.0]))

        deviations = self.service.deviations(sample, Category.WINE_SOAKED)

        assert np.allclose(deviations, [0.1, -0.5, 0.0])

    def test_zero_centroid_uses_epsilon(self):
        data = synthetic_reference()
        centroids = {c: dict(v) for c, v in data.centroids.items()}
        centroids[Category.RAW]["ferulicAcid"] = 0.0
        patched = type(data)(list(data.records), centroids, dict(data.tolerances), len(data.evaluation))
        service = DeviationService(InMemoryReferenceRepository(patched), self.settings)

        deviations = service.deviations(QMarkerSample([2e-10, 1.0, 1.0]), Category.RAW)

        assert np.isfinite(deviations).all()
        assert abs(deviations[0] - 2.0) < 1e-9


class TestQualityService(TestCase):

    @classmethod
    def setUpClass(cls):
        cls.settings = make_settings()
        repo = FileReferenceRepository(cls.settings)
        cls.service = QualityService(repo, WeightService(repo, cls.settings), cls.settings)
        cls.reference = repo.load()

    def _centroid(self, category):
        return {k: self.reference.centroid(category, k) for k in FULL_CHEM_SPEC.keys}

    def test_centroid_scores_lie_in_unit_interval(self):
        for category in Category:
            score = self.service.score(self._centroid(category))

            assert 0.0 < score < 1.0

    def test_centroid_score_baseline(self):
        # Bundled reference set; shifts when weight derivation or bounds change
        expected = {
            Category.RAW: 0.528,
            Category.WINE_BROILED: 0.497,
            Category.WINE_WASHED: 0.547,
            Category.WINE_STIR_FRIED: 0.598,
            Category.WINE_SOAKED: 0.411,
        }
        for category, baseline in expected.items():
            score = self.service.score(self._centroid(category))

            assert abs(score - baseline) < 0.005, f"{category.code}: {score:.4f} != {baseline}"
            assert not score > self.settings.quality_threshold

    def test_better_profile_scores_higher(self):
        stir_fried = self.service.score(self._centroid(Category.WINE_STIR_FRIED))
        soaked = self.service.score(self._centroid(Category.WINE_SOAKED))

        assert stir_fried > soaked

    def test_ideal_and_anti_ideal_profiles(self):
        lower, upper = self.service.bounds()
        better = [f.higher_is_better for f in FULL_CHEM_SPEC.features]
        ideal = {k: (u if b else l) for k, l, u, b in zip(FULL_CHEM_SPEC.keys, lower, upper, better)}
        worst = {k: (l if b else u) for k, l, u, b in zip(FULL_CHEM_SPEC.keys, lower, upper, better)}

        assert self.service.score(ideal) > 0.999999
        assert self.service.score(worst) < 1e-6

    def test_bounds_are_widened_centroid_range(self):
        lower, upper = self.service.bounds()
        index = FULL_CHEM_SPEC.keys.index("polysaccharide")

        assert abs(lower[index] - 41.98 * 0.7) < 1e-9
        assert abs(upper[index] - 59.78 * 1.3) < 1e-9

    def test_out_of_bounds_input_is_not_clamped(self):
        data = self._centroid(Category.RAW)
        data["polysaccharide"] = 500.0
        data["extractContent"] = 400.0

        assert self.service.score(data) > 0.0

    def test_sensor_and_unknown_keys_are_ignored(self):
        data = self._centroid(Category.RAW)
        noisy = dict(data, sensor_1=99.0, note=3)

        assert self.service.score(noisy) == self.service.score(data)

    def test_sample_input_matches_mapping_input(self):
        data = self._centroid(Category.WINE_WASHED)
        sample = FullChemSample([data[k] for k in FULL_CHEM_SPEC.keys])

        assert self.service.score(sample) == self.service.score(data)
