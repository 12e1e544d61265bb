from unittest import TestCase

import numpy as np

from ..core.exceptions import InputShapeException, InputValidationException
from ..domain.models.features import Modality, FULL_CHEM_SPEC, Q_MARKER_SPEC, SENSOR_SPEC
from ..domain.models.sample import FullChemSample, QMarkerSample, SensorSample
from ..infrastructure.ml.feature_adapter import adapt_input, sniff_modality
from .utils import RAW_CENTROID_CHEM


class TestModalitySniffing(TestCase):

    def test_full_chem_keys_select_full_chem(self):
        assert sniff_modality(RAW_CENTROID_CHEM) is Modality.FULL_CHEM

    def test_any_sensor_key_wins_over_chemistry(self):
        data = dict(RAW_CENTROID_CHEM, sensor_4=1.2)

        assert sniff_modality(data) is Modality.SENSOR

    def test_unknown_sensor_channel_is_ignored(self):
        data = dict(RAW_CENTROID_CHEM, sensor_11=1.2)

        assert sniff_modality(data) is Modality.FULL_CHEM

    def test_q_marker_keys_alone_select_q_marker(self):
        data = {"ferulicAcid": 0.09, "extractContent": 48.0, "volatileOil": 0.5}

        assert sniff_modality(data) is Modality.Q_MARKER

    def test_single_q_marker_key_is_full_chem(self):
        assert sniff_modality({"extractContent": 48.36}) is Modality.FULL_CHEM

    def test_partial_q_marker_set_is_full_chem(self):
        data = {"ferulicAcid": 0.0907, "volatileOil": 0.496}

        assert sniff_modality(data) is Modality.FULL_CHEM

    def test_q_marker_with_other_chemistry_is_full_chem(self):
        data = {"ferulicAcid": 0.09, "extractContent": 48.0, "volatileOil": 0.5, "moisture": 9.0}

        assert sniff_modality(data) is Modality.FULL_CHEM

    def test_unrelated_keys_fall_back_to_full_chem(self):
        assert sniff_modality({"color": 3.0}) is Modality.FULL_CHEM
        assert sniff_modality({}) is Modality.FULL_CHEM


class TestAdaptInput(TestCase):

    def test_vector_follows_spec_order(self):
        shuffled = dict(reversed(list(RAW_CENTROID_CHEM.items())))

        sample = adapt_input(shuffled)

        assert isinstance(sample, FullChemSample)
        assert sample.vector.tolist() == [RAW_CENTROID_CHEM[k] for k in FULL_CHEM_SPEC.keys]

    def test_missing_keys_default_to_zero(self):
        with self.assertLogs("herbdash.infrastructure.ml.feature_adapter", level="WARNING") as logs:
            sample = adapt_input({"sensor_1": 0.4, "sensor_2": None})

        assert isinstance(sample, SensorSample)
        assert sample.vector[0] == 0.4
        assert np.all(sample.vector[1:] == 0.0)
        assert "sensor_10" in logs.output[0]

    def test_extra_keys_are_ignored(self):
        sample = adapt_input({"ferulicAcid": "0.09", "extractContent": 48, "volatileOil": 0.5, "note": 1})

        assert isinstance(sample, QMarkerSample)
        assert sample.vector.tolist() == [0.09, 48.0, 0.5]

    def test_forced_modality(self):
        sample = adapt_input(dict(RAW_CENTROID_CHEM, sensor_1=0.4), modality=Modality.Q_MARKER)

        assert isinstance(sample, QMarkerSample)
        assert sample.as_dict() == {k: RAW_CENTROID_CHEM[k] for k in Q_MARKER_SPEC.keys}

    def test_non_numeric_value_is_rejected(self):
        with self.assertRaises(InputValidationException):
            adapt_input({"polysaccharide": "high"})

    def test_non_finite_value_is_rejected(self):
        with self.assertRaises(InputValidationException):
            adapt_input({"polysaccharide": float("nan")})

    def test_non_mapping_is_rejected(self):
        with self.assertRaises(InputValidationException):
            adapt_input([1.0, 2.0])


class TestSampleVariants(TestCase):

    def test_wrong_length_is_rejected(self):
        with self.assertRaises(InputShapeException):
            SensorSample([0.1] * (len(SENSOR_SPEC) - 1))

    def test_vector_is_read_only(self):
        sample = QMarkerSample([0.09, 48.0, 0.5])

        with self.assertRaises(ValueError):
            sample.vector[0] = 1.0

    def test_equality_by_type_and_values(self):
        assert QMarkerSample([1, 2, 3]) == QMarkerSample([1.0, 2.0, 3.0])
        assert QMarkerSample([1, 2, 3]) != QMarkerSample([1, 2, 4])


class TestFeatureMetadata(TestCase):

    def test_sensor_channels_carry_code_and_substance(self):
        sensor_3 = SENSOR_SPEC.feature("sensor_3")

        assert sensor_3.code == "W3C"
        assert sensor_3.label == "氨/芳香分子"
        assert sensor_3.substance == "氨，芳香分子"
        assert all(f.substance and f.code for f in SENSOR_SPEC.features)

    def test_chemistry_features_have_no_substance(self):
        assert all(f.substance is None for f in FULL_CHEM_SPEC.features)
