import json
import logging
import os
import shutil
import tempfile
from unittest import TestCase, mock

from pydantic import ValidationError

from ..config.logging import JsonFormatter, get_logger, init_logging
from ..config.settings import Settings
from .utils import make_settings


class TestSettings(TestCase):

    def test_defaults(self):
        settings = make_settings()

        assert settings.n_estimators == 50
        assert settings.random_seed == 42
        assert settings.evaluation_size == 10
        assert settings.fixed_confidence == 0.92
        assert settings.classification_strategy == "ensemble"
        assert os.path.exists(settings.reference_samples_path)
        assert os.path.exists(settings.reference_profiles_path)

    def test_environment_override(self):
        with mock.patch.dict(os.environ, {"HERBDASH_N_ESTIMATORS": "7", "HERBDASH_CONFIDENCE_MODE": "votes"}):
            settings = Settings()

        assert settings.n_estimators == 7
        assert settings.confidence_mode == "votes"

    def test_reference_paths_follow_data_dir(self):
        settings = make_settings(data_dir="/srv/herbdash/data")

        assert settings.reference_samples_path == os.path.join("/srv/herbdash/data", "reference_samples.csv")
        assert settings.reference_profiles_path == os.path.join("/srv/herbdash/data", "reference_profiles.json")

    def test_explicit_reference_path_wins_over_data_dir(self):
        settings = make_settings(data_dir="/srv/herbdash/data", reference_samples_path="/tmp/samples.csv")

        assert settings.reference_samples_path == "/tmp/samples.csv"
        assert settings.reference_profiles_path == os.path.join("/srv/herbdash/data", "reference_profiles.json")

    def test_rejects_unknown_strategy(self):
        with self.assertRaises(ValidationError):
            make_settings(classification_strategy="knn")

    def test_rejects_unknown_confidence_mode(self):
        with self.assertRaises(ValidationError):
            make_settings(confidence_mode="calibrated")

    def test_rejects_inverted_bound_margins(self):
        with self.assertRaises(ValidationError):
            make_settings(bound_lower_margin=1.3, bound_upper_margin=0.7)

    def test_rejects_zero_trees(self):
        with self.assertRaises(ValidationError):
            make_settings(n_estimators=0)


class TestLogging(TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        logger = logging.getLogger("herbdash")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        shutil.rmtree(self.tmp_dir)

    def test_file_logging_writes_json(self):
        init_logging(make_settings(log_to_file=True, log_dir=self.tmp_dir, log_level="debug"))

        get_logger("herbdash.tests").info("weights ready")
        for handler in logging.getLogger("herbdash").handlers:
            handler.flush()

        with open(os.path.join(self.tmp_dir, "herbdash.log"), encoding="utf-8") as f:
            entries = [json.loads(line) for line in f if line.strip()]
        assert any(e["message"] == "weights ready" and e["logger"] == "herbdash.tests" for e in entries)

    def test_json_formatter(self):
        record = logging.LogRecord("herbdash.x", logging.WARNING, __file__, 1, "多糖 %s", ("low",), None)

        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "多糖 low"
        assert entry["level"] == "WARNING"
