import json
import os
import threading
from typing import Dict, List, Optional
import numpy as np
import pandas as pd
from herbdash.config.settings import get_settings, Settings
from herbdash.config.logging import get_logger
from herbdash.core.exceptions import ReferenceDataException
from herbdash.domain.models.category import Category
from herbdash.domain.models.features import FULL_CHEM_SPEC, SENSOR_SPEC
from herbdash.domain.models.reference import ReferenceData, TrainingRecord, SENSOR_TOLERANCE_KEY
from herbdash.domain.repositories.reference_repository import ReferenceRepository

logger = get_logger(__name__)

CATEGORY_COLUMN = "category"
FEATURE_COLUMNS = FULL_CHEM_SPEC.keys + SENSOR_SPEC.keys


class FileReferenceRepository(ReferenceRepository):
    """
    Reference set backed by the bundled CSV sample table and JSON profile file.
    The data is read and validated once; later calls return the cached object.
    """
    def __init__(self, config: Settings = None):
        self.config = config or get_settings()
        self.samples_path = self.config.reference_samples_path
        self.profiles_path = self.config.reference_profiles_path
        self.evaluation_size = self.config.evaluation_size
        self._data: Optional[ReferenceData] = None
        self._lock = threading.Lock()

    def load(self) -> ReferenceData:
        if self._data is not None:
            return self._data
        with self._lock:
            if self._data is None:
                records = self._load_records()
                centroids, tolerances = self._load_profiles()
                if self.evaluation_size >= len(records):
                    raise ReferenceDataException(
                        f"Evaluation split of {self.evaluation_size} leaves no training records "
                        f"(table has {len(records)} rows)."
                    )
                self._data = ReferenceData(records, centroids, tolerances, self.evaluation_size)
                logger.info(f"Reference data loaded: {self._data}")
        return self._data

    def _load_records(self) -> List[TrainingRecord]:
        if not os.path.exists(self.samples_path):
            raise ReferenceDataException(f"Reference sample table not found: {self.samples_path}")
        try:
            df = pd.read_csv(self.samples_path, comment="#")
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise ReferenceDataException(f"Cannot parse reference sample table: {e}") from e

        missing = [c for c in [CATEGORY_COLUMN] + FEATURE_COLUMNS if c not in df.columns]
        if missing:
            raise ReferenceDataException(f"Reference sample table is missing columns: {missing}")
        if df.empty:
            raise ReferenceDataException("Reference sample table is empty.")

        values = df[FEATURE_COLUMNS].apply(pd.to_numeric, errors="coerce")
        bad_rows = values.index[~np.isfinite(values.to_numpy(dtype=float)).all(axis=1)].tolist()
        if bad_rows:
            raise ReferenceDataException(f"Non-numeric or non-finite values in reference rows: {bad_rows}")

        records = []
        for row_index, label in enumerate(df[CATEGORY_COLUMN].astype(str).str.strip()):
            try:
                category = Category.from_code(label)
            except ValueError as e:
                raise ReferenceDataException(f"Row {row_index}: {e}") from e
            row = values.iloc[row_index]
            records.append(TrainingRecord(category, {key: float(row[key]) for key in FEATURE_COLUMNS}))

        counts = {category: 0 for category in Category}
        for record in records:
            counts[record.category] += 1
        empty = [category.code for category, count in counts.items() if count == 0]
        if empty:
            raise ReferenceDataException(f"Categories without reference samples: {empty}")

        logger.debug(f"Loaded {len(records)} reference records: "
                     f"{ {category.code: count for category, count in counts.items()} }")
        return records

    def _load_profiles(self):
        if not os.path.exists(self.profiles_path):
            raise ReferenceDataException(f"Reference profile file not found: {self.profiles_path}")
        try:
            with open(self.profiles_path, "r", encoding="utf-8") as f:
                profiles = json.load(f)
        except json.JSONDecodeError as e:
            raise ReferenceDataException(f"Cannot parse reference profiles: {e}") from e

        raw_centroids = profiles.get("centroids") or {}
        centroids: Dict[Category, Dict[str, float]] = {}
        for category in Category:
            profile = raw_centroids.get(category.code)
            if not profile:
                raise ReferenceDataException(f"No centroid defined for category '{category.code}'.")
            missing = [key for key in FEATURE_COLUMNS if key not in profile]
            if missing:
                raise ReferenceDataException(
                    f"Centroid for '{category.code}' is missing keys: {missing}"
                )
            centroids[category] = {key: self._as_float(profile[key], category.code, key) for key in FEATURE_COLUMNS}

        raw_tolerances = profiles.get("tolerances") or {}
        tolerance_keys = FULL_CHEM_SPEC.keys + [SENSOR_TOLERANCE_KEY]
        missing = [key for key in tolerance_keys if key not in raw_tolerances]
        if missing:
            raise ReferenceDataException(f"Tolerance table is missing keys: {missing}")
        tolerances = {key: self._as_float(raw_tolerances[key], "tolerances", key) for key in tolerance_keys}
        non_positive = [key for key, value in tolerances.items() if value <= 0]
        if non_positive:
            raise ReferenceDataException(f"Tolerances must be positive: {non_positive}")

        return centroids, tolerances

    @staticmethod
    def _as_float(value, section: str, key: str) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ReferenceDataException(f"{section}.{key} is not numeric: {value!r}")
        if not np.isfinite(number):
            raise ReferenceDataException(f"{section}.{key} is not finite: {value!r}")
        return number
