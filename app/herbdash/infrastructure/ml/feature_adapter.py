"""
Turns a flat input mapping into a modality-tagged Sample.

Modality sniffing priority is sensor > q-marker > full-chem:
  * any of the ten ``sensor_N`` keys selects the sensor modality, even alongside chemistry keys;
  * all three q-marker keys with none of the remaining full-chem keys select q-marker;
  * everything else is read as the full physicochemical panel.

Missing keys of the selected modality default to 0. This keeps the engine
tolerant of partial forms but degrades accuracy, so every defaulted key is
logged at WARNING.
"""

from typing import Any, Mapping, Optional
from herbdash.domain.models.features import Modality, FULL_CHEM_SPEC, Q_MARKER_SPEC, SENSOR_SPEC, get_feature_spec
from herbdash.domain.models.sample import Sample, sample_class_for
from herbdash.shared.utils.validators import coerce_features, validate_input_mapping
from herbdash.config.logging import get_logger

logger = get_logger(__name__)

FULL_CHEM_ONLY_KEYS = [key for key in FULL_CHEM_SPEC.keys if key not in Q_MARKER_SPEC]


def sniff_modality(data: Mapping[str, Any]) -> Modality:
    validate_input_mapping(data)
    if any(key in SENSOR_SPEC for key in data):
        return Modality.SENSOR
    has_full_chem_only = any(key in data for key in FULL_CHEM_ONLY_KEYS)
    has_q_marker = all(key in data for key in Q_MARKER_SPEC.keys)
    if has_q_marker and not has_full_chem_only:
        return Modality.Q_MARKER
    return Modality.FULL_CHEM


def adapt_input(data: Mapping[str, Any], modality: Optional[Modality] = None) -> Sample:
    """
    Build the Sample for ``data``.

    Args:
        data: Flat mapping of feature names to numbers; unknown keys are ignored
        modality: Force a modality instead of sniffing it from the keys

    Returns:
        FullChemSample, QMarkerSample or SensorSample

    Raises:
        InputValidationException: If the mapping is malformed or holds non-numeric values
    """
    modality = modality or sniff_modality(data)
    spec = get_feature_spec(modality)
    vector, defaulted = coerce_features(data, spec.keys)
    if defaulted:
        logger.warning(f"{modality.value} input is missing {defaulted}; defaulting them to 0")
    return sample_class_for(modality)(vector)
