from typing import Any, List, Mapping, Sequence, Tuple
import math
import numpy as np
from herbdash.core.exceptions import InputValidationException


def validate_input_mapping(data: Any) -> Mapping[str, Any]:
    """Raise InputValidationException unless ``data`` is a mapping with string keys."""
    if not isinstance(data, Mapping):
        raise InputValidationException(
            f"Input must be a mapping of feature names to numbers, got {type(data).__name__}."
        )
    non_string = [k for k in data.keys() if not isinstance(k, str)]
    if non_string:
        raise InputValidationException(f"Feature names must be strings: {non_string}")
    return data


def coerce_value(key: str, value: Any) -> float:
    """
    Convert one input value to float.

    None is treated as missing and becomes 0.0. Numeric strings are accepted.

    Raises:
        InputValidationException: If the value is not numeric or not finite
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise InputValidationException(f"Feature '{key}' must be numeric, got a boolean.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InputValidationException(f"Feature '{key}' must be numeric, got {value!r}.")
    if not math.isfinite(number):
        raise InputValidationException(f"Feature '{key}' must be finite, got {value!r}.")
    return number


def coerce_features(data: Mapping[str, Any], keys: Sequence[str]) -> Tuple[np.ndarray, List[str]]:
    """
    Build a vector ordered by ``keys`` from a flat mapping.

    Returns:
        Tuple of (vector, keys that were missing or None and defaulted to 0)
    """
    validate_input_mapping(data)
    defaulted = [key for key in keys if data.get(key) is None]
    vector = np.array([coerce_value(key, data.get(key)) for key in keys], dtype=float)
    return vector, defaulted
