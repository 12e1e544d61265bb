"""
Feature specifications for the three measurement modalities.

A FeatureSpec fixes the order of the numeric vector built for a modality.
Training and inference both go through these objects, so the order seen by
a classifier never changes between the two.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Modality(Enum):
    FULL_CHEM = "full_chem"
    Q_MARKER = "q_marker"
    SENSOR = "sensor"


@dataclass(frozen=True)
class FeatureKey:
    key: str
    label: str
    higher_is_better: Optional[bool] = None  # None for sensor channels
    standard_range: Optional[str] = None
    code: Optional[str] = None
    substance: Optional[str] = None  # Compound class a sensor channel responds to


@dataclass(frozen=True)
class FeatureSpec:
    modality: Modality
    features: Tuple[FeatureKey, ...]

    @property
    def keys(self) -> List[str]:
        return [f.key for f in self.features]

    @property
    def labels(self) -> List[str]:
        return [f.label for f in self.features]

    def __len__(self) -> int:
        return len(self.features)

    def __contains__(self, key: str) -> bool:
        return key in self.keys

    def feature(self, key: str) -> FeatureKey:
        for f in self.features:
            if f.key == key:
                return f
        raise KeyError(key)


FULL_CHEM_SPEC = FeatureSpec(
    modality=Modality.FULL_CHEM,
    features=(
        FeatureKey("polysaccharide", "多糖含量 (mg/g)", True, "> 30.0"),
        FeatureKey("ferulicAcid", "阿魏酸含量 (%)", True, "≥ 0.05"),
        FeatureKey("totalAsh", "总灰分 (%)", False, "≤ 7.0"),
        FeatureKey("acidInsolubleAsh", "酸不溶性灰分 (%)", False, "≤ 2.0"),
        FeatureKey("volatileOil", "挥发油含量 (mL/g)", True, "≥ 0.4"),
        FeatureKey("moisture", "水分 (%)", False, "≤ 15.0"),
        FeatureKey("extractContent", "浸出物含量 (%)", True, "≥ 45.0"),
    ),
)

# Quality markers, a subset of the full panel
Q_MARKER_SPEC = FeatureSpec(
    modality=Modality.Q_MARKER,
    features=tuple(
        FULL_CHEM_SPEC.feature(key)
        for key in ("ferulicAcid", "extractContent", "volatileOil")
    ),
)

# PEN3 electronic nose sensor array
SENSOR_SPEC = FeatureSpec(
    modality=Modality.SENSOR,
    features=(
        FeatureKey("sensor_1", "芳烃化合物", code="W1C", substance="芳烃化合物"),
        FeatureKey("sensor_2", "氮氧化合物", code="W5S", substance="氮氧化合物"),
        FeatureKey("sensor_3", "氨/芳香分子", code="W3C", substance="氨，芳香分子"),
        FeatureKey("sensor_4", "氢化物", code="W6S", substance="氢化物"),
        FeatureKey("sensor_5", "烯烃/芳族", code="W5C", substance="烯烃、芳族，极性分子"),
        FeatureKey("sensor_6", "烷类", code="W1S", substance="烷类"),
        FeatureKey("sensor_7", "硫化合物", code="W1W", substance="硫化合物"),
        FeatureKey("sensor_8", "醇类/芳香族", code="W2S", substance="醇类，部分芳香族化合物"),
        FeatureKey("sensor_9", "硫有机物", code="W2W", substance="芳烃化合物，硫的有机化合物"),
        FeatureKey("sensor_10", "烷类/脂肪族", code="W3S", substance="烷类和脂肪族"),
    ),
)

FEATURE_SPECS: Dict[Modality, FeatureSpec] = {
    Modality.FULL_CHEM: FULL_CHEM_SPEC,
    Modality.Q_MARKER: Q_MARKER_SPEC,
    Modality.SENSOR: SENSOR_SPEC,
}

Q_MARKER_NAMES: List[str] = ["阿魏酸含量", "浸出物含量", "挥发油含量"]


def get_feature_spec(modality: Modality) -> FeatureSpec:
    return FEATURE_SPECS[modality]
