from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field, model_validator
from herbdash.domain.models.prediction import PredictionResult


class PredictionResultSchema(BaseModel):
    """
    Pydantic schema for validating and serializing PredictionResult data for the presentation layer.
    """
    type: str = Field(..., description="Display name of the predicted processing category")
    category: str = Field(..., description="Machine code of the predicted category")
    modality: str = Field(..., description="Measurement modality used ('full_chem', 'q_marker', 'sensor')")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Probability of the predicted category")
    probabilities: Dict[str, float] = Field(..., description="Probability per category code")
    deviations: List[float] = Field(..., description="Relative deviation from the category centroid, per feature")
    feature_keys: List[str] = Field(..., description="Feature keys aligned with deviations")
    quality_score: float = Field(..., description="TOPSIS quality index, nominally in [0, 1]")
    strategy: str = Field(..., description="Classification strategy ('ensemble' or 'similarity')")
    q_markers: List[str] = Field(default_factory=list, description="Quality-marker display names")
    quality_threshold: float = Field(0.6, description="Score above which the presentation layer reports a pass")
    quality_pass: bool = Field(False, description="Whether quality_score exceeds quality_threshold")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "生当归",
                "category": "raw",
                "modality": "q_marker",
                "confidence": 0.92,
                "probabilities": {"raw": 0.92, "wine_broiled": 0.02, "wine_washed": 0.02,
                                  "wine_stir_fried": 0.02, "wine_soaked": 0.02},
                "deviations": [0.0, 0.0, 0.0],
                "feature_keys": ["ferulicAcid", "extractContent", "volatileOil"],
                "quality_score": 0.41,
                "strategy": "ensemble",
                "q_markers": ["阿魏酸含量", "浸出物含量", "挥发油含量"],
                "quality_threshold": 0.6,
                "quality_pass": False
            }
        }
    )

    @model_validator(mode="after")
    def check_consistency(self):
        if len(self.deviations) != len(self.feature_keys):
            raise ValueError("deviations and feature_keys must have the same length")
        if abs(sum(self.probabilities.values()) - 1.0) > 1e-6:
            raise ValueError("probabilities must sum to 1")
        if self.category not in self.probabilities:
            raise ValueError("predicted category missing from probabilities")
        return self

    @classmethod
    def from_result(cls, result: PredictionResult) -> "PredictionResultSchema":
        return cls(**result.to_dict())
