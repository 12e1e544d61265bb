from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator
import os
from typing import Optional

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HERBDASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Bundled reference data
    data_dir: str = Field(DATA_DIR)
    reference_samples_path: Optional[str] = Field(None)  # Defaults to data_dir/reference_samples.csv
    reference_profiles_path: Optional[str] = Field(None)  # Defaults to data_dir/reference_profiles.json
    evaluation_size: int = Field(10)  # Last N rows held out for evaluation

    # Classifier configuration
    classification_strategy: str = Field("ensemble")  # 'ensemble' or 'similarity'
    n_estimators: int = Field(50)
    random_seed: int = Field(42)
    confidence_mode: str = Field("fixed")  # 'fixed' or 'votes'
    fixed_confidence: float = Field(0.92)

    # Weight fusion and quality scoring
    fusion_alpha: float = Field(0.5)  # Share of the CRITIC weight in the fused vector
    entropy_shift: float = Field(1e-4)
    epsilon: float = Field(1e-10)
    bound_lower_margin: float = Field(0.7)
    bound_upper_margin: float = Field(1.3)
    quality_threshold: float = Field(0.6)

    # Logging
    log_dir: str = Field("logs")
    log_level: str = Field("INFO")
    log_to_file: bool = Field(False)

    @field_validator("classification_strategy")
    @classmethod
    def validate_strategy(cls, v):
        allowed = ["ensemble", "similarity"]
        if v not in allowed:
            raise ValueError(f"CLASSIFICATION_STRATEGY must be one of: {allowed}")
        return v

    @field_validator("confidence_mode")
    @classmethod
    def validate_confidence_mode(cls, v):
        allowed = ["fixed", "votes"]
        if v not in allowed:
            raise ValueError(f"CONFIDENCE_MODE must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Invalid log level: {v}")
        return v

    @field_validator("n_estimators", "evaluation_size")
    @classmethod
    def validate_positive(cls, v, info):
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1")
        return v

    @field_validator("fixed_confidence", "fusion_alpha")
    @classmethod
    def validate_unit_interval(cls, v, info):
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"{info.field_name} must lie in [0, 1]")
        return v

    @field_validator("entropy_shift", "epsilon")
    @classmethod
    def validate_strictly_positive(cls, v, info):
        if v <= 0:
            raise ValueError(f"{info.field_name} must be strictly positive")
        return v

    @model_validator(mode="after")
    def validate_bound_margins(self):
        if not 0 < self.bound_lower_margin < self.bound_upper_margin:
            raise ValueError("Bound margins must satisfy 0 < lower < upper")
        return self

    @model_validator(mode="after")
    def resolve_reference_paths(self):
        if self.reference_samples_path is None:
            self.reference_samples_path = os.path.join(self.data_dir, "reference_samples.csv")
        if self.reference_profiles_path is None:
            self.reference_profiles_path = os.path.join(self.data_dir, "reference_profiles.json")
        return self


def get_settings() -> Settings:
    return Settings()
