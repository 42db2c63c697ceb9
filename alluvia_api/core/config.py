"""Service-wide configuration.

Defines asset locations for both prediction pipelines (overridable through
`ALLUVIA_*` environment variables or a `.env` file) and the output naming
conventions the model artifacts follow.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ASSETS_DIR = Path("assets")

MODEL_VERSION_CLASSIFIER = "RenewalGBClassifier"
MODEL_VERSION_REGRESSOR = "RenewalGBRegressor_Top10"

# Output names checked, in order, when a classifier exposes no probability map
PROBABILITY_SCALAR_KEYS = ["probability", "output", "score", "yhat"]
CLASS_LABEL_KEY = "classLabel"
CLASS_PROBABILITY_KEY = "classProbability"

# Output names checked, in order, for the months-to-renewal value
REGRESSION_OUTPUT_KEYS = ["months_between_unlocks", "output", "prediction", "target", "yhat"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ALLUVIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App ---
    app_name: str = "Alluvia Renewal Prediction API"
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: str = "*"

    # --- Renewal probability (classifier) ---
    classifier_model_path: Path = ASSETS_DIR / "RenewalGBClassifier_Top10.json"
    classifier_features_path: Path = ASSETS_DIR / "features.json"
    positive_class_label: Optional[str] = Field(
        default=None,
        description="Class label whose probability means 'will renew'. "
        "When unset it is guessed from the model's declared labels.",
    )

    # --- Time to renewal (regressor) ---
    regressor_model_path: Path = ASSETS_DIR / "RenewalGBRegressor_Top10.json"
    regressor_features_path: Path = ASSETS_DIR / "features_reg.json"
    regressor_defaults_path: Path = ASSETS_DIR / "feature_defaults_reg.json"
    regressor_output_name: str = REGRESSION_OUTPUT_KEYS[0]

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()


def get_settings() -> Settings:
    return settings
