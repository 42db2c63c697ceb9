"""
Pytest configuration and fixtures
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pytest
import xgboost as xgb


CLASSIFIER_FEATURES = [
    "expense_created_flag",
    "logins_flag",
    "trunc_current_lifetime_benefit_maximum",
]

REGRESSOR_FEATURES = [
    "expense_created_flag",
    "trunc_employee_age",
    "trunc_current_annual_benefit_maximum",
]


class StubScorer:
    """Scorer returning a fixed output and recording the vectors it was given."""

    def __init__(self, output: Dict[str, Any], class_labels: Optional[List[Any]] = None):
        self.output = output
        self.class_labels = class_labels
        self.calls: List[Dict[str, float]] = []

    def score(self, features):
        self.calls.append(dict(features))
        return self.output


def write_json(path: Path, payload: Any) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def classifier_features_file(tmp_path) -> Path:
    return write_json(tmp_path / "features.json", CLASSIFIER_FEATURES)


@pytest.fixture
def regressor_features_file(tmp_path) -> Path:
    return write_json(tmp_path / "features_reg.json", REGRESSOR_FEATURES)


@pytest.fixture
def regressor_defaults() -> Dict[str, float]:
    return {
        "expense_created_flag": 1.0,
        "trunc_employee_age": 38.0,
        "trunc_current_annual_benefit_maximum": 15000.0,
    }


@pytest.fixture
def regressor_defaults_file(tmp_path, regressor_defaults) -> Path:
    return write_json(tmp_path / "feature_defaults_reg.json", regressor_defaults)


def _training_matrix(n_features: int) -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.random((40, n_features))


@pytest.fixture
def xgb_classifier_path(tmp_path) -> Path:
    """Tiny binary:logistic booster trained on the classifier feature names."""
    X = _training_matrix(len(CLASSIFIER_FEATURES))
    y = (X[:, 0] > 0.5).astype(int)
    dtrain = xgb.DMatrix(X, label=y, feature_names=CLASSIFIER_FEATURES)
    booster = xgb.train({"objective": "binary:logistic", "max_depth": 2}, dtrain, num_boost_round=3)
    path = tmp_path / "RenewalGBClassifier_Top10.json"
    booster.save_model(str(path))
    return path


@pytest.fixture
def xgb_regressor_path(tmp_path) -> Path:
    """Tiny squared-error booster trained on the regressor feature names."""
    X = _training_matrix(len(REGRESSOR_FEATURES))
    y = 12.0 * X[:, 1]
    dtrain = xgb.DMatrix(X, label=y, feature_names=REGRESSOR_FEATURES)
    booster = xgb.train({"objective": "reg:squarederror", "max_depth": 2}, dtrain, num_boost_round=3)
    path = tmp_path / "RenewalGBRegressor_Top10.json"
    booster.save_model(str(path))
    return path
