"""Scorers: the boundary between the services and a serialized model.

A scorer takes a complete feature vector and returns the raw model output
as an ordered mapping of output name to value. Classifier scorers follow
the `classLabel` / `classProbability` naming; regressor scorers publish a
single scalar under a configurable name.
"""

import json
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional, Protocol

import joblib
import numpy as np
import xgboost as xgb

from ..core.config import CLASS_LABEL_KEY, CLASS_PROBABILITY_KEY, REGRESSION_OUTPUT_KEYS
from ..core.errors import InferenceError, ModelLoadError
from ..core.logging import get_logger
from .features import FeatureVector

logger = get_logger(__name__)

XGB_SUFFIXES = {".json", ".ubj"}
JOBLIB_SUFFIXES = {".joblib", ".pkl"}


class Scorer(Protocol):
    """Anything that can run the model on one feature vector."""

    class_labels: Optional[List[Hashable]]

    def score(self, features: FeatureVector) -> Dict[str, Any]:
        ...


def _to_python(value: Any) -> Any:
    # numpy scalars -> builtin int/float/str/bool
    return value.item() if isinstance(value, np.generic) else value


def _build_row(features: FeatureVector, columns: Optional[List[str]]) -> np.ndarray:
    """Lay out one feature vector as a (1, n) array in `columns` order."""
    names = list(columns) if columns else list(features)
    try:
        row = [features[name] for name in names]
    except KeyError as e:
        raise InferenceError(f"Model expects feature {e.args[0]!r} which is not in the feature list.") from e
    return np.array(row, dtype=float).reshape(1, -1)


def _classifier_output(labels: List[Hashable], probs: np.ndarray) -> Dict[str, Any]:
    best = int(np.argmax(probs))
    return {
        CLASS_LABEL_KEY: labels[best],
        CLASS_PROBABILITY_KEY: {label: float(p) for label, p in zip(labels, probs)},
    }


class XGBoostScorer:
    """Scores with an `xgboost.Booster`, deriving the output shape from its objective."""

    def __init__(self, booster: "xgb.Booster", output_name: str = REGRESSION_OUTPUT_KEYS[0]):
        self.booster = booster
        self.output_name = output_name

        learner = json.loads(booster.save_config())["learner"]
        self.objective: str = learner["objective"]["name"]
        num_class = int(learner.get("learner_model_param", {}).get("num_class", "0") or 0)

        if self.objective.startswith("binary:"):
            self.class_labels: Optional[List[Hashable]] = [0, 1]
        elif self.objective.startswith("multi:"):
            self.class_labels = list(range(num_class))
        else:
            self.class_labels = None

    @classmethod
    def from_path(cls, path: Path, output_name: str = REGRESSION_OUTPUT_KEYS[0]) -> "XGBoostScorer":
        booster = xgb.Booster()
        booster.load_model(str(path))
        return cls(booster, output_name=output_name)

    def score(self, features: FeatureVector) -> Dict[str, Any]:
        columns = self.booster.feature_names
        X = _build_row(features, columns)
        try:
            dmat = xgb.DMatrix(X, feature_names=columns)
            pred = np.asarray(self.booster.predict(dmat))
        except Exception as e:
            raise InferenceError(f"XGBoost prediction failed: {e}") from e

        if self.objective in ("binary:logistic", "binary:logitraw"):
            p1 = float(pred.ravel()[0])
            if self.objective == "binary:logitraw":
                p1 = float(1.0 / (1.0 + np.exp(-p1)))
            return _classifier_output([0, 1], np.array([1.0 - p1, p1]))

        if self.objective == "multi:softprob":
            return _classifier_output(self.class_labels, pred.reshape(-1))

        if self.class_labels is not None:
            # softmax / hinge objectives only report the winning class
            return {CLASS_LABEL_KEY: int(pred.ravel()[0])}

        return {self.output_name: float(pred.ravel()[0])}


class EstimatorScorer:
    """Scores with a scikit-learn style estimator restored by joblib."""

    def __init__(self, estimator: Any, output_name: str = REGRESSION_OUTPUT_KEYS[0]):
        self.estimator = estimator
        self.output_name = output_name

        classes = getattr(estimator, "classes_", None)
        if hasattr(estimator, "predict_proba") and classes is not None:
            self.class_labels: Optional[List[Hashable]] = [_to_python(c) for c in classes]
        else:
            self.class_labels = None

        names = getattr(estimator, "feature_names_in_", None)
        self.columns: Optional[List[str]] = [str(n) for n in names] if names is not None else None

    @classmethod
    def from_path(cls, path: Path, output_name: str = REGRESSION_OUTPUT_KEYS[0]) -> "EstimatorScorer":
        return cls(joblib.load(str(path)), output_name=output_name)

    def score(self, features: FeatureVector) -> Dict[str, Any]:
        X = _build_row(features, self.columns)
        try:
            if self.class_labels is not None:
                probs = np.asarray(self.estimator.predict_proba(X))[0]
                return _classifier_output(self.class_labels, probs)
            value = float(np.asarray(self.estimator.predict(X)).ravel()[0])
        except Exception as e:
            raise InferenceError(f"Estimator prediction failed: {e}") from e
        return {self.output_name: value}


def load_scorer(path: Path, output_name: str = REGRESSION_OUTPUT_KEYS[0]) -> Scorer:
    """
    Load a model artifact and wrap it in the matching scorer.

    Args:
        path: `.json`/`.ubj` for XGBoost boosters, `.joblib`/`.pkl` for estimators
        output_name: Output name used when the model is a regressor

    Raises:
        ModelLoadError: If the file is missing, unsupported or cannot be loaded
    """
    path = Path(path)
    if not path.exists():
        raise ModelLoadError(f"Model artifact {path.name} not found.")

    suffix = path.suffix.lower()
    try:
        if suffix in XGB_SUFFIXES:
            scorer: Scorer = XGBoostScorer.from_path(path, output_name=output_name)
        elif suffix in JOBLIB_SUFFIXES:
            scorer = EstimatorScorer.from_path(path, output_name=output_name)
        else:
            raise ModelLoadError(f"Unsupported model artifact type '{suffix}' ({path.name}).")
    except ModelLoadError:
        raise
    except Exception as e:
        raise ModelLoadError(f"Could not load model artifact {path.name}: {e}") from e

    logger.info("Model artifact loaded", path=str(path), scorer=type(scorer).__name__, class_labels=scorer.class_labels)
    return scorer
