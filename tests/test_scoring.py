"""
Tests for the model artifact scorers
"""

import joblib
import numpy as np
import pytest
import xgboost as xgb
from sklearn.ensemble import GradientBoostingClassifier, GradientBoostingRegressor

from alluvia_api.core.errors import InferenceError, ModelLoadError
from alluvia_api.ml.scoring import EstimatorScorer, XGBoostScorer, load_scorer

from .conftest import CLASSIFIER_FEATURES, REGRESSOR_FEATURES


def _vector(names, value=0.5):
    return {name: value for name in names}


class TestXGBoostScorer:

    def test_binary_classifier_output(self, xgb_classifier_path):
        scorer = load_scorer(xgb_classifier_path)
        assert isinstance(scorer, XGBoostScorer)
        assert scorer.class_labels == [0, 1]

        out = scorer.score(_vector(CLASSIFIER_FEATURES))
        probs = out["classProbability"]
        assert set(probs) == {0, 1}
        assert probs[0] + probs[1] == pytest.approx(1.0)
        assert out["classLabel"] in (0, 1)

    def test_columns_follow_booster_names(self, xgb_classifier_path):
        scorer = load_scorer(xgb_classifier_path)
        vector = _vector(CLASSIFIER_FEATURES)
        reordered = dict(reversed(list(vector.items())))
        assert scorer.score(reordered) == scorer.score(vector)

    def test_missing_column(self, xgb_classifier_path):
        scorer = load_scorer(xgb_classifier_path)
        with pytest.raises(InferenceError):
            scorer.score({CLASSIFIER_FEATURES[0]: 1.0})

    def test_regressor_output_name(self, xgb_regressor_path):
        scorer = load_scorer(xgb_regressor_path, output_name="months_between_unlocks")
        assert scorer.class_labels is None

        out = scorer.score(_vector(REGRESSOR_FEATURES))
        assert list(out) == ["months_between_unlocks"]
        assert isinstance(out["months_between_unlocks"], float)

    def test_softmax_reports_label_only(self, tmp_path):
        rng = np.random.default_rng(3)
        X = rng.random((30, 2))
        y = np.arange(30) % 3
        dtrain = xgb.DMatrix(X, label=y, feature_names=["a", "b"])
        booster = xgb.train({"objective": "multi:softmax", "num_class": 3}, dtrain, num_boost_round=2)

        scorer = XGBoostScorer(booster)
        assert scorer.class_labels == [0, 1, 2]
        out = scorer.score({"a": 0.1, "b": 0.9})
        assert list(out) == ["classLabel"]
        assert out["classLabel"] in (0, 1, 2)

    def test_softprob_maps_every_class(self, tmp_path):
        rng = np.random.default_rng(5)
        X = rng.random((30, 2))
        y = np.arange(30) % 3
        dtrain = xgb.DMatrix(X, label=y, feature_names=["a", "b"])
        booster = xgb.train({"objective": "multi:softprob", "num_class": 3}, dtrain, num_boost_round=2)

        out = XGBoostScorer(booster).score({"a": 0.4, "b": 0.2})
        assert set(out["classProbability"]) == {0, 1, 2}
        assert sum(out["classProbability"].values()) == pytest.approx(1.0, rel=1e-5)


class TestEstimatorScorer:

    def test_classifier_uses_estimator_labels(self, tmp_path):
        rng = np.random.default_rng(11)
        X = rng.random((40, 3))
        y = np.where(X[:, 0] > 0.5, "renewed", "lapsed")
        model = GradientBoostingClassifier(n_estimators=5, max_depth=2).fit(X, y)
        path = tmp_path / "renewal.joblib"
        joblib.dump(model, path)

        scorer = load_scorer(path)
        assert isinstance(scorer, EstimatorScorer)
        assert scorer.class_labels == ["lapsed", "renewed"]
        assert all(isinstance(label, str) for label in scorer.class_labels)

        out = scorer.score({"f0": 0.9, "f1": 0.1, "f2": 0.2})
        assert set(out["classProbability"]) == {"lapsed", "renewed"}
        assert out["classLabel"] in ("lapsed", "renewed")

    def test_regressor(self, tmp_path):
        rng = np.random.default_rng(13)
        X = rng.random((40, 2))
        model = GradientBoostingRegressor(n_estimators=5, max_depth=2).fit(X, 10 * X[:, 0])
        path = tmp_path / "months.pkl"
        joblib.dump(model, path)

        scorer = load_scorer(path, output_name="output")
        out = scorer.score({"a": 0.3, "b": 0.4})
        assert list(out) == ["output"]
        assert isinstance(out["output"], float)

    def test_estimator_failure_is_inference_error(self):
        class Broken:
            def predict(self, X):
                raise ValueError("boom")

        with pytest.raises(InferenceError):
            EstimatorScorer(Broken()).score({"a": 1.0})


class TestLoadScorer:

    def test_missing_artifact(self, tmp_path):
        with pytest.raises(ModelLoadError):
            load_scorer(tmp_path / "RenewalGBClassifier_Top10.json")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "model.mlmodel"
        path.write_bytes(b"\x00")
        with pytest.raises(ModelLoadError):
            load_scorer(path)

    def test_corrupt_artifact(self, tmp_path):
        path = tmp_path / "model.json"
        path.write_text("{not a model", encoding="utf-8")
        with pytest.raises(ModelLoadError):
            load_scorer(path)
