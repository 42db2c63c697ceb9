"""Prediction services: feature assembly, model invocation, output interpretation.

`RenewalMLService` estimates the probability that a plan renews and
`TimeToRenewalMLService` the months until it does. Both are immutable once
built; the module-level `LazyService` holders construct them on first use
and remember a construction failure instead of retrying it.
"""

import threading
from typing import Any, Callable, Dict, Generic, Hashable, List, Mapping, Optional, TypeVar

from ..core.config import MODEL_VERSION_CLASSIFIER, MODEL_VERSION_REGRESSOR, Settings, get_settings
from ..core.errors import PredictionServiceError
from ..core.logging import get_logger, log_once
from .features import FeatureVector, assemble_features, load_default_values, load_feature_names
from .outputs import ProbabilityExtractor, extract_regression_value, resolve_positive_class
from .scoring import Scorer, load_scorer

logger = get_logger(__name__)

T = TypeVar("T")


def _describe_output(output: Mapping[str, Any]) -> Dict[str, str]:
    return {name: type(value).__name__ for name, value in output.items()}


class RenewalMLService:
    """Renewal probability from a gradient-boosted classifier."""

    model_version = MODEL_VERSION_CLASSIFIER

    def __init__(
        self,
        scorer: Scorer,
        feature_names: List[str],
        positive_label: Optional[str] = None,
    ):
        self.scorer = scorer
        self.feature_names = list(feature_names)
        self.positive_label: Optional[Hashable] = resolve_positive_class(
            getattr(scorer, "class_labels", None), explicit=positive_label
        )
        self.extractor = ProbabilityExtractor(positive_label=self.positive_label)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenewalMLService":
        feature_names = load_feature_names(settings.classifier_features_path)
        scorer = load_scorer(settings.classifier_model_path)
        service = cls(scorer, feature_names, positive_label=settings.positive_class_label)
        logger.info(
            "Renewal probability service ready",
            model_version=service.model_version,
            features=len(service.feature_names),
            positive_label=service.positive_label,
        )
        return service

    def assemble_features(self, overrides: Mapping[str, float]) -> FeatureVector:
        # Unset features default to zero
        return assemble_features(self.feature_names, overrides)

    def predict_probability_renewal(self, overrides: Mapping[str, float]) -> float:
        """
        Predict the probability of renewal.

        Args:
            overrides: Feature values replacing the default zeros

        Returns:
            Probability between 0 and 1

        Raises:
            InferenceError: If the model fails
            ModelOutputMissing: If no probability can be read from the output
        """
        features = self.assemble_features(overrides)
        output = self.scorer.score(features)
        log_once(
            "renewal_probability_output",
            logger,
            "First renewal model output",
            outputs=_describe_output(output),
            raw=output,
        )
        return self.extractor.extract(output)


class TimeToRenewalMLService:
    """Months to renewal from a gradient-boosted regressor."""

    model_version = MODEL_VERSION_REGRESSOR

    def __init__(self, scorer: Scorer, feature_names: List[str], default_values: Mapping[str, float]):
        self.scorer = scorer
        self.feature_names = list(feature_names)
        self.default_values: Dict[str, float] = dict(default_values)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TimeToRenewalMLService":
        feature_names = load_feature_names(settings.regressor_features_path)
        defaults = load_default_values(settings.regressor_defaults_path)
        scorer = load_scorer(settings.regressor_model_path, output_name=settings.regressor_output_name)
        service = cls(scorer, feature_names, defaults)
        logger.info(
            "Time to renewal service ready",
            model_version=service.model_version,
            features=len(service.feature_names),
            defaults=len(service.default_values),
        )
        return service

    def assemble_features(self, overrides: Mapping[str, float]) -> FeatureVector:
        return assemble_features(self.feature_names, overrides, self.default_values)

    def predict_months_to_renewal(self, overrides: Mapping[str, float]) -> float:
        """Predict months to renewal; overrides take precedence over the loaded defaults."""
        features = self.assemble_features(overrides)
        output = self.scorer.score(features)
        log_once(
            "time_to_renewal_output",
            logger,
            "First time to renewal model output",
            outputs=_describe_output(output),
            raw=output,
        )
        return extract_regression_value(output)


class LazyService(Generic[T]):
    """
    Builds a service on first access and caches the outcome.

    A construction failure is logged once and re-raised on every later
    access without rebuilding.
    """

    def __init__(self, name: str, factory: Callable[[], T]):
        self.name = name
        self._factory = factory
        self._lock = threading.Lock()
        self._instance: Optional[T] = None
        self._error: Optional[PredictionServiceError] = None

    @property
    def loaded(self) -> bool:
        return self._instance is not None

    @property
    def error(self) -> Optional[PredictionServiceError]:
        return self._error

    def get(self) -> T:
        with self._lock:
            if self._instance is not None:
                return self._instance
            if self._error is not None:
                raise self._error
            try:
                self._instance = self._factory()
            except PredictionServiceError as e:
                self._error = e
                logger.error("Service construction failed", service=self.name, code=e.code, reason=str(e))
                raise
            return self._instance

    def reset(self) -> None:
        """Forget the cached instance or error (used when assets are replaced)."""
        with self._lock:
            self._instance = None
            self._error = None


renewal_service: LazyService[RenewalMLService] = LazyService(
    "renewal_probability", lambda: RenewalMLService.from_settings(get_settings())
)
time_to_renewal_service: LazyService[TimeToRenewalMLService] = LazyService(
    "time_to_renewal", lambda: TimeToRenewalMLService.from_settings(get_settings())
)


def get_renewal_service() -> RenewalMLService:
    return renewal_service.get()


def get_time_to_renewal_service() -> TimeToRenewalMLService:
    return time_to_renewal_service.get()


# Model init hook (called at startup)
def load_models() -> None:
    for holder in (renewal_service, time_to_renewal_service):
        try:
            holder.get()
        except PredictionServiceError:
            # Already logged; endpoints report the cached error
            continue
