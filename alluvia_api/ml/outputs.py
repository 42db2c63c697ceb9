"""Interpretation of raw model outputs.

A scorer returns a mapping of output name to value whose shape depends on
how the model was exported: a class-probability map, a bare scalar under a
conventional name, or only the predicted class label. The helpers here pick
the number the services report.

The classifier rules are heuristics over an underspecified output shape.
They are kept explicit (positive label, scalar keys and label key are all
constructor arguments) so a model export with different conventions can be
handled through configuration rather than code changes.
"""

import math
import numbers
from typing import Any, Hashable, Iterable, List, Mapping, Optional

from ..core.config import CLASS_LABEL_KEY, PROBABILITY_SCALAR_KEYS, REGRESSION_OUTPUT_KEYS
from ..core.errors import ModelOutputMissing
from ..core.logging import get_logger

logger = get_logger(__name__)

ModelOutput = Mapping[str, Any]


def _is_scalar_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def resolve_positive_class(
    labels: Optional[Iterable[Hashable]],
    explicit: Optional[str] = None,
) -> Optional[Hashable]:
    """
    Pick the class label whose probability means "will renew".

    Args:
        labels: Class labels declared by the model (None for unknown)
        explicit: Configured label; matched to the declared labels by string form

    Returns:
        The positive label, or None when it cannot be determined

    Rules without an explicit label:
    - string labels: "1", else "true" (any casing present), else the last label
    - numeric labels: 1, else the largest label
    """
    declared: List[Hashable] = list(labels) if labels is not None else []

    if explicit is not None:
        for label in declared:
            if str(label) == str(explicit):
                return label
        if declared:
            logger.warning("Configured positive class not among model labels", label=explicit, labels=declared)
        return explicit

    if not declared:
        return None

    if all(isinstance(label, str) for label in declared):
        if "1" in declared:
            return "1"
        if any(label.lower() == "true" for label in declared):
            return "true"
        return declared[-1]

    if all(isinstance(label, numbers.Real) for label in declared):
        if any(label == 1 for label in declared):
            return 1
        return max(declared)

    logger.warning("Mixed class label types, no positive class", labels=declared)
    return None


class ProbabilityExtractor:
    """Turns a classifier output into a probability in [0, 1]."""

    def __init__(
        self,
        positive_label: Optional[Hashable] = None,
        scalar_keys: Iterable[str] = PROBABILITY_SCALAR_KEYS,
        label_key: str = CLASS_LABEL_KEY,
    ):
        self.positive_label = positive_label
        self.scalar_keys = list(scalar_keys)
        self.label_key = label_key

    def extract(self, output: ModelOutput) -> float:
        """
        Extract the positive-class probability.

        Precedence, first success wins:
        1. any class-probability mapping in the output
        2. a scalar under one of `scalar_keys`
        3. the predicted class label compared to the positive label
        """
        for value in output.values():
            if isinstance(value, Mapping):
                prob = self._from_mapping(value)
                if prob is not None:
                    return _clamp01(prob)

        for key in self.scalar_keys:
            value = output.get(key)
            if _is_scalar_number(value):
                return _clamp01(value)

        if self.label_key in output:
            label = output[self.label_key]
            if self.positive_label is None:
                return 1.0
            return 1.0 if label == self.positive_label else 0.0

        raise ModelOutputMissing(f"No probability found in model outputs {sorted(output)}.")

    def _from_mapping(self, probs: Mapping[Any, Any]) -> Optional[float]:
        # Only non-empty maps of finite numbers count as class probabilities
        if not probs or not all(_is_scalar_number(p) for p in probs.values()):
            return None

        if self.positive_label is not None and self.positive_label in probs:
            return float(probs[self.positive_label])

        for key in ("1", 1):
            if key in probs:
                return float(probs[key])

        # Binary map with only the negative class addressable
        if len(probs) == 2:
            for key in ("0", 0):
                if key in probs:
                    return 1.0 - float(probs[key])

        return max(float(p) for p in probs.values())


def extract_regression_value(
    output: ModelOutput,
    preferred_keys: Iterable[str] = REGRESSION_OUTPUT_KEYS,
) -> float:
    """
    Extract the predicted value from a regressor output.

    Tries `preferred_keys` in order, then the first numeric scalar in
    output order.

    Raises:
        ModelOutputMissing: If the output holds no numeric scalar
    """
    for key in preferred_keys:
        value = output.get(key)
        if _is_scalar_number(value):
            return float(value)

    for value in output.values():
        if _is_scalar_number(value):
            return float(value)

    raise ModelOutputMissing(f"No numeric value found in regression outputs {sorted(output)}.")
