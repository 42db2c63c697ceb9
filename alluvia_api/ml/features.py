"""Side-car file loaders and feature-vector assembly.

Both pipelines read their required feature names from a JSON array; the
time-to-renewal pipeline additionally reads a JSON object of default values.
"""

import json
import numbers
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..core.errors import DefaultsMissing, FeaturesMissing
from ..core.logging import get_logger

logger = get_logger(__name__)

FeatureVector = Dict[str, float]


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def load_feature_names(path: Path) -> List[str]:
    """
    Load the ordered list of model input names.

    Args:
        path: JSON file holding an array of strings

    Returns:
        Feature names in file order, duplicates removed

    Raises:
        FeaturesMissing: If the file is absent, unparseable or not a string array
    """
    path = Path(path)
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        raise FeaturesMissing(f"{path.name} missing or unreadable: {e}") from e

    if not isinstance(data, list) or not all(isinstance(name, str) for name in data):
        raise FeaturesMissing(f"{path.name} must be a JSON array of strings.")

    # dict keeps first occurrence order
    names = list(dict.fromkeys(data))
    if len(names) != len(data):
        logger.warning("Duplicate feature names dropped", path=str(path), dropped=len(data) - len(names))
    return names


def load_default_values(path: Path) -> Dict[str, float]:
    """
    Load per-feature default values for the regressor.

    Raises:
        DefaultsMissing: If the file is absent, unparseable or holds non-numeric values
    """
    path = Path(path)
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        raise DefaultsMissing(f"{path.name} missing or invalid: {e}") from e

    if not isinstance(data, dict):
        raise DefaultsMissing(f"{path.name} must be a JSON object.")

    defaults: Dict[str, float] = {}
    for name, value in data.items():
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise DefaultsMissing(f"{path.name}: default for '{name}' is not a number.")
        defaults[name] = float(value)
    return defaults


def assemble_features(
    feature_names: List[str],
    overrides: Mapping[str, float],
    defaults: Optional[Mapping[str, float]] = None,
) -> FeatureVector:
    """
    Build a complete feature vector.

    Each required name takes the override if given, else its default, else 0.0.
    Override keys outside `feature_names` are ignored.
    """
    defaults = defaults or {}
    vector: FeatureVector = {}
    for name in feature_names:
        if name in overrides:
            vector[name] = float(overrides[name])
        else:
            vector[name] = float(defaults.get(name, 0.0))

    unknown = [k for k in overrides if k not in vector]
    if unknown:
        logger.debug("Ignoring unknown override keys", keys=sorted(unknown))
    return vector
