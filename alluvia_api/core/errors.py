"""Exception taxonomy for the prediction services.

Init-time errors (missing side-car files, unreadable model artifact) abort
service construction and are cached by the lazy service holders. Per-call
errors are raised from a prediction and reported to the caller; neither
kind takes the process down.

Each class carries a stable `code` and the HTTP status the API answers with.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class PredictionServiceError(Exception):
    """Base exception for all prediction service errors."""

    code = "PREDICTION_ERROR"
    status_code = 500
    default_message = "Prediction failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class FeaturesMissing(PredictionServiceError):
    """The feature-name list is absent or unparseable."""

    code = "FEATURES_MISSING"
    status_code = 503
    default_message = "Feature list missing or invalid."


class DefaultsMissing(PredictionServiceError):
    """The regressor default-value file is absent or unparseable."""

    code = "DEFAULTS_MISSING"
    status_code = 503
    default_message = "Feature defaults missing or invalid."


class ModelLoadError(PredictionServiceError):
    """The model artifact is absent, unsupported or unreadable."""

    code = "MODEL_UNAVAILABLE"
    status_code = 503
    default_message = "Model artifact could not be loaded."


class ModelOutputMissing(PredictionServiceError):
    """No recognizable probability or value in the model output."""

    code = "MODEL_OUTPUT_MISSING"
    status_code = 500
    default_message = "Model output not found."


class InferenceError(PredictionServiceError):
    """The scorer failed while running the model."""

    code = "INFERENCE_ERROR"
    status_code = 500
    default_message = "Model inference failed."


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_payload(
    *,
    code: str,
    message: str,
    status: int,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Build the uniform error body returned by the API."""
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "status": status,
            "timestamp": now_iso(),
        }
    }
    if details is not None:
        payload["error"]["details"] = details
    return payload


def payload_for(exc: PredictionServiceError) -> Dict[str, Any]:
    return error_payload(code=exc.code, message=str(exc), status=exc.status_code)
