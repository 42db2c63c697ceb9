"""Health and status endpoints.

Exposes:
- GET /health: lightweight health check
- GET /      : status page including model load flags and asset checks
"""

from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.config import Settings, get_settings
from ..ml.engine import LazyService, renewal_service, time_to_renewal_service

router = APIRouter()


def _service_status(holder: LazyService, **assets: Path) -> Dict[str, Any]:
    return {
        "loaded": holder.loaded,
        "error": str(holder.error) if holder.error is not None else None,
        "assets": {name: Path(path).exists() for name, path in assets.items()},
    }


@router.get("/health")
def health():
    """Container/ELB-friendly health probe endpoint."""
    return {"status": "healthy"}


@router.get("/")
def health_check(settings: Settings = Depends(get_settings)):
    """Basic status with model availability flags for quick diagnostics."""
    all_loaded = renewal_service.loaded and time_to_renewal_service.loaded
    return {
        "status": "OK" if all_loaded else "DEGRADED",
        "renewal_probability": _service_status(
            renewal_service,
            model=settings.classifier_model_path,
            features=settings.classifier_features_path,
        ),
        "time_to_renewal": _service_status(
            time_to_renewal_service,
            model=settings.regressor_model_path,
            features=settings.regressor_features_path,
            defaults=settings.regressor_defaults_path,
        ),
    }
