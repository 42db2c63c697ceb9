"""Feature metadata endpoints.

Lets a client discover which feature names each model accepts (and the
regressor's defaults) before sending overrides.
"""

from fastapi import APIRouter, Depends

from ..core.models_io import FeatureListResponse
from ..ml.engine import (
    RenewalMLService,
    TimeToRenewalMLService,
    get_renewal_service,
    get_time_to_renewal_service,
)

router = APIRouter(prefix="/features")


@router.get("/renewal-probability", response_model=FeatureListResponse)
def renewal_features(service: RenewalMLService = Depends(get_renewal_service)):
    return FeatureListResponse(model_version=service.model_version, feature_names=service.feature_names)


@router.get("/months-to-renewal", response_model=FeatureListResponse)
def time_to_renewal_features(service: TimeToRenewalMLService = Depends(get_time_to_renewal_service)):
    return FeatureListResponse(
        model_version=service.model_version,
        feature_names=service.feature_names,
        default_values=service.default_values,
    )
