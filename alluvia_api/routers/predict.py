"""Prediction endpoints.

Exposes:
- POST /predict/renewal-probability(/form): probability that a plan renews
- POST /predict/months-to-renewal(/form): expected months until renewal

Service errors propagate to the handler registered in `main.py`.
"""

from typing import Dict

from fastapi import APIRouter, Depends

from ..core.models_io import (
    OverridesRequest,
    RenewalLikelihoodForm,
    RenewalProbabilityResponse,
    TimeToRenewalForm,
    TimeToRenewalResponse,
)
from ..ml.engine import (
    RenewalMLService,
    TimeToRenewalMLService,
    get_renewal_service,
    get_time_to_renewal_service,
)

router = APIRouter(prefix="/predict")


def _renewal_response(service: RenewalMLService, overrides: Dict[str, float]) -> RenewalProbabilityResponse:
    probability = service.predict_probability_renewal(overrides)
    percent = probability * 100.0
    return RenewalProbabilityResponse(
        probability=probability,
        percent=percent,
        message=f"Probability of renewal: {percent:.1f}%",
        model_version=service.model_version,
    )


def _months_response(service: TimeToRenewalMLService, overrides: Dict[str, float]) -> TimeToRenewalResponse:
    months = service.predict_months_to_renewal(overrides)
    return TimeToRenewalResponse(
        months=months,
        message=f"Expected months to renewal: {months:.1f}",
        model_version=service.model_version,
    )


@router.post("/renewal-probability", response_model=RenewalProbabilityResponse)
def predict_renewal_probability(
    request: OverridesRequest,
    service: RenewalMLService = Depends(get_renewal_service),
):
    return _renewal_response(service, request.overrides)


@router.post("/renewal-probability/form", response_model=RenewalProbabilityResponse)
def predict_renewal_probability_form(
    form: RenewalLikelihoodForm,
    service: RenewalMLService = Depends(get_renewal_service),
):
    return _renewal_response(service, form.to_overrides())


@router.post("/months-to-renewal", response_model=TimeToRenewalResponse)
def predict_months_to_renewal(
    request: OverridesRequest,
    service: TimeToRenewalMLService = Depends(get_time_to_renewal_service),
):
    return _months_response(service, request.overrides)


@router.post("/months-to-renewal/form", response_model=TimeToRenewalResponse)
def predict_months_to_renewal_form(
    form: TimeToRenewalForm,
    service: TimeToRenewalMLService = Depends(get_time_to_renewal_service),
):
    return _months_response(service, form.to_overrides())
