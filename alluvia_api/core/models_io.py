"""Pydantic request/response schemas used by the API.

The `*Form` schemas mirror the fields of the two input screens: toggles are
sent as booleans and amounts/ages as the raw text the user typed. They are
converted to feature overrides here, on the caller side, before reaching the
prediction services.
"""

import math
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def parse_numeric_text(text: Optional[str]) -> float:
    """
    Numeric text field -> float; empty or malformed text counts as 0.0.

    Parsing is strict: surrounding whitespace, digit separators and
    non-finite values (inf, nan) are all treated as malformed.
    """
    if not text or text != text.strip() or "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def flag(value: bool) -> float:
    return 1.0 if value else 0.0


class OverridesRequest(BaseModel):
    """Sparse feature overrides; features not listed use the model defaults."""
    overrides: Dict[str, float] = Field(default_factory=dict)


class RenewalLikelihoodForm(BaseModel):
    """Fields of the renewal probability screen."""
    expense_created_flag: bool = False
    support_message_thread_flag: bool = False
    up_for_first_renewal: bool = False
    benefit_guide_views_flag: bool = False
    first_unlock_journey_PREGNANT: bool = False
    provider_finder_flag: bool = False
    logins_flag: bool = False
    first_unlock_journey_TRY_PREGNANT: bool = False
    trunc_current_lifetime_benefit_maximum: Optional[str] = Field("", description="Lifetime benefit maximum ($)")
    pregnancy_article_views_flag: bool = False

    def to_overrides(self) -> Dict[str, float]:
        return {
            "expense_created_flag": flag(self.expense_created_flag),
            "support_message_thread_flag": flag(self.support_message_thread_flag),
            "up_for_first_renewal": flag(self.up_for_first_renewal),
            "benefit_guide_views_flag": flag(self.benefit_guide_views_flag),
            "first_unlock_journey_PREGNANT": flag(self.first_unlock_journey_PREGNANT),
            "provider_finder_flag": flag(self.provider_finder_flag),
            "logins_flag": flag(self.logins_flag),
            "first_unlock_journey_TRY_PREGNANT": flag(self.first_unlock_journey_TRY_PREGNANT),
            "trunc_current_lifetime_benefit_maximum": parse_numeric_text(self.trunc_current_lifetime_benefit_maximum),
            "pregnancy_article_views_flag": flag(self.pregnancy_article_views_flag),
        }


class TimeToRenewalForm(BaseModel):
    """Fields of the time to renewal screen."""
    expense_created_flag: bool = False
    up_for_first_renewal: bool = False
    trunc_employee_age: Optional[str] = Field("", description="Employee age (years)")
    phone_support_flag: bool = False
    trunc_current_lifetime_benefit_maximum: Optional[str] = Field("", description="Lifetime benefit maximum ($)")
    first_unlock_journey_TRY_PREGNANT: bool = False
    first_unlock_journey_PREGNANT: bool = False
    trunc_current_annual_benefit_maximum: Optional[str] = Field("", description="Annual benefit maximum ($)")
    first_unlock_journey_PRESERVATION: bool = False
    first_unlock_journey_EXPLORING: bool = False

    def to_overrides(self) -> Dict[str, float]:
        return {
            "expense_created_flag": flag(self.expense_created_flag),
            "up_for_first_renewal": flag(self.up_for_first_renewal),
            "trunc_employee_age": parse_numeric_text(self.trunc_employee_age),
            "phone_support_flag": flag(self.phone_support_flag),
            "trunc_current_lifetime_benefit_maximum": parse_numeric_text(self.trunc_current_lifetime_benefit_maximum),
            "first_unlock_journey_TRY_PREGNANT": flag(self.first_unlock_journey_TRY_PREGNANT),
            "first_unlock_journey_PREGNANT": flag(self.first_unlock_journey_PREGNANT),
            "trunc_current_annual_benefit_maximum": parse_numeric_text(self.trunc_current_annual_benefit_maximum),
            "first_unlock_journey_PRESERVATION": flag(self.first_unlock_journey_PRESERVATION),
            "first_unlock_journey_EXPLORING": flag(self.first_unlock_journey_EXPLORING),
        }


class RenewalProbabilityResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    probability: float = Field(..., ge=0.0, le=1.0)
    percent: float                 # probability * 100
    message: str                   # text shown to the user
    model_version: str


class TimeToRenewalResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    months: float
    message: str
    model_version: str


class FeatureListResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_version: str
    feature_names: List[str]
    default_values: Optional[Dict[str, float]] = None
