"""
Estimates API
SoH estimation, shareable report and degradation projection endpoints
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from ..analysis import AgingEstimator, DegradationProjector, EstimationInput, EstimationResult
from ..analysis.chemistry import ChemistryKey, ChemistryProfile, UnknownChemistryError, get_profile, list_profiles
from ..config import get_settings
from ..services.report_builder import (
    FormValidationError,
    build_report_text,
    format_loss,
    loss_bar_width,
    parse_estimation_form,
    status_display,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============ Models ============

class EstimateRequest(BaseModel):
    """Battery usage history to estimate"""
    chemistry_key: ChemistryKey = Field(default=ChemistryKey.LEAD, examples=["lead"])
    design_capacity_ah: float = Field(..., gt=0, allow_inf_nan=False, examples=[100.0])
    age_months: float = Field(..., ge=0, allow_inf_nan=False, examples=[12])
    cycle_count: float = Field(..., ge=0, allow_inf_nan=False, examples=[200])
    ambient_temp_c: float = Field(..., gt=-273.15, allow_inf_nan=False, examples=[25])
    depth_of_discharge_percent: float = Field(default=80, ge=0, le=100, allow_inf_nan=False)
    charge_rate_c: float = Field(default=0.5, ge=0, allow_inf_nan=False)
    label: Optional[str] = Field(default=None, max_length=200, examples=["Shop UPS #2"])

    def to_input(self) -> EstimationInput:
        return EstimationInput(
            chemistry_key=self.chemistry_key,
            design_capacity_ah=self.design_capacity_ah,
            age_months=self.age_months,
            cycle_count=self.cycle_count,
            ambient_temp_c=self.ambient_temp_c,
            depth_of_discharge_percent=self.depth_of_discharge_percent,
            charge_rate_c=self.charge_rate_c
        )


class ProjectionRequest(EstimateRequest):
    """Usage history plus projection horizon"""
    months_ahead: Optional[int] = Field(default=None, ge=0, le=600)
    step_months: Optional[int] = Field(default=None, ge=1, le=120)
    cycles_per_month: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class ChemistryResponse(BaseModel):
    """Chemistry profile"""
    key: str
    display_name: str
    calendar_coefficient: float
    cycle_coefficient: float
    dod_stress_exponent: float
    rate_stress_coefficient: float
    activation_energy: float


class StatusResponse(BaseModel):
    tier: str
    icon: str
    label: str
    color: str


class LossBarResponse(BaseModel):
    """Proportional loss bar"""
    loss_percent: float
    width_percent: float
    text: str


class EstimateResponse(BaseModel):
    """SoH estimate with everything the page renders"""
    chemistry_key: str
    chemistry_name: str

    # Core metrics
    soh_percent: float
    current_capacity_ah: float
    design_capacity_ah: float
    calendar_loss_percent: float
    cycle_loss_percent: float
    total_loss_percent: float
    temperature_stress: float

    # Classification
    status: StatusResponse
    primary_aging_cause: str

    # Visualization
    calendar_bar: LossBarResponse
    cycle_bar: LossBarResponse

    # Shareable report
    report_text: str


class ProjectionResponse(BaseModel):
    """Projected SoH curve"""
    chemistry_key: str
    current_soh: float
    cycles_per_month: float
    points: List[Tuple[int, float]]
    months_to_degraded: Optional[int] = None
    months_to_end_of_life: Optional[int] = None


# ============ Helpers ============

def _resolve_profile(key: str) -> ChemistryProfile:
    try:
        return get_profile(key)
    except UnknownChemistryError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _loss_bar(loss_percent: float, full_scale: float) -> LossBarResponse:
    return LossBarResponse(
        loss_percent=round(loss_percent, 3),
        width_percent=round(loss_bar_width(loss_percent, full_scale), 2),
        text=format_loss(loss_percent)
    )


def _build_response(
    inputs: EstimationInput,
    profile: ChemistryProfile,
    result: EstimationResult,
    label: Optional[str]
) -> EstimateResponse:
    settings = get_settings()
    display = status_display(result.status_tier)

    return EstimateResponse(
        chemistry_key=profile.key.value,
        chemistry_name=profile.display_name,
        soh_percent=result.soh_percent,
        current_capacity_ah=result.current_capacity_ah,
        design_capacity_ah=inputs.design_capacity_ah,
        calendar_loss_percent=result.calendar_loss_percent,
        cycle_loss_percent=result.cycle_loss_percent,
        total_loss_percent=result.total_loss_percent,
        temperature_stress=result.temperature_stress,
        status=StatusResponse(
            tier=result.status_tier.value,
            icon=display.icon,
            label=display.label,
            color=display.color
        ),
        primary_aging_cause=result.primary_aging_cause.value,
        calendar_bar=_loss_bar(result.calendar_loss_percent, settings.loss_bar_full_scale_percent),
        cycle_bar=_loss_bar(result.cycle_loss_percent, settings.loss_bar_full_scale_percent),
        report_text=build_report_text(
            inputs, profile, result,
            label=label,
            label_placeholder=settings.report_label_placeholder
        )
    )


def _run_estimate(inputs: EstimationInput, label: Optional[str]) -> EstimateResponse:
    profile = _resolve_profile(inputs.chemistry_key)
    result = AgingEstimator().estimate(inputs, profile)

    logger.info(
        f"Estimated {profile.key.value} battery: SoH {result.soh_percent:.1f}% "
        f"({result.status_tier.value}, {result.primary_aging_cause.value})"
    )

    return _build_response(inputs, profile, result, label)


# ============ Endpoints ============

@router.get("/chemistries", response_model=List[ChemistryResponse])
async def list_chemistries():
    """List supported battery chemistries and their aging parameters"""
    return [
        ChemistryResponse(
            key=p.key.value,
            display_name=p.display_name,
            calendar_coefficient=p.calendar_coefficient,
            cycle_coefficient=p.cycle_coefficient,
            dod_stress_exponent=p.dod_stress_exponent,
            rate_stress_coefficient=p.rate_stress_coefficient,
            activation_energy=p.activation_energy
        )
        for p in list_profiles()
    ]


@router.post("/estimates", response_model=EstimateResponse)
async def create_estimate(request: EstimateRequest):
    """
    Estimate battery State of Health.

    Returns:
    - SoH percentage and remaining capacity
    - Calendar vs cycle aging breakdown with bar widths
    - Status tier (good / degraded / end_of_life) and primary aging cause
    - Shareable plain-text report
    """
    return _run_estimate(request.to_input(), request.label)


@router.post("/estimates/form", response_model=EstimateResponse)
async def create_estimate_from_form(fields: Dict[str, Any]):
    """
    Estimate from raw form values.

    Required fields that are missing or not numeric are rejected with
    400 and the estimator is not run.
    """
    settings = get_settings()

    try:
        inputs = parse_estimation_form(
            fields,
            default_dod_percent=settings.default_dod_percent,
            default_charge_rate_c=settings.default_charge_rate_c
        )
    except FormValidationError as e:
        logger.warning(f"Rejected estimate form: invalid fields {e.fields}")
        raise HTTPException(status_code=400, detail=str(e))
    except UnknownChemistryError as e:
        raise HTTPException(status_code=404, detail=str(e))

    label = fields.get("label")
    return _run_estimate(inputs, str(label) if label is not None else None)


@router.post("/estimates/report", response_class=PlainTextResponse)
async def create_report(request: EstimateRequest):
    """Plain-text battery health report, ready to copy"""
    return _run_estimate(request.to_input(), request.label).report_text


@router.post("/estimates/projection", response_model=ProjectionResponse)
async def create_projection(request: ProjectionRequest):
    """
    Project SoH into the future assuming the current usage pattern continues.

    The cycling pace defaults to the average cycles per month so far.
    """
    settings = get_settings()
    profile = _resolve_profile(request.chemistry_key)

    projection = DegradationProjector(profile).project(
        request.to_input(),
        months_ahead=(
            request.months_ahead
            if request.months_ahead is not None
            else settings.projection_months_ahead
        ),
        step_months=request.step_months or settings.projection_step_months,
        cycles_per_month=request.cycles_per_month
    )

    return ProjectionResponse(
        chemistry_key=profile.key.value,
        current_soh=projection.current_soh,
        cycles_per_month=projection.cycles_per_month,
        points=projection.points,
        months_to_degraded=projection.months_to_degraded,
        months_to_end_of_life=projection.months_to_end_of_life
    )
