"""
Report Builder Service
Form parsing, status display and plain-text report for SoH estimates
"""
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Optional, Tuple

from ..analysis.aging_estimator import EstimationInput, EstimationResult, StatusTier
from ..analysis.chemistry import ChemistryKey, ChemistryProfile, get_profile


# Form field name -> human readable label
REQUIRED_FIELDS: Dict[str, str] = {
    "design_capacity_ah": "design capacity",
    "age_months": "age (months)",
    "cycle_count": "cycle count",
    "ambient_temp_c": "ambient temperature",
}

OPTIONAL_FIELDS: Dict[str, str] = {
    "depth_of_discharge_percent": "depth of discharge",
    "charge_rate_c": "charge rate",
}

# Field name -> (lower bound, lower bound inclusive, upper bound inclusive)
FIELD_BOUNDS: Dict[str, Tuple[float, bool, Optional[float]]] = {
    "design_capacity_ah": (0, False, None),
    "age_months": (0, True, None),
    "cycle_count": (0, True, None),
    "ambient_temp_c": (-273.15, False, None),   # above absolute zero
    "depth_of_discharge_percent": (0, True, 100),
    "charge_rate_c": (0, True, None),
}

REPORT_FOOTER = "* This report is an estimate based on an NREL-derived empirical aging model."


class FormValidationError(ValueError):
    """Raised when form fields are missing, not numeric or out of range"""

    def __init__(self, fields: List[str]):
        self.fields = fields
        labels = ", ".join(REQUIRED_FIELDS.get(f, OPTIONAL_FIELDS.get(f, f)) for f in fields)
        super().__init__(f"Please enter valid numbers for: {labels}")


@dataclass(frozen=True)
class StatusDisplay:
    """How a status tier is shown on the page"""
    icon: str
    label: str
    color: str


STATUS_DISPLAYS: Dict[StatusTier, StatusDisplay] = {
    StatusTier.GOOD: StatusDisplay("🟢", "Good condition", "#4caf50"),
    StatusTier.DEGRADED: StatusDisplay("🟡", "Inspection advised (reduced performance)", "#ff9800"),
    StatusTier.END_OF_LIFE: StatusDisplay("🔴", "Replacement recommended (end of life)", "#f44336"),
}


def status_display(tier: StatusTier) -> StatusDisplay:
    return STATUS_DISPLAYS[tier]


def parse_estimation_form(
    fields: Mapping[str, Optional[str]],
    default_dod_percent: float = 80.0,
    default_charge_rate_c: float = 0.5
) -> EstimationInput:
    """
    Build an EstimationInput from raw form values.

    All required fields must parse as finite numbers within FIELD_BOUNDS.
    Range-slider fields fall back to their defaults when left out.

    Raises:
        FormValidationError: listing every field that failed to parse or
            is out of range
        UnknownChemistryError: if the chemistry key has no profile
    """
    values: Dict[str, float] = {}
    invalid: List[str] = []

    for name in REQUIRED_FIELDS:
        number = _parse_number(fields.get(name))
        if number is None:
            invalid.append(name)
        else:
            values[name] = number

    defaults = {
        "depth_of_discharge_percent": default_dod_percent,
        "charge_rate_c": default_charge_rate_c,
    }
    for name, default in defaults.items():
        raw = fields.get(name)
        if raw is None or not str(raw).strip():
            values[name] = default
            continue
        number = _parse_number(raw)
        if number is None:
            invalid.append(name)
        else:
            values[name] = number

    invalid.extend(
        name for name, value in values.items()
        if not _within_bounds(name, value)
    )
    if invalid:
        raise FormValidationError([name for name in FIELD_BOUNDS if name in invalid])

    chemistry = get_profile(fields.get("chemistry_key") or ChemistryKey.LEAD).key

    return EstimationInput(chemistry_key=chemistry, **values)


def _parse_number(raw: Optional[str]) -> Optional[float]:
    """Parse a form value, None if empty or not a finite number"""
    if raw is None:
        return None
    try:
        number = float(str(raw).strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _within_bounds(name: str, value: float) -> bool:
    lower, inclusive, upper = FIELD_BOUNDS[name]
    if value < lower or (value == lower and not inclusive):
        return False
    return upper is None or value <= upper


def loss_bar_width(loss_percent: float, full_scale_percent: float = 40.0) -> float:
    """Bar width in percent, a loss of `full_scale_percent` fills the bar"""
    width = loss_percent / full_scale_percent * 100
    return min(width, 100.0)


def format_loss(loss_percent: float) -> str:
    return f"-{loss_percent:.1f}%"


def _format_number(value: float) -> str:
    """Echo an input value as entered, without a trailing .0"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def build_report_text(
    inputs: EstimationInput,
    profile: ChemistryProfile,
    result: EstimationResult,
    label: Optional[str] = None,
    report_date: Optional[date] = None,
    label_placeholder: str = "Unnamed battery"
) -> str:
    """
    Compose the shareable plain-text report.

    Args:
        inputs: Usage history the estimate was computed from
        profile: Chemistry profile used
        result: Estimation result
        label: Free-text battery label, placeholder if empty
        report_date: Date printed on the report, today if omitted
        label_placeholder: Text used when no label is given

    Returns:
        Multi-line report string
    """
    report_date = report_date or date.today()
    label = (label or "").strip() or label_placeholder
    display = status_display(result.status_tier)

    lines = [
        "[Battery Health Report]",
        f"Date: {report_date.isoformat()}",
        f"Label: {label}",
        f"Battery: {profile.display_name} ({_format_number(inputs.design_capacity_ah)}Ah)",
        "",
        f"Result: {result.soh_percent:.1f}% ({display.icon} {display.label})",
        f"- Current capacity: {result.current_capacity_ah:.1f} Ah",
        f"- Usage history: {_format_number(inputs.age_months)} months / "
        f"{_format_number(inputs.cycle_count)} cycles",
        f"- Operating conditions: DOD {_format_number(inputs.depth_of_discharge_percent)}%, "
        f"temperature {_format_number(inputs.ambient_temp_c)}°C",
        "",
        "Detailed analysis",
        f"- Calendar aging: {format_loss(result.calendar_loss_percent)}",
        f"- Cycle aging: {format_loss(result.cycle_loss_percent)}",
        f"- Primary cause: {result.primary_aging_cause.value}",
        "",
        REPORT_FOOTER,
    ]
    return "\n".join(lines)
