"""
Battery Aging Estimator
Closed-form empirical State of Health (SoH) model combining
calendar aging and cycle aging with Arrhenius temperature stress
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .chemistry import ChemistryKey, ChemistryProfile, get_profile

logger = logging.getLogger(__name__)


class StatusTier(str, Enum):
    """Battery status classification"""
    GOOD = "good"                  # >= 80%
    DEGRADED = "degraded"          # 60-79%
    END_OF_LIFE = "end_of_life"    # < 60%


class AgingCause(str, Enum):
    """Primary aging cause labels"""
    NORMAL_CALENDAR = "normal calendar aging"
    FREQUENT_CYCLING = "frequent charge/discharge cycling"
    DEEP_DISCHARGE = "deep-discharge damage"
    HEAT = "heat-accelerated degradation"
    FAST_CHARGE = "fast-charge stress"


@dataclass
class EstimationInput:
    """Usage history of a single battery"""
    chemistry_key: ChemistryKey
    design_capacity_ah: float
    age_months: float
    cycle_count: float
    ambient_temp_c: float
    depth_of_discharge_percent: float  # 0-100
    charge_rate_c: float


@dataclass
class EstimationResult:
    """Estimated battery health"""
    soh_percent: float              # 0-100
    current_capacity_ah: float
    calendar_loss_percent: float
    cycle_loss_percent: float
    status_tier: StatusTier
    primary_aging_cause: AgingCause
    temperature_stress: float       # 1.0 at 25°C

    @property
    def total_loss_percent(self) -> float:
        return self.calendar_loss_percent + self.cycle_loss_percent


class AgingEstimator:
    """
    Empirical battery aging model.

    Loss components:
    1. Calendar aging: square-root time law, loss slows as the battery ages
    2. Cycle aging: linear in cycles, weighted by depth of discharge
       (power law) and charge rate (linear)

    Both components are scaled by an Arrhenius temperature stress factor
    relative to 25°C.
    """

    GAS_CONSTANT = 8.314            # J/(mol·K)
    KELVIN_OFFSET = 273.15
    REFERENCE_TEMP_K = 298.15       # 25°C

    # Status thresholds (inclusive lower bounds)
    GOOD_THRESHOLD = 80
    DEGRADED_THRESHOLD = 60

    # Cause triggers
    CYCLING_DOMINANCE_RATIO = 1.5
    DEEP_DISCHARGE_DOD_PERCENT = 90
    HEAT_TEMP_C = 35
    FAST_CHARGE_RATE_C = 1.0

    def estimate(
        self,
        inputs: EstimationInput,
        profile: ChemistryProfile
    ) -> EstimationResult:
        """
        Estimate battery health from usage history.

        Inputs are not validated; NaN propagates through the arithmetic.

        Args:
            inputs: Battery usage history
            profile: Aging parameters of the battery chemistry

        Returns:
            EstimationResult with SoH, capacity and loss breakdown
        """
        temp_stress = self.temperature_stress(inputs.ambient_temp_c, profile)

        calendar_loss = (
            profile.calendar_coefficient
            * math.sqrt(inputs.age_months)
            * temp_stress
            * 100
        )

        dod_factor = (inputs.depth_of_discharge_percent / 100) ** profile.dod_stress_exponent
        rate_factor = 1 + inputs.charge_rate_c * profile.rate_stress_coefficient

        cycle_loss = (
            profile.cycle_coefficient
            * inputs.cycle_count
            * dod_factor
            * rate_factor
            * temp_stress
            * 100
        )

        soh_percent = max(0.0, 100 - (calendar_loss + cycle_loss))
        current_capacity = inputs.design_capacity_ah * (soh_percent / 100)

        status = self.classify_status(soh_percent)
        cause = self.classify_cause(inputs, profile, calendar_loss, cycle_loss)

        logger.debug(
            f"{profile.key.value}: SoH {soh_percent:.2f}% "
            f"(calendar -{calendar_loss:.2f}%, cycle -{cycle_loss:.2f}%, "
            f"temp stress {temp_stress:.3f})"
        )

        return EstimationResult(
            soh_percent=soh_percent,
            current_capacity_ah=current_capacity,
            calendar_loss_percent=calendar_loss,
            cycle_loss_percent=cycle_loss,
            status_tier=status,
            primary_aging_cause=cause,
            temperature_stress=temp_stress
        )

    def temperature_stress(self, ambient_temp_c: float, profile: ChemistryProfile) -> float:
        """Arrhenius acceleration factor relative to the reference temperature"""
        temp_k = ambient_temp_c + self.KELVIN_OFFSET
        return math.exp(
            (profile.activation_energy / self.GAS_CONSTANT)
            * (1 / self.REFERENCE_TEMP_K - 1 / temp_k)
        )

    @classmethod
    def classify_status(cls, soh_percent: float) -> StatusTier:
        """Classify SoH into a status tier"""
        if soh_percent >= cls.GOOD_THRESHOLD:
            return StatusTier.GOOD
        elif soh_percent >= cls.DEGRADED_THRESHOLD:
            return StatusTier.DEGRADED
        else:
            return StatusTier.END_OF_LIFE

    def classify_cause(
        self,
        inputs: EstimationInput,
        profile: ChemistryProfile,
        calendar_loss: float,
        cycle_loss: float
    ) -> AgingCause:
        """
        Pick the primary aging cause.

        Rules are applied in order and each match overwrites the previous
        one, so the last matching rule wins.
        """
        cause = AgingCause.NORMAL_CALENDAR

        if cycle_loss > calendar_loss * self.CYCLING_DOMINANCE_RATIO:
            cause = AgingCause.FREQUENT_CYCLING
        if (inputs.depth_of_discharge_percent > self.DEEP_DISCHARGE_DOD_PERCENT
                and profile.key == ChemistryKey.LEAD):
            cause = AgingCause.DEEP_DISCHARGE
        if inputs.ambient_temp_c > self.HEAT_TEMP_C:
            cause = AgingCause.HEAT
        if inputs.charge_rate_c > self.FAST_CHARGE_RATE_C:
            cause = AgingCause.FAST_CHARGE

        return cause


def estimate(
    inputs: EstimationInput,
    profile: Optional[ChemistryProfile] = None
) -> EstimationResult:
    """Estimate SoH, looking up the chemistry profile by key if not given"""
    if profile is None:
        profile = get_profile(inputs.chemistry_key)
    return AgingEstimator().estimate(inputs, profile)
