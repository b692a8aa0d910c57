"""
Battery Degradation Projector
Forward SoH projection using the empirical aging model
"""
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

import numpy as np

from .aging_estimator import AgingEstimator, EstimationInput
from .chemistry import ChemistryProfile

logger = logging.getLogger(__name__)


@dataclass
class DegradationProjection:
    """Projected SoH over the coming months"""
    current_soh: float
    cycles_per_month: float

    # (months from now, projected SoH)
    points: List[Tuple[int, float]] = field(default_factory=list)

    # When will it cross the status thresholds
    months_to_degraded: Optional[int] = None     # below 80%
    months_to_end_of_life: Optional[int] = None  # below 60%


class DegradationProjector:
    """
    Projects future battery health by re-evaluating the aging model
    at later ages.

    Assumes the battery keeps its observed usage pattern: the same
    operating conditions and the same cycling pace per month.
    """

    def __init__(
        self,
        profile: ChemistryProfile,
        estimator: Optional[AgingEstimator] = None
    ):
        """
        Initialize projector.

        Args:
            profile: Aging parameters of the battery chemistry
            estimator: Aging model, a default instance if omitted
        """
        self.profile = profile
        self.estimator = estimator or AgingEstimator()

    def project(
        self,
        inputs: EstimationInput,
        months_ahead: int = 60,
        step_months: int = 12,
        cycles_per_month: Optional[float] = None
    ) -> DegradationProjection:
        """
        Project SoH from today up to `months_ahead` months.

        Args:
            inputs: Current usage history
            months_ahead: Projection horizon
            step_months: Spacing between projection points
            cycles_per_month: Future cycling pace, derived from the
                history when omitted

        Returns:
            DegradationProjection with curve and threshold crossings
        """
        if cycles_per_month is None:
            cycles_per_month = self.observed_cycle_rate(inputs)

        offsets = np.arange(0, months_ahead + 1, step_months)
        if offsets[-1] != months_ahead:
            offsets = np.append(offsets, months_ahead)

        points = []
        for offset in offsets:
            offset = int(offset)
            soh = self._soh_after(inputs, offset, cycles_per_month)
            points.append((offset, round(soh, 1)))

        current_soh = self._soh_after(inputs, 0, cycles_per_month)

        months_to_degraded = self._months_to_threshold(
            inputs, AgingEstimator.GOOD_THRESHOLD, months_ahead, cycles_per_month
        )
        months_to_eol = self._months_to_threshold(
            inputs, AgingEstimator.DEGRADED_THRESHOLD, months_ahead, cycles_per_month
        )

        logger.debug(
            f"{self.profile.key.value}: projected {len(points)} points over "
            f"{months_ahead} months at {cycles_per_month:.1f} cycles/month"
        )

        return DegradationProjection(
            current_soh=round(current_soh, 1),
            cycles_per_month=round(cycles_per_month, 2),
            points=points,
            months_to_degraded=months_to_degraded,
            months_to_end_of_life=months_to_eol
        )

    @staticmethod
    def observed_cycle_rate(inputs: EstimationInput) -> float:
        """Average cycles per month so far"""
        if inputs.age_months <= 0:
            return 0.0
        return inputs.cycle_count / inputs.age_months

    def _soh_after(
        self,
        inputs: EstimationInput,
        months: int,
        cycles_per_month: float
    ) -> float:
        """SoH after `months` more months of the same usage"""
        future = replace(
            inputs,
            age_months=inputs.age_months + months,
            cycle_count=inputs.cycle_count + cycles_per_month * months
        )
        return self.estimator.estimate(future, self.profile).soh_percent

    def _months_to_threshold(
        self,
        inputs: EstimationInput,
        threshold: float,
        horizon: int,
        cycles_per_month: float
    ) -> Optional[int]:
        """First whole month at which SoH drops below threshold"""
        for month in range(horizon + 1):
            if self._soh_after(inputs, month, cycles_per_month) < threshold:
                return month
        return None
