"""
Battery Analysis Module
Chemistry profiles, SoH estimation and degradation projection
"""
from .chemistry import ChemistryKey, ChemistryProfile, CHEMISTRY_PROFILES, get_profile
from .aging_estimator import AgingEstimator, EstimationInput, EstimationResult, estimate
from .degradation import DegradationProjector

__all__ = [
    "ChemistryKey",
    "ChemistryProfile",
    "CHEMISTRY_PROFILES",
    "get_profile",
    "AgingEstimator",
    "EstimationInput",
    "EstimationResult",
    "estimate",
    "DegradationProjector",
]
