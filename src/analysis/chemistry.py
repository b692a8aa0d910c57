"""
Battery Chemistry Profiles
Static aging parameters per supported battery chemistry
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Union


class ChemistryKey(str, Enum):
    """Supported battery chemistries"""
    LEAD = "lead"
    NMC = "nmc"
    LFP = "lfp"


class UnknownChemistryError(KeyError):
    """Raised when no profile exists for a chemistry key"""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown battery chemistry: {self.key!r}"


@dataclass(frozen=True)
class ChemistryProfile:
    """Empirical aging parameters for one chemistry"""
    key: ChemistryKey
    display_name: str
    calendar_coefficient: float     # loss fraction per sqrt(month)
    cycle_coefficient: float        # loss fraction per full-depth cycle
    dod_stress_exponent: float      # >= 1, deeper cycles hurt disproportionately
    rate_stress_coefficient: float  # linear C-rate penalty
    activation_energy: float        # J/mol, Arrhenius temperature sensitivity


# Parameters approximate published NREL / Sandia aging studies
CHEMISTRY_PROFILES: Mapping[ChemistryKey, ChemistryProfile] = MappingProxyType({
    ChemistryKey.LEAD: ChemistryProfile(
        key=ChemistryKey.LEAD,
        display_name="Lead-Acid",
        calendar_coefficient=0.0035,  # sulfation
        cycle_coefficient=0.0006,     # 300-500 cycles typical
        dod_stress_exponent=2.3,
        rate_stress_coefficient=0.2,
        activation_energy=35000,
    ),
    ChemistryKey.NMC: ChemistryProfile(
        key=ChemistryKey.NMC,
        display_name="Lithium-Ion (NMC)",
        calendar_coefficient=0.0025,
        cycle_coefficient=0.0003,     # 800-1000 cycles
        dod_stress_exponent=1.8,
        rate_stress_coefficient=0.15,
        activation_energy=24000,
    ),
    ChemistryKey.LFP: ChemistryProfile(
        key=ChemistryKey.LFP,
        display_name="Lithium Iron Phosphate (LFP)",
        calendar_coefficient=0.0008,
        cycle_coefficient=0.00012,    # 2000+ cycles
        dod_stress_exponent=1.2,
        rate_stress_coefficient=0.05,
        activation_energy=18000,
    ),
})


def get_profile(key: Union[ChemistryKey, str]) -> ChemistryProfile:
    """Look up the profile for a chemistry key"""
    try:
        return CHEMISTRY_PROFILES[ChemistryKey(key)]
    except ValueError:
        raise UnknownChemistryError(str(key)) from None


def list_profiles() -> List[ChemistryProfile]:
    return list(CHEMISTRY_PROFILES.values())
