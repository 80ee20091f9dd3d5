"""
fluidstate configuration and constants.
"""

from enum import Enum


class Basis(str, Enum):
    MOLAR = "molar"  # J/mol, J/(mol·K), mol/m³, m³/mol
    MASS = "mass"    # J/kg, J/(kg·K), kg/m³, m³/kg


class Phase(str, Enum):
    LIQUID = "liquid"
    GAS = "gas"
    TWO_PHASE = "two_phase"
    CRITICAL = "critical"
    SUPERCRITICAL = "supercritical"
    UNKNOWN = "unknown"


class StateKind(str, Enum):
    """Canonical input pairs a backend can be driven by."""

    PT = "PT"
    PX = "PX"
    PH = "PH"
    PS = "PS"
    DP = "DP"
    DT = "DT"
    DS = "DS"
    DH = "DH"
    DU = "DU"
    HS = "HS"
    PU = "PU"
    TS = "TS"
    TX = "TX"


# Supported specification pairs, in the backend's canonical argument order.
# Specific volume (V) is accepted anywhere density (RHO) is.
SUPPORTED_SPECIFICATIONS: list[tuple[str, str]] = [
    ("P", "T"),
    ("P", "X"),
    ("P", "H"),
    ("P", "S"),
    ("RHO", "P"),
    ("RHO", "T"),
    ("RHO", "S"),
    ("RHO", "H"),
    ("RHO", "U"),
    ("H", "S"),
    ("P", "U"),
    ("T", "S"),
    ("T", "X"),
]

# Default working fluid and EOS backend for CoolProp
DEFAULT_FLUID = "Water"
DEFAULT_EOS = "HEOS"

# J/(mol·K), used for the compressibility factor fallback
UNIVERSAL_GAS_CONSTANT = 8.314462618

# Properties returned by the state point endpoint when none are requested
DEFAULT_STATE_POINT_PROPERTIES: list[str] = ["P", "T", "H", "S", "RHO", "U", "X"]

# Property units for display, per basis
PROPERTY_UNITS = {
    "molar": {
        "T": "K",
        "P": "Pa",
        "H": "J/mol",
        "S": "J/(mol·K)",
        "U": "J/mol",
        "A": "J/mol",
        "G": "J/mol",
        "RHO": "mol/m³",
        "V": "m³/mol",
        "CP": "J/(mol·K)",
        "CV": "J/(mol·K)",
        "KAPPA": "1/Pa",
        "ALPHA": "1/K",
        "W": "m/s",
        "Z": "",
        "X": "",
        "ETA": "Pa·s",
        "NU": "m²/s",
        "TC": "W/(m·K)",
        "PR": "",
        "MW": "kg/mol",
        "T_SAT": "K",
        "P_SAT": "Pa",
        "T_CRIT": "K",
        "P_CRIT": "Pa",
        "PHASE": "",
    },
    "mass": {
        "T": "K",
        "P": "Pa",
        "H": "J/kg",
        "S": "J/(kg·K)",
        "U": "J/kg",
        "A": "J/kg",
        "G": "J/kg",
        "RHO": "kg/m³",
        "V": "m³/kg",
        "CP": "J/(kg·K)",
        "CV": "J/(kg·K)",
        "KAPPA": "1/Pa",
        "ALPHA": "1/K",
        "W": "m/s",
        "Z": "",
        "X": "",
        "ETA": "Pa·s",
        "NU": "m²/s",
        "TC": "W/(m·K)",
        "PR": "",
        "MW": "kg/mol",
        "T_SAT": "K",
        "P_SAT": "Pa",
        "T_CRIT": "K",
        "P_CRIT": "Pa",
        "PHASE": "",
    },
}
