"""
Pydantic models for state point, saturation and fluid limit input/output.
"""

from typing import Optional

from pydantic import BaseModel, Field

from fluidstate.config import DEFAULT_FLUID, Basis, Phase, StateKind


class StatePointInput(BaseModel):
    """Input model for resolving a state point from two known properties."""

    input_pair: tuple[str, str] = Field(
        ...,
        description="Pair of independent properties, e.g. ('P', 'T')",
        examples=[("P", "T"), ("P", "X"), ("T", "S")],
    )
    values: tuple[float, float] = Field(
        ...,
        description="Values for the input pair, in order matching input_pair",
        examples=[(101325.0, 373.0), (101325.0, 0.5)],
    )
    basis: Basis = Field(
        default=Basis.MOLAR,
        description="Unit basis of the inputs and outputs: molar or mass",
    )
    fluid: str = Field(
        default=DEFAULT_FLUID,
        description="CoolProp fluid name",
    )
    properties: Optional[list[str]] = Field(
        default=None,
        description="Properties to return; defaults to P, T, H, S, RHO, U, X",
        examples=[["T", "H", "CP", "W"]],
    )
    label: str = Field(
        default="",
        description="Optional user-facing label for this state point",
    )


class StatePointOutput(BaseModel):
    """Resolved state point with the requested properties."""

    # Input echo
    label: str = ""
    fluid: str
    basis: Basis
    input_pair: tuple[str, str]
    input_values: tuple[float, float]

    # Resolved state
    state_kind: StateKind = Field(..., description="Canonical specification the pair resolved to")
    phase: Phase
    properties: dict[str, Optional[float]] = Field(
        ...,
        description="Property values keyed by name; null where undefined (e.g. quality above critical)",
    )
    units: dict[str, str]


class SaturationOutput(BaseModel):
    """Saturated liquid / vapor properties at one pressure or temperature."""

    fluid: str
    basis: Basis
    pressure: Optional[float] = Field(None, description="Saturation pressure (Pa)")
    temperature: Optional[float] = Field(None, description="Saturation temperature (K)")
    enthalpy_liquid: Optional[float] = None
    enthalpy_vapor: Optional[float] = None
    entropy_liquid: Optional[float] = None
    entropy_vapor: Optional[float] = None
    density_liquid: Optional[float] = None
    density_vapor: Optional[float] = None
    latent_heat: Optional[float] = Field(None, description="Enthalpy of vaporization")


class FluidLimitsOutput(BaseModel):
    """Fixed properties and validity range of a fluid."""

    fluid: str
    molar_mass: float = Field(..., description="kg/mol")
    critical_temperature: float = Field(..., description="K")
    critical_pressure: float = Field(..., description="Pa")
    min_temperature: float
    max_temperature: float
    min_pressure: float
    max_pressure: float
