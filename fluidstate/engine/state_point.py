"""
One-shot state point resolution.

Builds a Fluid for the requested working fluid, sets it from a named input
pair and returns the requested properties as a response model. This is the
layer the HTTP routes call into; it works only through the public Fluid and
flash() operations.
"""

import math
from typing import Optional, Sequence

from fluidstate.config import (
    DEFAULT_FLUID,
    DEFAULT_STATE_POINT_PROPERTIES,
    PROPERTY_UNITS,
    Basis,
)
from fluidstate.engine.flash import flash
from fluidstate.engine.fluid import Fluid
from fluidstate.engine.quantities import P, QuantityKind, T, X, make_quantity
from fluidstate.engine.units import check_basis
from fluidstate.models.state_point import (
    FluidLimitsOutput,
    SaturationOutput,
    StatePointOutput,
)


def _or_none(value: float) -> Optional[float]:
    """NaN marks "not defined here"; JSON carries that as null."""
    return None if math.isnan(value) else value


def resolve_state_point(
    input_pair: tuple[str, str],
    values: tuple[float, float],
    basis: Basis = Basis.MOLAR,
    fluid: str = DEFAULT_FLUID,
    properties: Optional[Sequence[str]] = None,
    label: str = "",
) -> StatePointOutput:
    """
    Resolve a full state point from any supported input pair.

    Args:
        input_pair: Two quantity names, e.g. ("P", "T") or ("pressure", "quality")
        values: Values for the input pair, in the given basis
        basis: Unit basis of the inputs and of the returned properties
        fluid: CoolProp fluid name
        properties: Quantity names to return (defaults to P, T, H, S, RHO, U, X)
        label: Optional user label

    Returns:
        StatePointOutput with the requested properties

    Raises:
        ValueError: If the pair, a property name, the basis or the fluid is invalid
        ConvergenceFailure: If the backend does not converge
    """
    basis = check_basis(basis)
    first, second = (QuantityKind.parse(name) for name in input_pair)
    names = properties if properties else DEFAULT_STATE_POINT_PROPERTIES
    kinds = [QuantityKind.parse(name) for name in names]
    # Phase is reported on its own field
    kinds = [k for k in kinds if k != QuantityKind.PHASE]

    state = Fluid.from_name(fluid)
    state.set_state(make_quantity(first, values[0]), make_quantity(second, values[1]), basis)

    result = state.properties(kinds, basis=basis).as_list() if kinds else []
    units = PROPERTY_UNITS[basis.value]

    return StatePointOutput(
        label=label,
        fluid=fluid,
        basis=basis,
        input_pair=(first.value, second.value),
        input_values=values,
        state_kind=state.state_kind,
        phase=state.phase(),
        properties={k.value: _or_none(v) for k, v in zip(kinds, result)},
        units={k.value: units[k.value] for k in kinds},
    )


def saturation_point(
    pressure: Optional[float] = None,
    temperature: Optional[float] = None,
    basis: Basis = Basis.MOLAR,
    fluid: str = DEFAULT_FLUID,
) -> SaturationOutput:
    """
    Saturated liquid and vapor at a given pressure or temperature.

    Exactly one of pressure / temperature must be given. Above the critical
    point only the given value is echoed and the rest are None.
    """
    if (pressure is None) == (temperature is None):
        raise ValueError("Give exactly one of pressure or temperature")
    basis = check_basis(basis)
    state = Fluid.from_name(fluid)

    if pressure is not None:
        fixed = P(pressure)
        above_critical = pressure > float(state.critical(QuantityKind.P))
    else:
        fixed = T(temperature)
        above_critical = temperature > float(state.critical(QuantityKind.T))

    output = SaturationOutput(fluid=fluid, basis=basis, pressure=pressure, temperature=temperature)
    if above_critical:
        return output

    liquid = flash(state, fixed, X(0.0), basis)
    vapor = flash(state, fixed, X(1.0), basis)
    if not (liquid.valid and vapor.valid):
        return output

    liq_p, liq_t, liq_h, liq_s, liq_rho = liquid.properties("P", "T", "H", "S", "RHO", basis=basis).as_list()
    vap_h, vap_s, vap_rho = vapor.properties("H", "S", "RHO", basis=basis).as_list()

    return SaturationOutput(
        fluid=fluid,
        basis=basis,
        pressure=liq_p,
        temperature=liq_t,
        enthalpy_liquid=liq_h,
        enthalpy_vapor=vap_h,
        entropy_liquid=liq_s,
        entropy_vapor=vap_s,
        density_liquid=liq_rho,
        density_vapor=vap_rho,
        latent_heat=vap_h - liq_h,
    )


def fluid_limits(fluid: str = DEFAULT_FLUID) -> FluidLimitsOutput:
    """Molar mass, critical point and validity range of a fluid."""
    state = Fluid.from_name(fluid)
    return FluidLimitsOutput(
        fluid=fluid,
        molar_mass=state.molar_mass(),
        critical_temperature=float(state.critical(QuantityKind.T)),
        critical_pressure=float(state.critical(QuantityKind.P)),
        min_temperature=float(state.minimum(QuantityKind.T)),
        max_temperature=float(state.maximum(QuantityKind.T)),
        min_pressure=float(state.minimum(QuantityKind.P)),
        max_pressure=float(state.maximum(QuantityKind.P)),
    )
