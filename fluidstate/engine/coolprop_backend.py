"""
CoolProp implementation of the backend contract.

Wraps a CoolProp AbstractState (HEOS by default). Each state-setting call
builds a new AbstractState so no iteration state survives from a previous
specification.
"""

from typing import Callable

import CoolProp.CoolProp as CP

from fluidstate.config import DEFAULT_EOS, DEFAULT_FLUID, Phase
from fluidstate.engine.backend import FluidBackend
from fluidstate.errors import ConvergenceFailure, PropertyUnavailable


class CoolPropBackend(FluidBackend):
    """CoolProp-backed EOS evaluator (molar basis)."""

    PHASE_MAP = {
        CP.iphase_liquid: Phase.LIQUID,
        CP.iphase_supercritical_liquid: Phase.LIQUID,
        CP.iphase_gas: Phase.GAS,
        CP.iphase_supercritical_gas: Phase.GAS,
        CP.iphase_twophase: Phase.TWO_PHASE,
        CP.iphase_critical_point: Phase.CRITICAL,
        CP.iphase_supercritical: Phase.SUPERCRITICAL,
    }

    def __init__(self, fluid: str = DEFAULT_FLUID, eos: str = DEFAULT_EOS):
        self.fluid = fluid
        self.eos = eos
        self._state = self._factory()

    def __repr__(self) -> str:
        return f"CoolPropBackend(fluid={self.fluid!r}, eos={self.eos!r})"

    def _factory(self) -> "CP.AbstractState":
        try:
            return CP.AbstractState(self.eos, self.fluid)
        except ValueError as e:
            raise ValueError(f"Cannot load fluid {self.fluid!r} with {self.eos}: {e}") from e

    def new_instance(self) -> "CoolPropBackend":
        return CoolPropBackend(self.fluid, self.eos)

    def _update(self, input_pair: int, label: str, value1: float, value2: float) -> None:
        self._state = self._factory()
        try:
            self._state.update(input_pair, value1, value2)
        except ValueError as e:
            raise ConvergenceFailure(
                f"{self.eos}::{self.fluid} failed to converge for "
                f"{label} = ({value1!r}, {value2!r}): {e}"
            ) from e

    def _read(self, getter: Callable[[], float], name: str) -> float:
        try:
            return getter()
        except ValueError as e:
            raise PropertyUnavailable(f"{name} is not available at the current state: {e}") from e

    # State-setting operations. CoolProp input pairs have their own argument
    # order, which is not always the canonical one.

    def set_state_pt(self, pressure, temperature):
        self._update(CP.PT_INPUTS, "PT", pressure, temperature)

    def set_state_px(self, pressure, quality):
        self._update(CP.PQ_INPUTS, "PQ", pressure, quality)

    def set_state_ph(self, pressure, enthalpy):
        self._update(CP.HmolarP_INPUTS, "HP", enthalpy, pressure)

    def set_state_ps(self, pressure, entropy):
        self._update(CP.PSmolar_INPUTS, "PS", pressure, entropy)

    def set_state_dp(self, density, pressure):
        self._update(CP.DmolarP_INPUTS, "DP", density, pressure)

    def set_state_dt(self, density, temperature):
        self._update(CP.DmolarT_INPUTS, "DT", density, temperature)

    def set_state_ds(self, density, entropy):
        self._update(CP.DmolarSmolar_INPUTS, "DS", density, entropy)

    def set_state_dh(self, density, enthalpy):
        self._update(CP.DmolarHmolar_INPUTS, "DH", density, enthalpy)

    def set_state_du(self, density, internal_energy):
        self._update(CP.DmolarUmolar_INPUTS, "DU", density, internal_energy)

    def set_state_hs(self, enthalpy, entropy):
        self._update(CP.HmolarSmolar_INPUTS, "HS", enthalpy, entropy)

    def set_state_pu(self, pressure, internal_energy):
        self._update(CP.PUmolar_INPUTS, "PU", pressure, internal_energy)

    def set_state_ts(self, temperature, entropy):
        self._update(CP.SmolarT_INPUTS, "ST", entropy, temperature)

    def set_state_tx(self, temperature, quality):
        self._update(CP.QT_INPUTS, "QT", quality, temperature)

    # Trivial properties

    def molar_mass(self):
        return self._state.molar_mass()

    def critical_pressure(self):
        return self._state.p_critical()

    def critical_temperature(self):
        return self._state.T_critical()

    def min_pressure(self):
        return self._state.trivial_keyed_output(CP.iP_triple)

    def max_pressure(self):
        return self._state.pmax()

    def min_temperature(self):
        return self._state.Tmin()

    def max_temperature(self):
        return self._state.Tmax()

    # Required properties

    def temperature(self):
        return self._read(self._state.T, "temperature")

    def pressure(self):
        return self._read(self._state.p, "pressure")

    def vapor_quality(self):
        return self._read(self._state.Q, "vapor quality")

    def enthalpy(self):
        return self._read(self._state.hmolar, "enthalpy")

    def entropy(self):
        return self._read(self._state.smolar, "entropy")

    def density(self):
        return self._read(self._state.rhomolar, "density")

    def internal_energy(self):
        return self._read(self._state.umolar, "internal energy")

    def raw_phase(self):
        return self._state.phase()

    # Optional properties

    def gibbs_energy(self):
        return self._read(self._state.gibbsmolar, "Gibbs energy")

    def helmholtz_energy(self):
        return self._read(self._state.helmholtzmolar, "Helmholtz energy")

    def compressibility(self):
        return self._read(self._state.compressibility_factor, "compressibility factor")

    def cp(self):
        return self._read(self._state.cpmolar, "cp")

    def cv(self):
        return self._read(self._state.cvmolar, "cv")

    def speed_of_sound(self):
        return self._read(self._state.speed_sound, "speed of sound")

    def isothermal_compressibility(self):
        return self._read(self._state.isothermal_compressibility, "isothermal compressibility")

    def thermal_expansion(self):
        return self._read(self._state.isobaric_expansion_coefficient, "thermal expansion coefficient")

    def dynamic_viscosity(self):
        return self._read(self._state.viscosity, "dynamic viscosity")

    def thermal_conductivity(self):
        return self._read(self._state.conductivity, "thermal conductivity")
