"""
Abstract contract for equation-of-state backends.

A backend owns the actual thermodynamic model. All values crossing this
boundary are molar-basis SI: Pa, K, J/mol, J/(mol·K), mol/m³.

Every set_state_* call discards whatever solver state the previous call left
behind and must raise ConvergenceFailure if the solver does not converge.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from fluidstate.config import Phase


class FluidBackend(ABC):
    """Base class for all EOS backends."""

    # Backend-specific phase codes mapped to the public Phase enum
    PHASE_MAP: ClassVar[dict[Any, Phase]] = {}

    @abstractmethod
    def new_instance(self) -> "FluidBackend":
        """Return a fresh backend for the same fluid, with no state set."""
        ...

    # State-setting operations, arguments in canonical order

    @abstractmethod
    def set_state_pt(self, pressure: float, temperature: float) -> None: ...

    @abstractmethod
    def set_state_px(self, pressure: float, quality: float) -> None: ...

    @abstractmethod
    def set_state_ph(self, pressure: float, enthalpy: float) -> None: ...

    @abstractmethod
    def set_state_ps(self, pressure: float, entropy: float) -> None: ...

    @abstractmethod
    def set_state_dp(self, density: float, pressure: float) -> None: ...

    @abstractmethod
    def set_state_dt(self, density: float, temperature: float) -> None: ...

    @abstractmethod
    def set_state_ds(self, density: float, entropy: float) -> None: ...

    @abstractmethod
    def set_state_dh(self, density: float, enthalpy: float) -> None: ...

    @abstractmethod
    def set_state_du(self, density: float, internal_energy: float) -> None: ...

    @abstractmethod
    def set_state_hs(self, enthalpy: float, entropy: float) -> None: ...

    @abstractmethod
    def set_state_pu(self, pressure: float, internal_energy: float) -> None: ...

    @abstractmethod
    def set_state_ts(self, temperature: float, entropy: float) -> None: ...

    @abstractmethod
    def set_state_tx(self, temperature: float, quality: float) -> None: ...

    # Trivial properties (state-independent)

    @abstractmethod
    def molar_mass(self) -> float: ...

    @abstractmethod
    def critical_pressure(self) -> float: ...

    @abstractmethod
    def critical_temperature(self) -> float: ...

    @abstractmethod
    def min_pressure(self) -> float: ...

    @abstractmethod
    def max_pressure(self) -> float: ...

    @abstractmethod
    def min_temperature(self) -> float: ...

    @abstractmethod
    def max_temperature(self) -> float: ...

    # Required state properties

    @abstractmethod
    def temperature(self) -> float: ...

    @abstractmethod
    def pressure(self) -> float: ...

    @abstractmethod
    def vapor_quality(self) -> float: ...

    @abstractmethod
    def enthalpy(self) -> float: ...

    @abstractmethod
    def entropy(self) -> float: ...

    @abstractmethod
    def density(self) -> float: ...

    @abstractmethod
    def internal_energy(self) -> float: ...

    @abstractmethod
    def raw_phase(self) -> Any:
        """Return the backend's own phase code for the current state."""
        ...

    def phase(self) -> Phase:
        """Translate the backend phase code; unrecognized codes map to UNKNOWN."""
        return self.PHASE_MAP.get(self.raw_phase(), Phase.UNKNOWN)

    # Optional properties. The Fluid facade falls back to thermodynamic
    # relations where one exists, and otherwise reports the property as
    # unavailable.

    def gibbs_energy(self) -> float:
        raise NotImplementedError

    def helmholtz_energy(self) -> float:
        raise NotImplementedError

    def compressibility(self) -> float:
        raise NotImplementedError

    def cp(self) -> float:
        raise NotImplementedError

    def cv(self) -> float:
        raise NotImplementedError

    def speed_of_sound(self) -> float:
        raise NotImplementedError

    def isothermal_compressibility(self) -> float:
        raise NotImplementedError

    def thermal_expansion(self) -> float:
        raise NotImplementedError

    def dynamic_viscosity(self) -> float:
        raise NotImplementedError

    def thermal_conductivity(self) -> float:
        raise NotImplementedError
