"""
Fluid facade.

Composes the specification resolver, unit conversion, two-phase
interpolation and batch retrieval on top of a single EOS backend instance.

A Fluid exclusively owns its backend. Copies are made by replaying the last
successful specification on a fresh backend, never by duplicating backend
internals.
"""

import logging
import math
from typing import Iterable, Optional, Union

from fluidstate.config import (
    DEFAULT_EOS,
    DEFAULT_FLUID,
    UNIVERSAL_GAS_CONSTANT,
    Basis,
    Phase,
    StateKind,
)
from fluidstate.engine.backend import FluidBackend
from fluidstate.engine.batch import PropertyBatch
from fluidstate.engine.coolprop_backend import CoolPropBackend
from fluidstate.engine.derivatives import derivative
from fluidstate.engine.quantities import (
    KindLike,
    Quantity,
    QuantityKind,
    as_kind,
    make_quantity,
)
from fluidstate.engine.specification import Specification, classify, dispatch, resolve
from fluidstate.engine.two_phase import TWO_PHASE_KINDS, interpolate_many, vapor_quality
from fluidstate.engine.units import UnitConverter, check_basis
from fluidstate.errors import ConvergenceFailure, PropertyUnavailable, StateNotSet

logger = logging.getLogger(__name__)

K = QuantityKind

# Kinds that can be read without a state having been set
_STATE_INDEPENDENT = frozenset({K.MW, K.T_CRIT, K.P_CRIT})

# Molar-basis inputs each derived kind is computed from
_DEPENDENCIES: dict[QuantityKind, frozenset] = {
    K.V: frozenset({K.RHO}),
    K.G: frozenset({K.H, K.S}),
    K.A: frozenset({K.U, K.S}),
    K.Z: frozenset({K.RHO}),
    K.NU: frozenset({K.RHO}),
    K.PR: frozenset({K.CP}),
}

_DIRECT_READERS = {
    K.H: "enthalpy",
    K.S: "entropy",
    K.RHO: "density",
    K.U: "internal_energy",
}

_OPTIONAL_READERS = {
    K.CP: "cp",
    K.CV: "cv",
    K.W: "speed_of_sound",
    K.KAPPA: "isothermal_compressibility",
    K.ALPHA: "thermal_expansion",
    K.ETA: "dynamic_viscosity",
    K.TC: "thermal_conductivity",
}

# Used when the backend lacks the optional getter
_DERIVATIVE_FALLBACKS = {
    K.CP: "_cp_from_derivative",
    K.CV: "_cv_from_derivative",
    K.W: "_w_from_derivative",
    K.KAPPA: "_kappa_from_derivative",
    K.ALPHA: "_alpha_from_derivative",
}


class _ReadPass:
    """
    One read of the current backend state for a fixed set of kinds.

    The phase is read once and, inside the dome, the saturated endpoints are
    probed once for every two-phase kind the request depends on.
    """

    def __init__(self, fluid: "Fluid", kinds: Iterable[QuantityKind]):
        self._fluid = fluid
        self._backend = fluid.backend
        self._values: dict[QuantityKind, Union[float, Phase]] = {}
        self.phase = self._backend.phase()

        if self.phase == Phase.TWO_PHASE:
            needed = set()
            for kind in kinds:
                needed.add(kind)
                needed |= _DEPENDENCIES.get(kind, frozenset())
            needed &= TWO_PHASE_KINDS
            if needed:
                self._values.update(interpolate_many(self._backend, needed))

    def molar(self, kind: QuantityKind) -> Union[float, Phase]:
        if kind not in self._values:
            self._values[kind] = self._compute(kind)
        return self._values[kind]

    def _optional(self, kind: QuantityKind) -> float:
        reader = _OPTIONAL_READERS[kind]
        try:
            return getattr(self._backend, reader)()
        except NotImplementedError:
            fallback = _DERIVATIVE_FALLBACKS.get(kind)
            if fallback is None or self.phase == Phase.TWO_PHASE:
                raise PropertyUnavailable(
                    f"{type(self._backend).__name__} does not provide {kind.value}"
                ) from None
        logger.debug("%s not provided by the backend, differencing instead", kind.value)
        return getattr(self, fallback)()

    # Derivative fallbacks, single phase only

    def _cp_from_derivative(self) -> float:
        return derivative(self._fluid, K.H, K.T, K.P)

    def _cv_from_derivative(self) -> float:
        return derivative(self._fluid, K.U, K.T, K.V)

    def _kappa_from_derivative(self) -> float:
        return -self.molar(K.RHO) * derivative(self._fluid, K.V, K.P, K.T)

    def _alpha_from_derivative(self) -> float:
        return self.molar(K.RHO) * derivative(self._fluid, K.V, K.T, K.P)

    def _w_from_derivative(self) -> float:
        v = self.molar(K.V)
        beta_s = -(self.molar(K.CV) / self.molar(K.CP)) / (v * derivative(self._fluid, K.P, K.V, K.T))
        return math.sqrt(v / (beta_s * self.molar(K.MW)))

    def _optional_or(self, reader: str, fallback) -> float:
        if self.phase != Phase.TWO_PHASE:
            try:
                return getattr(self._backend, reader)()
            except NotImplementedError:
                pass
        return fallback()

    def _compute(self, kind: QuantityKind) -> Union[float, Phase]:
        b = self._backend

        if kind == K.PHASE:
            return self.phase
        if kind == K.MW:
            return b.molar_mass()
        if kind == K.T:
            return b.temperature()
        if kind == K.P:
            return b.pressure()
        if kind == K.X:
            return vapor_quality(b)
        if kind in _DIRECT_READERS:
            return getattr(b, _DIRECT_READERS[kind])()
        if kind in _OPTIONAL_READERS:
            return self._optional(kind)

        if kind == K.V:
            return 1.0 / self.molar(K.RHO)
        if kind == K.G:
            return self._optional_or(
                "gibbs_energy",
                lambda: self.molar(K.H) - self.molar(K.T) * self.molar(K.S),
            )
        if kind == K.A:
            return self._optional_or(
                "helmholtz_energy",
                lambda: self.molar(K.U) - self.molar(K.T) * self.molar(K.S),
            )
        if kind == K.Z:
            return self._optional_or(
                "compressibility",
                lambda: self.molar(K.P) / (self.molar(K.RHO) * UNIVERSAL_GAS_CONSTANT * self.molar(K.T)),
            )
        if kind == K.NU:
            return self.molar(K.ETA) / (self.molar(K.RHO) * self.molar(K.MW))
        if kind == K.PR:
            cp_mass = self.molar(K.CP) / self.molar(K.MW)
            return cp_mass * self.molar(K.ETA) / self.molar(K.TC)

        if kind == K.T_SAT:
            return self._fluid._saturation_value(K.T)
        if kind == K.P_SAT:
            return self._fluid._saturation_value(K.P)
        if kind == K.T_CRIT:
            return b.critical_temperature()
        if kind == K.P_CRIT:
            return b.critical_pressure()

        raise PropertyUnavailable(f"No evaluation rule for {kind.value}")


def _state_independent(backend: FluidBackend, kind: QuantityKind) -> float:
    if kind == K.MW:
        return backend.molar_mass()
    if kind == K.T_CRIT:
        return backend.critical_temperature()
    return backend.critical_pressure()


def _temperature_or_pressure(kind: KindLike, operation: str) -> QuantityKind:
    kind = as_kind(kind)
    if kind not in (K.T, K.P):
        raise ValueError(f"{operation} is only defined for T and P, got {kind.value}")
    return kind


class Fluid:
    """A working fluid whose state is set from any supported pair of quantities."""

    def __init__(self, backend: Optional[FluidBackend] = None):
        self._backend = backend if backend is not None else CoolPropBackend()
        self._specification: Optional[Specification] = None

    @classmethod
    def from_name(cls, fluid: str = DEFAULT_FLUID, eos: str = DEFAULT_EOS) -> "Fluid":
        """Create a Fluid backed by CoolProp for the named fluid."""
        return cls(CoolPropBackend(fluid, eos))

    def __repr__(self) -> str:
        if self._specification is None:
            return f"Fluid({self._backend!r}, state=None)"
        spec = self._specification
        return f"Fluid({self._backend!r}, state={spec.kind.value}({spec.first!r}, {spec.second!r}))"

    @property
    def backend(self) -> FluidBackend:
        return self._backend

    @property
    def specification(self) -> Optional[Specification]:
        """The last successful specification, in molar basis."""
        return self._specification

    @property
    def state_kind(self) -> Optional[StateKind]:
        return self._specification.kind if self._specification is not None else None

    @property
    def has_state(self) -> bool:
        return self._specification is not None

    def _require_state(self) -> None:
        if self._specification is None:
            raise StateNotSet("No valid state: call set_state() first")

    def _converter(self) -> UnitConverter:
        return UnitConverter(self._backend.molar_mass())

    # ------------------------------------------------------------------
    # State setting
    # ------------------------------------------------------------------

    def set_state(self, q1: Quantity, q2: Quantity, basis: Basis = Basis.MOLAR) -> None:
        """
        Set the fluid state from two independent quantities.

        Args:
            q1, q2: Typed quantities forming a supported pair, in any order.
                Specific volume is accepted wherever density is.
            basis: Unit basis the input values are expressed in.

        Raises:
            InvalidSpecification: If the pair is not supported. The current
                state is left unchanged.
            ConvergenceFailure: If the backend fails to converge. The
                current state is invalidated.
        """
        for q in (q1, q2):
            if not isinstance(q, Quantity):
                raise TypeError(f"set_state() expects Quantity values, got {type(q).__name__}")
        basis = check_basis(basis)
        classify(q1.kind, q2.kind)

        if basis == Basis.MASS:
            converter = self._converter()
            q1 = make_quantity(q1.kind, converter.to_molar(q1.kind, q1.value))
            q2 = make_quantity(q2.kind, converter.to_molar(q2.kind, q2.value))

        specification = resolve(q1, q2)
        self._specification = None
        try:
            dispatch(self._backend, specification)
        except ConvergenceFailure as e:
            logger.warning("set_state %s failed: %s", specification.kind.value, e)
            raise
        self._specification = specification

    # ------------------------------------------------------------------
    # Property queries
    # ------------------------------------------------------------------

    def _read_many(self, kinds: list[QuantityKind], basis: Basis) -> list[Union[float, Phase]]:
        """Evaluate *kinds* in one pass and express them in *basis*."""
        if any(kind not in _STATE_INDEPENDENT for kind in kinds):
            self._require_state()
            read = _ReadPass(self, kinds)
        else:
            read = None

        converter = self._converter()
        values = []
        for kind in kinds:
            value = read.molar(kind) if read is not None else _state_independent(self._backend, kind)
            if isinstance(value, Phase):
                values.append(value)
            else:
                values.append(converter.to_basis(kind, value, basis))
        return values

    def value(self, kind: KindLike, basis: Basis = Basis.MOLAR) -> Union[float, Phase]:
        """Return the raw value of *kind* in *basis*."""
        kind = as_kind(kind)
        return self._read_many([kind], check_basis(basis))[0]

    def property(self, kind: KindLike, basis: Basis = Basis.MOLAR) -> Union[Quantity, Phase]:
        """
        Return *kind* as a typed Quantity (or the Phase for PHASE).

        Two-phase-sensitive properties are interpolated between the saturated
        endpoints when the current state is inside the dome.
        """
        kind = as_kind(kind)
        value = self.value(kind, basis)
        if isinstance(value, Phase):
            return value
        return make_quantity(kind, value)

    def properties(self, *kinds: KindLike, basis: Basis = Basis.MOLAR) -> PropertyBatch:
        """
        Start a batch request for several properties.

        The batch is marked invalid when the fluid holds no valid state, in
        which case it materializes as NaN without touching the backend.
        """
        if len(kinds) == 1 and isinstance(kinds[0], (list, tuple)):
            kinds = tuple(kinds[0])
        return PropertyBatch(self, kinds, basis=basis, valid=self.has_state)

    def phase(self) -> Phase:
        self._require_state()
        return self._backend.phase()

    def molar_mass(self) -> float:
        return self._backend.molar_mass()

    def _saturation_value(self, kind: QuantityKind) -> float:
        b = self._backend
        probe = b.new_instance()
        if kind == K.T:
            pressure = b.pressure()
            if pressure > b.critical_pressure():
                return math.nan
            probe.set_state_px(pressure, 0.0)
            return probe.temperature()

        temperature = b.temperature()
        if temperature > b.critical_temperature():
            return math.nan
        probe.set_state_tx(temperature, 0.0)
        return probe.pressure()

    def saturation(self, kind: KindLike) -> Quantity:
        """Saturation temperature at the current pressure, or pressure at the current temperature."""
        kind = _temperature_or_pressure(kind, "saturation")
        self._require_state()
        return make_quantity(kind, self._saturation_value(kind))

    def critical(self, kind: KindLike) -> Quantity:
        kind = _temperature_or_pressure(kind, "critical")
        if kind == K.T:
            return make_quantity(kind, self._backend.critical_temperature())
        return make_quantity(kind, self._backend.critical_pressure())

    def minimum(self, kind: KindLike) -> Quantity:
        kind = _temperature_or_pressure(kind, "minimum")
        if kind == K.T:
            return make_quantity(kind, self._backend.min_temperature())
        return make_quantity(kind, self._backend.min_pressure())

    def maximum(self, kind: KindLike) -> Quantity:
        kind = _temperature_or_pressure(kind, "maximum")
        if kind == K.T:
            return make_quantity(kind, self._backend.max_temperature())
        return make_quantity(kind, self._backend.max_pressure())

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def copy(self) -> "Fluid":
        """Return an independent Fluid in the same state, rebuilt by replay."""
        clone = Fluid(self._backend.new_instance())
        if self._specification is not None:
            dispatch(clone._backend, self._specification)
            clone._specification = self._specification
        return clone

    def __copy__(self) -> "Fluid":
        return self.copy()

    def __deepcopy__(self, memo) -> "Fluid":
        return self.copy()
