"""
Specification-pair resolver.

Maps an unordered pair of quantity kinds to one of the canonical StateKind
values, puts the two input values in the backend's argument order, and
dispatches the matching state-setting call.

Specific volume is not a StateKind of its own: any pair containing V is
rewritten to the corresponding density pair (Rho = 1/V) before dispatch.
"""

import logging
from dataclasses import dataclass

from fluidstate.config import SUPPORTED_SPECIFICATIONS, StateKind
from fluidstate.engine.backend import FluidBackend
from fluidstate.engine.quantities import Quantity, QuantityKind
from fluidstate.errors import InvalidSpecification

logger = logging.getLogger(__name__)

K = QuantityKind

# Canonical argument order for each StateKind
_CANONICAL_ORDER: dict[StateKind, tuple[QuantityKind, QuantityKind]] = {
    StateKind.PT: (K.P, K.T),
    StateKind.PX: (K.P, K.X),
    StateKind.PH: (K.P, K.H),
    StateKind.PS: (K.P, K.S),
    StateKind.DP: (K.RHO, K.P),
    StateKind.DT: (K.RHO, K.T),
    StateKind.DS: (K.RHO, K.S),
    StateKind.DH: (K.RHO, K.H),
    StateKind.DU: (K.RHO, K.U),
    StateKind.HS: (K.H, K.S),
    StateKind.PU: (K.P, K.U),
    StateKind.TS: (K.T, K.S),
    StateKind.TX: (K.T, K.X),
}

_STATE_KINDS: dict[frozenset, StateKind] = {
    frozenset(pair): kind for kind, pair in _CANONICAL_ORDER.items()
}

# Backend setter for each StateKind
_SETTERS: dict[StateKind, str] = {
    StateKind.PT: "set_state_pt",
    StateKind.PX: "set_state_px",
    StateKind.PH: "set_state_ph",
    StateKind.PS: "set_state_ps",
    StateKind.DP: "set_state_dp",
    StateKind.DT: "set_state_dt",
    StateKind.DS: "set_state_ds",
    StateKind.DH: "set_state_dh",
    StateKind.DU: "set_state_du",
    StateKind.HS: "set_state_hs",
    StateKind.PU: "set_state_pu",
    StateKind.TS: "set_state_ts",
    StateKind.TX: "set_state_tx",
}


@dataclass(frozen=True)
class Specification:
    """A resolved state specification: StateKind plus molar inputs in canonical order."""

    kind: StateKind
    first: float
    second: float


def _density_kind(kind: QuantityKind) -> QuantityKind:
    return K.RHO if kind == K.V else kind


def classify(kind_a: QuantityKind, kind_b: QuantityKind) -> StateKind:
    """
    Determine the StateKind for an unordered pair of quantity kinds.

    Raises:
        InvalidSpecification: If the pair is not one of the supported combinations.
    """
    key = frozenset((_density_kind(kind_a), _density_kind(kind_b)))
    try:
        return _STATE_KINDS[key]
    except KeyError:
        supported = [f"({a}, {b})" for a, b in SUPPORTED_SPECIFICATIONS]
        raise InvalidSpecification(
            f"Unsupported specification pair: ({kind_a.value}, {kind_b.value}). "
            f"Supported pairs: {', '.join(supported)}"
        ) from None


def resolve(q1: Quantity, q2: Quantity) -> Specification:
    """
    Resolve two molar-basis quantities into a canonical Specification.

    Argument order is irrelevant: (T, P) and (P, T) resolve identically.
    """
    state_kind = classify(q1.kind, q2.kind)
    values = {}
    for q in (q1, q2):
        if q.kind == K.V:
            if not q.value > 0.0:
                raise InvalidSpecification(f"Specific volume must be positive, got {q.value}")
            values[K.RHO] = 1.0 / q.value
        else:
            values[q.kind] = q.value

    first_kind, second_kind = _CANONICAL_ORDER[state_kind]
    return Specification(state_kind, values[first_kind], values[second_kind])


def canonical_order(state_kind: StateKind) -> tuple[QuantityKind, QuantityKind]:
    """Return the quantity kinds a StateKind takes, in backend argument order."""
    return _CANONICAL_ORDER[state_kind]


def dispatch(backend: FluidBackend, specification: Specification) -> None:
    """Invoke the backend state-setting call for *specification*."""
    logger.debug(
        "Dispatching %s(%r, %r)",
        specification.kind.value,
        specification.first,
        specification.second,
    )
    setter = getattr(backend, _SETTERS[specification.kind])
    setter(specification.first, specification.second)
