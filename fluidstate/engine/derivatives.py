"""
Partial derivatives of one property with respect to another at a third held
constant, e.g. (dH/dT)_P.

A handful of derivatives follow exactly from the fundamental relations and are
read straight off the current state. Everything else is differenced
numerically: the state is re-set on a replayed copy of the fluid at points
either side of the current one, so the fluid itself never moves. The central
difference is refined with one Richardson extrapolation step.

All values are molar basis.
"""

import logging
from typing import TYPE_CHECKING, Callable

from fluidstate.engine.quantities import KindLike, QuantityKind, as_kind, make_quantity
from fluidstate.engine.specification import classify
from fluidstate.errors import StateNotSet

if TYPE_CHECKING:
    from fluidstate.engine.fluid import Fluid

logger = logging.getLogger(__name__)

K = QuantityKind

# Step as a fraction of the independent variable's current value
DEFAULT_RELATIVE_STEP = 1.0e-4

# (of, wrt, at_const) -> exact value at the current state
_IDENTITIES: dict[tuple[QuantityKind, QuantityKind, QuantityKind], Callable[["Fluid"], float]] = {
    (K.A, K.V, K.T): lambda f: -f.value(K.P),
    (K.A, K.T, K.V): lambda f: -f.value(K.S),
    (K.G, K.P, K.T): lambda f: f.value(K.V),
    (K.G, K.T, K.P): lambda f: -f.value(K.S),
    (K.S, K.T, K.V): lambda f: f.value(K.CV) / f.value(K.T),
    (K.S, K.T, K.P): lambda f: f.value(K.CP) / f.value(K.T),
}


def _central(func: Callable[[float], float], x0: float, step: float) -> float:
    return (func(x0 + step) - func(x0 - step)) / (2.0 * step)


def derivative(
    fluid: "Fluid",
    of: KindLike,
    wrt: KindLike,
    at_const: KindLike,
    relative_step: float = DEFAULT_RELATIVE_STEP,
) -> float:
    """
    Evaluate the partial derivative (d of / d wrt) at constant *at_const*.

    Args:
        fluid: Fluid holding a valid state. It is not modified.
        of: Property being differentiated.
        wrt: Independent variable.
        at_const: Property held constant. Together with *wrt* it must form a
            supported specification pair, since the state is re-set from it.
        relative_step: Differencing step as a fraction of the current value
            of *wrt*.

    Returns:
        The derivative in molar-basis units.

    Raises:
        StateNotSet: If the fluid holds no valid state.
        InvalidSpecification: If (wrt, at_const) is not a supported pair.
        ConvergenceFailure: If the backend fails at a differencing point.
    """
    of, wrt, at_const = as_kind(of), as_kind(wrt), as_kind(at_const)
    if not fluid.has_state:
        raise StateNotSet("No valid state: call set_state() first")

    identity = _IDENTITIES.get((of, wrt, at_const))
    if identity is not None:
        return identity(fluid)

    classify(wrt, at_const)
    if relative_step <= 0.0:
        raise ValueError(f"relative_step must be positive, got {relative_step}")

    probe = fluid.copy()
    held = fluid.property(at_const)
    x0 = fluid.value(wrt)
    step = relative_step * abs(x0) if x0 != 0.0 else relative_step

    def evaluate(x: float) -> float:
        probe.set_state(make_quantity(wrt, x), held)
        return probe.value(of)

    logger.debug(
        "Differencing d%s/d%s at constant %s around %r",
        of.value, wrt.value, at_const.value, x0,
    )
    coarse = _central(evaluate, x0, step)
    fine = _central(evaluate, x0, step / 2.0)
    return (4.0 * fine - coarse) / 3.0
