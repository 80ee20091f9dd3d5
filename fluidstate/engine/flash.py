"""
One-shot flash calculation.

flash() leaves the caller's Fluid untouched: it works on a replayed copy and
reports a convergence failure as an invalid result instead of raising, so a
sweep over many state points can carry on past the points that do not solve.
"""

import logging
from typing import Optional

from fluidstate.config import Basis, Phase
from fluidstate.engine.batch import PropertyBatch
from fluidstate.engine.fluid import Fluid
from fluidstate.engine.quantities import KindLike, Quantity, QuantityKind, as_kind, make_quantity
from fluidstate.errors import ConvergenceFailure

logger = logging.getLogger(__name__)


class FlashResult:
    """Outcome of flash(): a fluid in the requested state, or the reason it is not."""

    def __init__(self, fluid: Fluid, error: Optional[str] = None):
        self.fluid = fluid
        self.error = error

    def __repr__(self) -> str:
        if self.valid:
            return f"FlashResult(state={self.fluid.state_kind.value})"
        return f"FlashResult(error={self.error!r})"

    @property
    def valid(self) -> bool:
        return self.error is None and self.fluid.has_state

    def property(self, kind: KindLike, basis: Basis = Basis.MOLAR):
        """Property of the flashed state; NaN when the flash did not converge."""
        kind = as_kind(kind)
        if not self.valid:
            if kind == QuantityKind.PHASE:
                return Phase.UNKNOWN
            return make_quantity(kind, float("nan"))
        return self.fluid.property(kind, basis)

    def properties(self, *kinds: KindLike, basis: Basis = Basis.MOLAR) -> PropertyBatch:
        if len(kinds) == 1 and isinstance(kinds[0], (list, tuple)):
            kinds = tuple(kinds[0])
        return PropertyBatch(self.fluid, kinds, basis=basis, valid=self.valid)


def flash(fluid: Fluid, q1: Quantity, q2: Quantity, basis: Basis = Basis.MOLAR) -> FlashResult:
    """
    Flash a copy of *fluid* to the state given by *q1* and *q2*.

    Raises:
        InvalidSpecification: If the pair is not supported.
    """
    result = fluid.copy()
    try:
        result.set_state(q1, q2, basis)
    except ConvergenceFailure as e:
        logger.warning("Flash to (%r, %r) did not converge: %s", q1, q2, e)
        return FlashResult(result, error=str(e))
    return FlashResult(result)
